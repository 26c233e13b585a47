"""Tokenization infrastructure for the llama runner."""

from .ascii_tokenizer import AsciiTokenizer

__all__ = ["AsciiTokenizer"]
