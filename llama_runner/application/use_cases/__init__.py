"""Use cases for the llama runner application layer."""

from .generate_text import GenerateTextUseCase

__all__ = ["GenerateTextUseCase"]
