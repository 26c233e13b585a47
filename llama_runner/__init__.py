"""
llama runner: greedy token-by-token generation over a fixed-shape causal
language model, with a placeholder ASCII tokenizer.
"""

__version__ = "0.1.0"

from .runner import LlamaRunner

__all__ = ["LlamaRunner", "__version__"]
