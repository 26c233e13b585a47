"""Token selection infrastructure for the llama runner."""

from .greedy_token_selector import GreedyTokenSelector

__all__ = ["GreedyTokenSelector"]
