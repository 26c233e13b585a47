"""Greedy token selector implementation.

This module implements argmax token selection: the highest-scoring token is
chosen at every step, ties going to the lowest token id.
"""

from typing import Optional, Sequence, Union

import torch

from llama_runner.domain.entities.logits import ScoreVector
from llama_runner.domain.interfaces.token_selection import TokenSelectorInterface
from llama_runner.utils.logging_utils import LoggingMixin


class GreedyTokenSelector(LoggingMixin, TokenSelectorInterface):
    """Selects the highest-scoring token."""

    def __init__(self, debug_mode: bool = None):
        """Initialize the greedy token selector.

        Args:
            debug_mode: Whether to enable debug logging
        """
        super().__init__()
        self.setup_logging("greedy_token_selector", debug_mode)

    def select(self, scores: Union[ScoreVector, torch.Tensor, Sequence[float]]) -> Optional[int]:
        """Select the index of the maximum score.

        Args:
            scores: Score per vocabulary entry

        Returns:
            Index of the first maximum, or None for an empty vector
        """
        if isinstance(scores, ScoreVector):
            tensor = scores.tensor
        else:
            tensor = torch.as_tensor(scores, dtype=torch.float32)

        tensor = tensor.reshape(-1)
        if tensor.numel() == 0:
            return None

        # torch.argmax returns the first maximal index
        token_id = int(torch.argmax(tensor).item())

        if self.debug_mode:
            self.log(f"Selected token {token_id} with score {tensor[token_id].item():.4f}", level="debug")

        return token_id
