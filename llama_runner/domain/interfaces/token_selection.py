"""Token selection interface for the llama runner."""

from typing import Protocol, Optional
from abc import abstractmethod

from ..entities.logits import ScoreVector


class TokenSelectorInterface(Protocol):
    """Interface for choosing the next token from a score vector."""

    @abstractmethod
    def select(self, scores: ScoreVector) -> Optional[int]:
        """Select the next token id.

        Args:
            scores: Scores for every vocabulary entry at the last position

        Returns:
            The selected token id, or None if nothing could be selected
        """
        ...
