"""Score vector value object for the llama runner."""

from dataclasses import dataclass

import torch


@dataclass(frozen=True)
class ScoreVector:
    """Next-token scores taken from one sequence position of the logits tensor."""
    tensor: torch.Tensor
    sequence_position: int

    def __post_init__(self):
        """Validate score vector properties."""
        if self.tensor.dim() != 1:
            raise ValueError(f"Score vector must be 1-dimensional, got {self.tensor.dim()}D")
        if self.sequence_position < 0:
            raise ValueError(f"Sequence position must be non-negative, got {self.sequence_position}")

    @property
    def vocab_size(self) -> int:
        """Number of scores, one per vocabulary entry."""
        return self.tensor.shape[0]

    def __len__(self) -> int:
        return self.vocab_size
