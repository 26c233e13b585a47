"""Tensor handling interfaces for the llama runner.

These describe the two pure tensor steps around the model call: packing the
token sequence into the fixed-shape input, and slicing the logits back out.
"""

from typing import Protocol, Sequence
from abc import abstractmethod

import torch

from ..entities.logits import ScoreVector


class TensorFeederInterface(Protocol):
    """Interface for building the fixed-shape model input."""

    @abstractmethod
    def build(self, token_ids: Sequence[int]) -> torch.Tensor:
        """Pack token ids into a [1, max_token_length] tensor, padding the rest.

        Raises:
            TensorBuildError: If the tensor cannot be allocated
        """
        ...


class LogitExtractorInterface(Protocol):
    """Interface for reading next-token scores out of the logits tensor."""

    @abstractmethod
    def extract(self, logits: torch.Tensor, position: int) -> ScoreVector:
        """Return logits[0, position, :vocab_size] as a ScoreVector.

        Raises:
            InferenceError: MODEL_OUTPUT_INVALID if the logits are not a 3D
                tensor covering the position and the vocabulary
        """
        ...
