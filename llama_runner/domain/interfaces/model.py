"""Inference interface for the llama runner.

The model is an opaque capability: a fixed-shape input tensor goes in, a
logits tensor of shape [1, max_token_length, vocab_size] comes out.
"""

from typing import Protocol
from abc import abstractmethod

import torch


class InferenceInterface(Protocol):
    """Interface for a stateless model forward pass."""

    @abstractmethod
    def infer(self, input_tensor: torch.Tensor) -> torch.Tensor:
        """Run a full forward pass over the padded input.

        Args:
            input_tensor: Token ids of shape [1, max_token_length]

        Returns:
            Logits of shape [1, max_token_length, vocab_size]

        Raises:
            InferenceError: If the model call fails or returns an unusable tensor
        """
        ...
