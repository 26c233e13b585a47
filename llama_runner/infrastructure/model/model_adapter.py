"""Model adapter implementation for the llama runner.

This module provides the adapter between the generation loop and the
underlying causal language model, implementing the InferenceInterface from
the domain layer. Every call is a full forward pass over the padded input;
no KV cache is kept between calls.
"""

from typing import Any

import torch

from llama_runner.domain.interfaces.model import InferenceInterface
from llama_runner.utils.error_manager import InferenceError, ErrorCode
from llama_runner.utils.exception_handlers import handle_inference_errors
from llama_runner.utils.logging_utils import LoggingMixin


class ModelAdapter(LoggingMixin, InferenceInterface):
    """Adapter for HuggingFace causal language models."""

    def __init__(self,
                 model: Any,
                 max_token_length: int,
                 vocab_size: int,
                 device: str = "cpu",
                 debug_mode: bool = None):
        """Initialize the model adapter.

        Args:
            model: The underlying language model
            max_token_length: Fixed input length expected by the model
            vocab_size: Minimum vocabulary width of the returned logits
            device: Device the model lives on
            debug_mode: Whether to enable debug logging
        """
        super().__init__()

        assert model is not None, "Model cannot be None"
        assert device in ["cpu", "cuda", "mps"], f"Unsupported device: {device}"

        self.model = model
        self.max_token_length = max_token_length
        self.vocab_size = vocab_size
        self.device = device

        self.setup_logging("model_adapter", debug_mode)

    def infer(self, input_tensor: torch.Tensor) -> torch.Tensor:
        """Run one forward pass and return validated logits.

        Args:
            input_tensor: Token ids of shape [1, max_token_length]

        Returns:
            Logits of shape [1, max_token_length, >= vocab_size]

        Raises:
            InferenceError: If the model call fails or the output shape is wrong
        """
        logits = self._forward(input_tensor)
        self._validate_logits(logits)

        if self.debug_mode:
            self.log(f"Forward pass completed, logits shape: {tuple(logits.shape)}", level="debug")

        return logits

    @handle_inference_errors(error_message="Model forward pass failed")
    def _forward(self, input_tensor: torch.Tensor) -> torch.Tensor:
        with torch.inference_mode():
            outputs = self.model(
                input_ids=input_tensor.to(self.device),
                use_cache=False,
                return_dict=True,
            )

        if not hasattr(outputs, "logits"):
            raise InferenceError(
                f"Model output of type {type(outputs).__name__} has no logits",
                code=ErrorCode.MODEL_OUTPUT_INVALID,
            )
        return outputs.logits

    def _validate_logits(self, logits: Any) -> None:
        """Check the output against the fixed [1, max_token_length, vocab] contract."""
        if not isinstance(logits, torch.Tensor):
            raise InferenceError(
                f"Expected logits tensor, got {type(logits).__name__}",
                code=ErrorCode.MODEL_OUTPUT_INVALID,
            )

        shape = tuple(logits.shape)
        if (len(shape) != 3 or shape[0] != 1 or shape[1] != self.max_token_length
                or shape[2] < self.vocab_size):
            raise InferenceError(
                f"Expected logits of shape (1, {self.max_token_length}, >={self.vocab_size}), got {shape}",
                code=ErrorCode.MODEL_OUTPUT_INVALID,
                shape=shape,
            )

    @property
    def config(self) -> Any:
        """Get model configuration, if the model has one."""
        return getattr(self.model, "config", None)

    @property
    def model_type(self) -> str:
        """Get model type from config."""
        return getattr(self.config, "model_type", "unknown").lower()
