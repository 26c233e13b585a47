"""Adapter for packaged models with a feature-dictionary predict() call.

Converted on-device model packages expose ``predict({name: array}) ->
{name: array}`` rather than a torch forward. Ids are fed as float32 arrays
and the logits come back as a named output feature.
"""

from typing import Any, Optional

import numpy as np
import torch

from llama_runner.utils.error_manager import InferenceError, ErrorCode
from llama_runner.utils.exception_handlers import handle_inference_errors
from .model_adapter import ModelAdapter


class FeatureDictModelAdapter(ModelAdapter):
    """Adapter for models called as ``model.predict(features)``."""

    def __init__(self,
                 model: Any,
                 max_token_length: int,
                 vocab_size: int,
                 input_feature: str = "input_ids",
                 output_feature: Optional[str] = None,
                 input_dtype: np.dtype = np.float32,
                 debug_mode: bool = None):
        """Initialize the adapter.

        Args:
            model: Object with a ``predict(dict) -> dict`` method
            max_token_length: Fixed input length expected by the model
            vocab_size: Minimum vocabulary width of the returned logits
            input_feature: Name of the input feature
            output_feature: Name of the logits output; None takes the only output
            input_dtype: numpy dtype of the input array
            debug_mode: Whether to enable debug logging
        """
        assert hasattr(model, "predict"), "Model must have a predict method"
        super().__init__(model, max_token_length, vocab_size, device="cpu", debug_mode=debug_mode)

        self.input_feature = input_feature
        self.output_feature = output_feature
        self.input_dtype = input_dtype

    @handle_inference_errors(error_message="Model predict call failed")
    def _forward(self, input_tensor: torch.Tensor) -> torch.Tensor:
        features = {self.input_feature: input_tensor.cpu().numpy().astype(self.input_dtype)}
        outputs = self.model.predict(features)

        if self.output_feature is not None:
            if self.output_feature not in outputs:
                raise InferenceError(
                    f"Output feature '{self.output_feature}' missing, got {sorted(outputs)}",
                    code=ErrorCode.MODEL_OUTPUT_INVALID,
                )
            logits = outputs[self.output_feature]
        elif len(outputs) == 1:
            logits = next(iter(outputs.values()))
        else:
            raise InferenceError(
                f"Model returned {len(outputs)} outputs; set output_feature to pick the logits",
                code=ErrorCode.MODEL_OUTPUT_INVALID,
            )

        return torch.from_numpy(np.asarray(logits, dtype=np.float32))
