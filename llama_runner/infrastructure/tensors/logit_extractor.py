"""Logit extraction for the last valid sequence position."""

import torch

from llama_runner.domain.entities.logits import ScoreVector
from llama_runner.domain.interfaces.tensors import LogitExtractorInterface
from llama_runner.utils.error_manager import ErrorCode, InferenceError


class LogitExtractor(LogitExtractorInterface):
    """Slices logits[0, position, :vocab_size] into a ScoreVector.

    Models whose output vocabulary is wider than ``vocab_size`` are read
    only up to ``vocab_size``. Any other shape is reported as
    MODEL_OUTPUT_INVALID, whichever inference adapter produced it.
    """

    def __init__(self, vocab_size: int):
        assert vocab_size > 0, "vocab_size must be positive"
        self.vocab_size = vocab_size

    def extract(self, logits: torch.Tensor, position: int) -> ScoreVector:
        if not isinstance(logits, torch.Tensor):
            self._invalid(f"Logits must be a tensor, got {type(logits).__name__}")
        if logits.dim() != 3:
            self._invalid(f"Logits must be 3D [batch, seq, vocab], got {logits.dim()}D",
                          shape=tuple(logits.shape))
        if not 0 <= position < logits.shape[1]:
            self._invalid(f"Position {position} out of range [0, {logits.shape[1]})",
                          shape=tuple(logits.shape))
        if logits.shape[2] < self.vocab_size:
            self._invalid(
                f"Logits vocabulary {logits.shape[2]} smaller than vocab_size {self.vocab_size}",
                shape=tuple(logits.shape),
            )

        scores = logits[0, position, :self.vocab_size].detach().float()
        return ScoreVector(tensor=scores, sequence_position=position)

    @staticmethod
    def _invalid(message: str, **details):
        raise InferenceError(message, code=ErrorCode.MODEL_OUTPUT_INVALID, **details)
