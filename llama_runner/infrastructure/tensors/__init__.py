"""Tensor infrastructure for the llama runner.

Packing token sequences into the model input and reading scores back out.
"""

from .tensor_feeder import TensorFeeder
from .logit_extractor import LogitExtractor

__all__ = ["TensorFeeder", "LogitExtractor"]
