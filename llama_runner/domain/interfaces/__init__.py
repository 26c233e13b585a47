"""Domain interfaces for the llama runner.

Protocols implemented by the infrastructure layer.
"""

from .model import InferenceInterface
from .tokenizer import TokenizerInterface
from .token_selection import TokenSelectorInterface
from .tensors import TensorFeederInterface, LogitExtractorInterface
from .performance_tracker import PerformanceTrackerInterface

__all__ = [
    "InferenceInterface",
    "TokenizerInterface",
    "TokenSelectorInterface",
    "TensorFeederInterface",
    "LogitExtractorInterface",
    "PerformanceTrackerInterface",
]
