"""Model infrastructure for the llama runner.

Adapters that expose the underlying model as a single ``infer`` call.
"""

from .model_adapter import ModelAdapter
from .feature_dict_adapter import FeatureDictModelAdapter

__all__ = ["ModelAdapter", "FeatureDictModelAdapter"]
