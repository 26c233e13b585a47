"""Application services for the llama runner."""

from .model_service import ModelService

__all__ = ["ModelService"]
