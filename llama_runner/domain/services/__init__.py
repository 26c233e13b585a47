"""Domain services for the llama runner."""

from .generation_loop import GenerationLoop

__all__ = ["GenerationLoop"]
