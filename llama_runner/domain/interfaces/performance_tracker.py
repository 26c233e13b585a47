"""Performance tracker interface for the llama runner."""

from typing import Protocol
from abc import abstractmethod


class PerformanceTrackerInterface(Protocol):
    """Interface for tracking performance metrics."""

    @abstractmethod
    def track_tensor_build(self, duration: float) -> None:
        """Track input tensor construction."""
        ...

    @abstractmethod
    def track_model_call(self, duration: float) -> None:
        """Track a model forward pass."""
        ...

    @abstractmethod
    def track_decode(self, duration: float, num_tokens: int) -> None:
        """Track token decoding."""
        ...

    @abstractmethod
    def get_stats(self) -> dict:
        """Get performance statistics."""
        ...
