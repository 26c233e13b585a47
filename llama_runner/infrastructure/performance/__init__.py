"""Performance tracking infrastructure for the llama runner."""

from .performance_tracker import PerformanceTracker

__all__ = ["PerformanceTracker"]
