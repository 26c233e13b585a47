"""Performance tracking implementation for the llama runner.

This module implements performance tracking for the steps of the greedy
generation loop.
"""

import time
from typing import Dict

from llama_runner.domain.interfaces.performance_tracker import PerformanceTrackerInterface
from llama_runner.utils.logging_utils import LoggingMixin


def _empty_stats() -> Dict[str, float]:
    return {
        "tensor_builds": 0,
        "tensor_build_time": 0.0,
        "model_calls": 0,
        "model_time": 0.0,
        "decode_calls": 0,
        "decode_time": 0.0,
        "decode_tokens": 0,
        "start_time": time.time(),
    }


class PerformanceTracker(LoggingMixin, PerformanceTrackerInterface):
    """Tracks performance metrics for generation operations."""

    def __init__(self, debug_mode: bool = None):
        """Initialize the performance tracker."""
        super().__init__()
        self.stats = _empty_stats()
        self.setup_logging("performance_tracker", debug_mode)

    def track_tensor_build(self, duration: float) -> None:
        """Track input tensor construction.

        Args:
            duration: Time taken to build the tensor
        """
        self.stats["tensor_builds"] += 1
        self.stats["tensor_build_time"] += duration

    def track_model_call(self, duration: float) -> None:
        """Track a model forward pass.

        Args:
            duration: Time taken for the forward pass
        """
        self.stats["model_calls"] += 1
        self.stats["model_time"] += duration

    def track_decode(self, duration: float, num_tokens: int) -> None:
        """Track token decoding.

        Args:
            duration: Time taken for decoding
            num_tokens: Number of tokens decoded
        """
        self.stats["decode_calls"] += 1
        self.stats["decode_time"] += duration
        self.stats["decode_tokens"] += num_tokens

    def get_stats(self) -> Dict:
        """Get performance statistics with derived averages."""
        stats = self.stats.copy()

        stats["avg_tensor_build_time"] = (
            stats["tensor_build_time"] / stats["tensor_builds"] if stats["tensor_builds"] else 0.0
        )
        stats["avg_model_time"] = (
            stats["model_time"] / stats["model_calls"] if stats["model_calls"] else 0.0
        )
        stats["avg_decode_time"] = (
            stats["decode_time"] / stats["decode_calls"] if stats["decode_calls"] else 0.0
        )
        stats["tokens_per_second"] = (
            stats["model_calls"] / stats["model_time"] if stats["model_time"] > 0 else 0.0
        )
        stats["total_elapsed_time"] = time.time() - stats["start_time"]

        return stats

    def print_stats(self) -> None:
        """Print performance statistics."""
        stats = self.get_stats()

        print("\nPerformance Statistics:")
        print(f"  Total elapsed time: {stats['total_elapsed_time']:.2f}s")

        print("\n  Input Tensors:")
        print(f"    Builds: {stats['tensor_builds']}")
        print(f"    Average time: {stats['avg_tensor_build_time']*1000:.2f}ms")

        print("\n  Model Forward Pass:")
        print(f"    Calls: {stats['model_calls']}")
        print(f"    Total time: {stats['model_time']:.4f}s")
        print(f"    Average time: {stats['avg_model_time']*1000:.2f}ms")
        print(f"    Tokens/second: {stats['tokens_per_second']:.2f}")

        print("\n  Token Decoding:")
        print(f"    Calls: {stats['decode_calls']}")
        print(f"    Tokens decoded: {stats['decode_tokens']}")
        print(f"    Average time: {stats['avg_decode_time']*1000:.2f}ms")

    def reset(self) -> None:
        """Reset all performance statistics."""
        self.stats = _empty_stats()

        if self.debug_mode:
            self.log("Reset performance statistics")
