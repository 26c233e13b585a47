"""Memory check run before a model is loaded.

Weights dominate memory use; the per-step input and logits tensors are small
and fixed-size, so one snapshot at load time is enough.
"""

from dataclasses import dataclass
from typing import Optional

import psutil
import torch

from llama_runner.utils.logger import get_logger

logger = get_logger("memory_monitor")

GB = 1024 ** 3


@dataclass
class MemorySnapshot:
    """System (and CUDA, when in use) memory at one moment, in GB."""
    total_gb: float
    used_gb: float
    available_gb: float
    percent_used: float
    cuda_allocated_gb: Optional[float] = None
    cuda_reserved_gb: Optional[float] = None

    @classmethod
    def take(cls, device: str = "cpu") -> "MemorySnapshot":
        vm = psutil.virtual_memory()
        snapshot = cls(
            total_gb=vm.total / GB,
            used_gb=vm.used / GB,
            available_gb=vm.available / GB,
            percent_used=vm.percent,
        )
        if device == "cuda" and torch.cuda.is_available():
            snapshot.cuda_allocated_gb = torch.cuda.memory_allocated() / GB
            snapshot.cuda_reserved_gb = torch.cuda.memory_reserved() / GB
        return snapshot


def check_memory_headroom(device: str = "cpu", warning_threshold: float = 0.85) -> bool:
    """
    Log memory usage and warn when it is already high.

    Args:
        device: Device the model will be placed on
        warning_threshold: Fraction of system memory in use that counts as high

    Returns:
        False when usage is at or above the threshold
    """
    assert 0 < warning_threshold <= 1, "warning_threshold must be in (0, 1]"

    snapshot = MemorySnapshot.take(device)
    logger.info(
        f"Memory before model load: {snapshot.used_gb:.1f}/{snapshot.total_gb:.1f}GB used, "
        f"{snapshot.available_gb:.1f}GB available",
        device=device,
    )

    if snapshot.percent_used / 100 >= warning_threshold:
        logger.warning(f"Memory usage at {snapshot.percent_used:.0f}%, loading may fail")
        return False
    return True
