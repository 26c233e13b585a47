"""
Utilities for the llama runner.

Configuration, logging and error handling shared by every layer.
"""

# Re-export the configuration manager for easy imports
from llama_runner.utils.config_manager import config, RunnerConfig, get_debug_mode

__all__ = ["config", "RunnerConfig", "get_debug_mode"]
