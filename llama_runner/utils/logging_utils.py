"""
LoggingMixin: gives runner components a named logger and a debug-gated
``log()``.
"""

from typing import Optional

from llama_runner.utils.config_manager import DebugConfig, RunnerConfig, config
from llama_runner.utils.logger import configure_logging, get_logger


VALID_LEVELS = ["info", "debug", "warning", "error", "critical"]

# Debug switches consulted by setup_logging(); replaced by apply_runner_config()
_debug_settings: DebugConfig = config.debug


def apply_runner_config(runner_config: RunnerConfig):
    """
    Use the logging and debug sections of ``runner_config`` for the process.

    Components set up after this call resolve their debug mode from
    ``runner_config.debug``.
    """
    global _debug_settings
    _debug_settings = runner_config.debug
    configure_logging(runner_config.logging)


class LoggingMixin:
    """
    Mixin for components that log.

    Usage:
        class TensorFeeder(LoggingMixin, TensorFeederInterface):
            def __init__(self, ...):
                super().__init__()
                self.setup_logging("tensor_feeder", debug_mode)

    ``log()`` only emits in debug mode. Records that must always appear
    (termination notices, errors) go through ``self._runner_logger``.
    """

    def setup_logging(self, logger_name: str, debug_mode: Optional[bool] = None):
        """
        Attach the named logger.

        Args:
            logger_name: Component name; also the suffix of its
                LLAMA_RUNNER_DEBUG_<NAME> switch
            debug_mode: Force debug on or off instead of reading the configuration
        """
        if debug_mode is None:
            debug_mode = _debug_settings.is_debug_enabled(logger_name)

        self._runner_logger = get_logger(logger_name)
        self.logger = self._runner_logger.logger
        self.debug_mode = debug_mode

        if debug_mode:
            self._runner_logger.enable_debug()

    def log(self, message: str, level: str = "info", **kwargs):
        """
        Log ``message`` at ``level`` when debug mode is on.

        Keyword arguments are appended to the record as key=value pairs.
        """
        if not getattr(self, "debug_mode", False):
            return

        if level not in VALID_LEVELS:
            raise ValueError(f"Invalid log level: {level}. Must be one of {VALID_LEVELS}")

        getattr(self._runner_logger, level)(message, **kwargs)

    def operation(self, operation_name: str):
        """Timed, logged block; see RunnerLogger.operation."""
        return self._runner_logger.operation(operation_name)
