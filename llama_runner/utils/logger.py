"""
Component loggers for the llama runner.

Each component gets a named RunnerLogger built on the standard ``logging``
module. Records go to stderr, since stdout carries the streamed generation
output, and optionally to a rotating file per component under the configured
``log_dir``. The settings come from the environment at import time and can
be replaced for the whole process with ``configure_logging()``. Keyword
arguments given to a log call, and any context bound with ``context()``,
are appended to the line as key=value pairs.
"""

import logging
import sys
import threading
import time
from contextlib import contextmanager
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict

from llama_runner.utils.config_manager import LoggingConfig, config

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s%(context_str)s"
FILE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - "
    "%(message)s%(context_str)s"
)
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3
MAX_VALUE_LENGTH = 80

_local = threading.local()

# Settings every RunnerLogger is built from; replaced by configure_logging()
_settings: LoggingConfig = config.logging


def _bound_context() -> Dict[str, Any]:
    return getattr(_local, "context", {})


def _render(value: Any) -> str:
    text = str(value)
    if len(text) > MAX_VALUE_LENGTH:
        return text[:MAX_VALUE_LENGTH] + "..."
    return text


class ContextFormatter(logging.Formatter):
    """Adds ``context_str`` (the bound key=value pairs) to every record."""

    def format(self, record):
        pairs = " ".join(f"{key}={_render(value)}" for key, value in _bound_context().items())
        record.context_str = f" | {pairs}" if pairs else ""
        return super().format(record)


class RunnerLogger:
    """Named logger with key=value context and timed operations."""

    def __init__(self, name: str):
        self.name = name
        self.debug_enabled = False
        self.logger = logging.getLogger(name)
        self.logger.propagate = False
        self.apply(_settings)

    def apply(self, settings: LoggingConfig):
        """Replace this logger's handlers and level with ones built from ``settings``."""
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        self.logger.setLevel(logging.DEBUG if self.debug_enabled else settings.log_level)

        if settings.console_logging:
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(ContextFormatter(CONSOLE_FORMAT))
            self.logger.addHandler(console)

        if settings.enable_file_logging:
            self.logger.addHandler(self._file_handler(settings.log_dir))

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def enable_debug(self):
        """Log at DEBUG regardless of the configured level, across later apply() calls."""
        self.debug_enabled = True
        self.logger.setLevel(logging.DEBUG)

    def _file_handler(self, log_dir: str) -> RotatingFileHandler:
        path = Path(log_dir) / f"{self.name.replace('.', '_')}.log"
        path.parent.mkdir(parents=True, exist_ok=True)

        handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS)
        handler.setFormatter(ContextFormatter(FILE_FORMAT))
        # One marker line each time the file is opened
        handler.stream.write(f"--- {self.name} session {datetime.now().isoformat()} ---\n")
        return handler

    def _log(self, level: int, msg: str, *args, exc_info=None, **context):
        with self.context(**context):
            # stacklevel 3 attributes the record to whoever called debug()/info()/...
            self.logger.log(level, msg, *args, exc_info=exc_info, stacklevel=3)

    def debug(self, msg, *args, **kwargs):
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg, *args, **kwargs):
        self._log(logging.CRITICAL, msg, *args, **kwargs)

    @contextmanager
    def context(self, **pairs):
        """Bind key=value pairs to every record logged in this thread inside the block."""
        previous = _bound_context()
        _local.context = {**previous, **pairs}
        try:
            yield
        finally:
            _local.context = previous

    @contextmanager
    def operation(self, name: str, level: int = logging.INFO):
        """Log the start, duration and outcome of a block.

        Exceptions are logged and re-raised.
        """
        self._log(level, f"Starting {name}")
        start = time.time()
        try:
            yield
        except Exception as e:
            self._log(
                logging.ERROR,
                f"{name} failed after {time.time() - start:.3f}s: {e}",
                operation=name,
                error_type=type(e).__name__,
            )
            raise
        self._log(level, f"Finished {name} in {time.time() - start:.3f}s", operation=name)


_loggers: Dict[str, RunnerLogger] = {}


def get_logger(name: str) -> RunnerLogger:
    """Return the RunnerLogger for ``name``, creating it on first use."""
    if name not in _loggers:
        _loggers[name] = RunnerLogger(name)
    return _loggers[name]


def configure_logging(settings: LoggingConfig):
    """
    Make ``settings`` the logging configuration of the process.

    Existing loggers have their handlers rebuilt; loggers created later
    start from the same settings.
    """
    global _settings
    _settings = settings
    for runner_logger in _loggers.values():
        runner_logger.apply(settings)
