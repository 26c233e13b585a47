"""
Error taxonomy for the llama runner.

Every error ends the operation that raised it. A ResourceInitializationError
ends the runner before its first generate() call; tensor-build, inference
and generation errors end only the current call.
"""

import logging
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger("llama-runner-error")


class ErrorSeverity(Enum):
    """How far an error reaches."""

    CRITICAL = "CRITICAL"  # the runner is unusable
    ERROR = "ERROR"  # one generate() call is lost
    WARNING = "WARNING"  # caller input rejected, nothing ran


_LOG_LEVELS = {
    ErrorSeverity.CRITICAL: logging.CRITICAL,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.WARNING: logging.WARNING,
}


class ErrorCategory(Enum):
    """Pipeline stage an error belongs to; the prefix of its code."""

    INIT = "INIT"
    CONFIG = "CONFIG"
    TENSOR = "TENSOR"
    MODEL = "MODEL"
    GENERATION = "GENERATION"
    VALIDATION = "VALIDATION"
    UNKNOWN = "UNKNOWN"


class ErrorCode(Enum):
    """Stable identifiers, named <CATEGORY>_<WHAT>."""

    INIT_RESOURCE_FAILED = "INIT_RESOURCE_FAILED"
    INIT_COMPONENT_MISSING = "INIT_COMPONENT_MISSING"

    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_FILE_ERROR = "CONFIG_FILE_ERROR"

    TENSOR_BUILD_FAILED = "TENSOR_BUILD_FAILED"

    MODEL_INFERENCE_FAILED = "MODEL_INFERENCE_FAILED"
    MODEL_OUTPUT_INVALID = "MODEL_OUTPUT_INVALID"

    GENERATION_FAILED = "GENERATION_FAILED"
    GENERATION_NO_SELECTION = "GENERATION_NO_SELECTION"

    VALIDATION_ERROR = "VALIDATION_ERROR"

    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @property
    def category(self) -> ErrorCategory:
        prefix = self.value.split("_", 1)[0]
        try:
            return ErrorCategory(prefix)
        except ValueError:
            return ErrorCategory.UNKNOWN


@dataclass
class ErrorContext:
    """Where an error was raised, plus free-form details."""

    function: str
    file_path: str
    line_number: int
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def capture(cls, skip: int = 0) -> "ErrorContext":
        """Record whoever called the caller of capture(), ``skip`` frames further up."""
        stack = traceback.extract_stack()[:-(skip + 2)]
        if not stack:
            return cls(function="unknown", file_path="unknown", line_number=-1)
        frame = stack[-1]
        return cls(function=frame.name, file_path=frame.filename, line_number=frame.lineno or -1)

    @classmethod
    def from_exception(cls, error: BaseException) -> "ErrorContext":
        """Record the innermost frame of an exception's traceback."""
        frames = traceback.extract_tb(error.__traceback__)
        if not frames:
            return cls.capture(skip=1)
        frame = frames[-1]
        return cls(function=frame.name, file_path=frame.filename, line_number=frame.lineno or -1)


class RunnerError(Exception):
    """Base class for every error the runner raises.

    Subclasses pick their code and severity through ``default_code`` and
    ``default_severity``. Keyword arguments beyond the named ones are kept
    as details on the context. The error logs itself once, on construction.
    """

    default_code = ErrorCode.UNKNOWN_ERROR
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        severity: Optional[ErrorSeverity] = None,
        context: Optional[ErrorContext] = None,
        cause: Optional[BaseException] = None,
        **details,
    ):
        self.message = message
        self.code = code or self.default_code
        self.severity = severity or self.default_severity
        self.cause = cause
        self.context = context or ErrorContext.capture()
        self.context.details.update(details)

        text = f"{self.code.value}: {message}"
        if cause is not None:
            text += f" (Caused by: {type(cause).__name__}: {cause})"
        super().__init__(text)

        logger.log(_LOG_LEVELS[self.severity], self._log_record())

    @property
    def category(self) -> ErrorCategory:
        return self.code.category

    def _log_record(self) -> str:
        lines = [
            f"[{self.code.value}] {self.message}",
            f"  at {self.context.function} ({self.context.file_path}:{self.context.line_number})",
        ]
        lines.extend(f"  {key}: {value}" for key, value in self.context.details.items())
        if self.cause is not None and self.cause.__traceback__ is not None:
            lines.append(f"  caused by {type(self.cause).__name__}: {self.cause}")
            lines.extend(
                "    " + line.rstrip() for line in traceback.format_tb(self.cause.__traceback__)
            )
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation for JSON output."""
        data = {
            "code": self.code.value,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "location": f"{self.context.function}:{self.context.line_number}",
        }
        if self.context.details:
            data["details"] = dict(self.context.details)
        if self.cause is not None:
            data["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}
        return data


class ResourceInitializationError(RunnerError):
    """The model or its configuration failed to load."""

    default_code = ErrorCode.INIT_RESOURCE_FAILED
    default_severity = ErrorSeverity.CRITICAL


class ConfigurationError(RunnerError):
    """A configuration value or file is invalid."""

    default_code = ErrorCode.CONFIG_INVALID


class TensorBuildError(RunnerError):
    """The fixed-shape input tensor could not be allocated or filled."""

    default_code = ErrorCode.TENSOR_BUILD_FAILED


class InferenceError(RunnerError):
    """The model call failed or produced an unusable output."""

    default_code = ErrorCode.MODEL_INFERENCE_FAILED


class GenerationError(RunnerError):
    """The generation loop could not continue."""

    default_code = ErrorCode.GENERATION_FAILED


class ValidationError(RunnerError):
    """Caller input was rejected before any inference."""

    default_code = ErrorCode.VALIDATION_ERROR
    default_severity = ErrorSeverity.WARNING

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        if field:
            kwargs["field"] = field
        super().__init__(message, **kwargs)
