"""
Boundary decorators that translate torch, transformers and numpy failures
into the runner's error taxonomy.

A RunnerError raised inside a decorated function passes through untouched;
anything else is re-raised as the decorator's error class, chained to the
original exception and located at the frame that raised it.
"""

import functools
from typing import Callable, Type, TypeVar

from llama_runner.utils.error_manager import (
    ErrorCode, ErrorContext, InferenceError, ResourceInitializationError,
    RunnerError, TensorBuildError,
)
from llama_runner.utils.logger import get_logger

logger = get_logger("exception_handlers")

T = TypeVar("T")


def handle_exceptions(
    error_message: str = "An error occurred",
    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
    error_class: Type[RunnerError] = RunnerError,
    log_level: str = "debug",
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Wrap foreign exceptions raised by the decorated function.

    Args:
        error_message: Prefix for the wrapped error's message
        error_code: Code for the wrapped error
        error_class: RunnerError subclass to raise
        log_level: Level of the "wrapped" record on the handlers logger
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        where = f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except RunnerError:
                raise
            except Exception as e:
                error = error_class(
                    f"{error_message} in {where}",
                    code=error_code,
                    cause=e,
                    context=ErrorContext.from_exception(e),
                )
                getattr(logger, log_level)(f"Wrapped {type(e).__name__} from {where}")
                raise error from e

        return wrapper
    return decorator


def handle_resource_errors(error_message: str = "Failed to initialize resource", **kwargs):
    """Model and configuration loading: ResourceInitializationError."""
    kwargs.setdefault("error_code", ErrorCode.INIT_RESOURCE_FAILED)
    return handle_exceptions(error_message, error_class=ResourceInitializationError, **kwargs)


def handle_tensor_errors(error_message: str = "Failed to build input tensor", **kwargs):
    """Input allocation and filling: TensorBuildError."""
    kwargs.setdefault("error_code", ErrorCode.TENSOR_BUILD_FAILED)
    return handle_exceptions(error_message, error_class=TensorBuildError, **kwargs)


def handle_inference_errors(error_message: str = "Model inference failed", **kwargs):
    """Model forward passes: InferenceError."""
    kwargs.setdefault("error_code", ErrorCode.MODEL_INFERENCE_FAILED)
    return handle_exceptions(error_message, error_class=InferenceError, **kwargs)
