import logging

import pytest

from llama_runner.utils.error_manager import (
    ErrorCategory, ErrorCode, ErrorSeverity, GenerationError, InferenceError,
    ResourceInitializationError, RunnerError, TensorBuildError, ValidationError,
)
from llama_runner.utils.exception_handlers import (
    handle_exceptions, handle_inference_errors, handle_resource_errors, handle_tensor_errors,
)


class TestRunnerError:
    """Test suite for the error hierarchy."""

    def test_message_format(self):
        error = RunnerError("boom")

        assert str(error) == "UNKNOWN_ERROR: boom"
        assert error.message == "boom"
        assert error.category == ErrorCategory.UNKNOWN
        assert error.context.function == "test_message_format"

    def test_message_includes_cause(self):
        error = InferenceError("forward failed", cause=ValueError("bad"))

        assert str(error) == "MODEL_INFERENCE_FAILED: forward failed (Caused by: ValueError: bad)"

    @pytest.mark.parametrize(
        "error_class, code, severity, category",
        [
            (ResourceInitializationError, ErrorCode.INIT_RESOURCE_FAILED,
             ErrorSeverity.CRITICAL, ErrorCategory.INIT),
            (TensorBuildError, ErrorCode.TENSOR_BUILD_FAILED,
             ErrorSeverity.ERROR, ErrorCategory.TENSOR),
            (InferenceError, ErrorCode.MODEL_INFERENCE_FAILED,
             ErrorSeverity.ERROR, ErrorCategory.MODEL),
            (GenerationError, ErrorCode.GENERATION_FAILED,
             ErrorSeverity.ERROR, ErrorCategory.GENERATION),
        ],
    )
    def test_subclass_defaults(self, error_class, code, severity, category):
        error = error_class("failed")

        assert isinstance(error, RunnerError)
        assert error.code == code
        assert error.severity == severity
        assert error.category == category

    def test_explicit_code_sets_category(self):
        error = GenerationError("nothing selected", code=ErrorCode.GENERATION_NO_SELECTION)

        assert error.category == ErrorCategory.GENERATION

    def test_validation_error_field(self):
        error = ValidationError("prompt too long", field="prompt")

        assert error.severity == ErrorSeverity.WARNING
        assert error.context.details["field"] == "prompt"

    def test_to_dict(self):
        error = InferenceError("bad shape", code=ErrorCode.MODEL_OUTPUT_INVALID,
                               cause=RuntimeError("x"), shape=(1, 2))

        data = error.to_dict()

        assert data["code"] == "MODEL_OUTPUT_INVALID"
        assert data["category"] == "MODEL"
        assert data["message"] == "bad shape"
        assert data["details"] == {"shape": (1, 2)}
        assert data["cause"] == {"type": "RuntimeError", "message": "x"}

    def test_error_is_logged_by_severity(self, caplog):
        with caplog.at_level(logging.WARNING, logger="llama-runner-error"):
            ResourceInitializationError("model missing")
            ValidationError("bad prompt")

        levels = [record.levelno for record in caplog.records if record.name == "llama-runner-error"]
        assert levels == [logging.CRITICAL, logging.WARNING]


class TestExceptionHandlers:
    """Test suite for the exception handling decorators."""

    @pytest.mark.parametrize(
        "decorator, error_class, code",
        [
            (handle_resource_errors, ResourceInitializationError, ErrorCode.INIT_RESOURCE_FAILED),
            (handle_tensor_errors, TensorBuildError, ErrorCode.TENSOR_BUILD_FAILED),
            (handle_inference_errors, InferenceError, ErrorCode.MODEL_INFERENCE_FAILED),
        ],
    )
    def test_wraps_foreign_exceptions(self, decorator, error_class, code):
        @decorator()
        def fail():
            raise OSError("disk")

        with pytest.raises(error_class) as exc_info:
            fail()

        assert exc_info.value.code == code
        assert isinstance(exc_info.value.__cause__, OSError)
        assert "fail" in exc_info.value.message
        assert exc_info.value.context.function == "fail"

    def test_runner_errors_pass_through(self):
        original = InferenceError("already wrapped")

        @handle_tensor_errors()
        def fail():
            raise original

        with pytest.raises(InferenceError) as exc_info:
            fail()

        assert exc_info.value is original

    def test_preserves_return_value_and_name(self):
        @handle_exceptions(error_message="never")
        def add(a, b):
            return a + b

        assert add(1, 2) == 3
        assert add.__name__ == "add"
