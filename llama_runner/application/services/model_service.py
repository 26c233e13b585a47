"""Model service for the llama runner.

Owns the one-time loading of the inference resource. Loading happens once,
at runner construction; the resulting adapter is shared read-only by every
generate() call.
"""

from typing import Any, Optional

from ...infrastructure.model import ModelAdapter
from ...utils.config_manager import RunnerConfig
from ...utils.error_manager import ResourceInitializationError, ErrorCode
from ...utils.logging_utils import LoggingMixin
from ...utils.model_utils import build_random_model, get_best_device, load_model


class ModelService(LoggingMixin):
    """Creates the inference adapter from configuration."""

    def __init__(self, config: RunnerConfig, debug_mode: bool = None):
        """Initialize the model service.

        Args:
            config: Runner configuration
            debug_mode: Whether to enable debug logging
        """
        super().__init__()
        self.setup_logging("model_service", debug_mode)
        self.config = config

    def create_adapter(self, model: Optional[Any] = None, random_weights: bool = False) -> ModelAdapter:
        """Load (or wrap) the model and return an adapter around it.

        Args:
            model: Already constructed model to wrap instead of loading one
            random_weights: Build a tiny randomly initialised model instead of
                downloading a checkpoint

        Returns:
            ModelAdapter ready for inference

        Raises:
            ResourceInitializationError: If the model cannot be loaded or wrapped
        """
        generation = self.config.generation
        device = get_best_device(self.config.model.device)

        with self.operation("load_model"):
            if model is None:
                if random_weights:
                    model = build_random_model(generation, device=device)
                else:
                    model = load_model(self.config.model)

            try:
                return ModelAdapter(
                    model,
                    max_token_length=generation.max_token_length,
                    vocab_size=generation.vocab_size,
                    device=device,
                )
            except AssertionError as e:
                raise ResourceInitializationError(
                    f"Cannot wrap model: {e}", code=ErrorCode.INIT_COMPONENT_MISSING, cause=e
                ) from e
