"""
Llama runner facade.

A LlamaRunner is constructed once: it loads the model and fails with
ResourceInitializationError if it cannot. Every generate() call afterwards
runs an independent greedy generation against the shared, read-only model.
"""

import asyncio
from typing import Any, Optional

from llama_runner.application.services import ModelService
from llama_runner.application.use_cases import GenerateTextUseCase
from llama_runner.domain.entities.generation_state import GenerationResult
from llama_runner.domain.interfaces.model import InferenceInterface
from llama_runner.domain.interfaces.tokenizer import TokenizerInterface
from llama_runner.domain.services.generation_loop import EndCallback, FragmentCallback
from llama_runner.infrastructure.performance import PerformanceTracker
from llama_runner.infrastructure.tokenization import AsciiTokenizer
from llama_runner.utils.config_manager import RunnerConfig, config as default_config
from llama_runner.utils.logging_utils import LoggingMixin, apply_runner_config


class LlamaRunner(LoggingMixin):
    """Runs greedy generation against a model loaded once at construction."""

    def __init__(
        self,
        config: Optional[RunnerConfig] = None,
        inference: Optional[InferenceInterface] = None,
        model: Optional[Any] = None,
        tokenizer: Optional[TokenizerInterface] = None,
        random_weights: bool = False,
        debug_mode: bool = None,
    ):
        """Initialize the runner and its inference resource.

        Args:
            config: Runner configuration (defaults to the global one); its
                logging and debug sections are applied to the process
            inference: Ready inference adapter; skips model loading
            model: Already constructed model to wrap in a ModelAdapter
            tokenizer: Tokenizer (defaults to the placeholder AsciiTokenizer)
            random_weights: Build a tiny random model instead of loading a checkpoint
            debug_mode: Whether to enable debug logging

        Raises:
            ResourceInitializationError: If the model cannot be loaded
        """
        super().__init__()
        self.config = config or default_config
        apply_runner_config(self.config)
        self.setup_logging("llama_runner", debug_mode)

        self.tokenizer = tokenizer or AsciiTokenizer()
        self.performance_tracker = PerformanceTracker()

        if inference is None:
            inference = ModelService(self.config, debug_mode).create_adapter(
                model=model, random_weights=random_weights
            )
            device = inference.device
        else:
            # Injected adapters without a device get their inputs on the CPU
            device = getattr(inference, "device", "cpu")
            if not isinstance(device, str):
                device = "cpu"
        self.inference = inference

        self.use_case = GenerateTextUseCase(
            config=self.config.generation,
            inference=self.inference,
            tokenizer=self.tokenizer,
            device=device,
            performance_tracker=self.performance_tracker,
            debug_mode=debug_mode,
        )

    def generate(
        self,
        prompt: str,
        on_fragment: Optional[FragmentCallback] = None,
        on_end: Optional[EndCallback] = None,
    ) -> GenerationResult:
        """Generate greedily from a prompt.

        Args:
            prompt: Text prompt
            on_fragment: Called with each decoded token as it is generated
            on_end: Called when the end marker stops generation

        Returns:
            GenerationResult; check ``status`` or call ``raise_for_error()``
        """
        return self.use_case.execute(prompt, on_fragment=on_fragment, on_end=on_end)

    async def generate_async(
        self,
        prompt: str,
        on_fragment: Optional[FragmentCallback] = None,
        on_end: Optional[EndCallback] = None,
    ) -> GenerationResult:
        """Run generate() in a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.generate, prompt, on_fragment, on_end)
