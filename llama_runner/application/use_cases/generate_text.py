"""Text generation use case for the llama runner.

Wires the tensor feeder, inference adapter, logit extractor, greedy selector
and tokenizer into a GenerationLoop and runs it for one prompt.
"""

from typing import Optional

from ...domain.entities.generation_state import GenerationResult
from ...domain.interfaces.model import InferenceInterface
from ...domain.interfaces.performance_tracker import PerformanceTrackerInterface
from ...domain.interfaces.tokenizer import TokenizerInterface
from ...domain.services.generation_loop import EndCallback, FragmentCallback, GenerationLoop
from ...infrastructure.selection import GreedyTokenSelector
from ...infrastructure.tensors import LogitExtractor, TensorFeeder
from ...utils.config_manager import GenerationConfig
from ...utils.logging_utils import LoggingMixin


class GenerateTextUseCase(LoggingMixin):
    """Use case for greedy text generation."""

    def __init__(
        self,
        config: GenerationConfig,
        inference: InferenceInterface,
        tokenizer: TokenizerInterface,
        device: str = "cpu",
        performance_tracker: Optional[PerformanceTrackerInterface] = None,
        debug_mode: bool = None,
    ):
        """Initialize the generate text use case.

        Args:
            config: Generation settings
            inference: Loaded model behind the inference interface
            tokenizer: Encoder/decoder for prompts and emitted tokens
            device: Device to build input tensors on
            performance_tracker: Optional performance tracker
            debug_mode: Whether to enable debug logging
        """
        super().__init__()
        self.setup_logging("generate_text_use_case", debug_mode)

        self.loop = GenerationLoop(
            config=config,
            tokenizer=tokenizer,
            tensor_feeder=TensorFeeder(
                max_token_length=config.max_token_length,
                pad_token_id=config.pad_token_id,
                dtype=config.input_dtype,
                device=device,
            ),
            inference=inference,
            logit_extractor=LogitExtractor(config.vocab_size),
            token_selector=GreedyTokenSelector(),
            performance_tracker=performance_tracker,
            debug_mode=debug_mode,
        )

    def execute(
        self,
        prompt: str,
        on_fragment: Optional[FragmentCallback] = None,
        on_end: Optional[EndCallback] = None,
    ) -> GenerationResult:
        """Execute the text generation use case.

        Args:
            prompt: Text prompt to generate from
            on_fragment: Called with each decoded token as it is generated
            on_end: Called when the end marker stops generation

        Returns:
            GenerationResult with the generated text and final status
        """
        with self.operation("generate"):
            result = self.loop.run(prompt, on_fragment=on_fragment, on_end=on_end)

        self.log(
            f"Generation finished: {result.status.value}, {len(result.generated_ids)} tokens "
            f"in {result.iterations} steps ({result.elapsed_time:.3f}s)"
        )
        return result
