"""Greedy autoregressive generation loop.

This module contains the domain service that drives one generate() call:
INIT seeds the token sequence, GENERATING repeats build-input, infer,
extract, select until the end marker, the length cap or an error.
"""

import time
from typing import Callable, Optional

from tqdm import tqdm

from ..entities.generation_state import GenerationResult, GenerationStatus
from ..entities.token_sequence import TokenSequence
from ..interfaces.model import InferenceInterface
from ..interfaces.performance_tracker import PerformanceTrackerInterface
from ..interfaces.tensors import LogitExtractorInterface, TensorFeederInterface
from ..interfaces.token_selection import TokenSelectorInterface
from ..interfaces.tokenizer import TokenizerInterface
from ...utils.config_manager import GenerationConfig
from ...utils.error_manager import (
    ErrorCode, GenerationError, InferenceError, TensorBuildError, ValidationError,
)
from ...utils.logging_utils import LoggingMixin

FragmentCallback = Callable[[str], None]
EndCallback = Callable[[GenerationResult], None]


class GenerationLoop(LoggingMixin):
    """Domain service running bounded greedy decoding over a fixed-shape model."""

    def __init__(
        self,
        config: GenerationConfig,
        tokenizer: TokenizerInterface,
        tensor_feeder: TensorFeederInterface,
        inference: InferenceInterface,
        logit_extractor: LogitExtractorInterface,
        token_selector: TokenSelectorInterface,
        performance_tracker: Optional[PerformanceTrackerInterface] = None,
        debug_mode: bool = None,
    ):
        """Initialize the generation loop.

        Args:
            config: Generation settings (length cap, markers)
            tokenizer: Encoder for the prompt and decoder for emitted tokens
            tensor_feeder: Builds the padded model input
            inference: The model call
            logit_extractor: Reads scores at the last valid position
            token_selector: Chooses the next token
            performance_tracker: Optional performance tracker
            debug_mode: Whether to enable debug logging
        """
        super().__init__()
        self.setup_logging("generation_loop", debug_mode)

        self.config = config
        self.tokenizer = tokenizer
        self.tensor_feeder = tensor_feeder
        self.inference = inference
        self.logit_extractor = logit_extractor
        self.token_selector = token_selector
        self.performance_tracker = performance_tracker

    def run(
        self,
        prompt: str,
        on_fragment: Optional[FragmentCallback] = None,
        on_end: Optional[EndCallback] = None,
    ) -> GenerationResult:
        """Generate greedily from a prompt.

        Args:
            prompt: Text prompt
            on_fragment: Called with the decoded text of every appended token
            on_end: Called once with the result when the end marker is selected

        Returns:
            GenerationResult; tensor-build and inference failures end the call
            with TERMINATED_ERROR and the error attached

        Raises:
            ValidationError: If the encoded prompt does not fit the model input
        """
        start_time = time.time()
        sequence = self._initialize_sequence(prompt)
        result = GenerationResult(prompt=prompt, sequence=sequence)

        budget = self.config.max_token_length - 1
        result.status = GenerationStatus.GENERATING
        self.log(f"Generating from {len(sequence)} seed tokens, budget {budget} steps")

        try:
            for step in tqdm(range(budget), desc="Generating", disable=not self.config.show_progress):
                if sequence.is_full:
                    break

                result.iterations += 1
                next_token = self._next_token(sequence)

                if next_token == self.config.eos_token_id:
                    result.status = GenerationStatus.TERMINATED_EOS
                    self._runner_logger.info(f"[END] end marker selected at step {step}")
                    if on_end is not None:
                        on_end(result)
                    break

                sequence.append(next_token)
                fragment = self._decode(next_token)
                result.fragments.append(fragment)
                if on_fragment is not None:
                    on_fragment(fragment)

            if result.status == GenerationStatus.GENERATING:
                result.status = GenerationStatus.TERMINATED_MAXLEN
                self._runner_logger.info(f"Length cap reached with {len(sequence)} tokens")

        except (TensorBuildError, InferenceError, GenerationError) as e:
            result.status = GenerationStatus.TERMINATED_ERROR
            result.error = e
            # The error logged itself when raised
            self._runner_logger.info(
                f"Generation stopped after {result.iterations} steps",
                status=result.status.value,
                error_code=e.code.value,
            )

        result.elapsed_time = time.time() - start_time
        return result

    def _initialize_sequence(self, prompt: str) -> TokenSequence:
        """INIT: begin marker followed by the encoded prompt."""
        if not isinstance(prompt, str):
            raise ValidationError(f"Prompt must be a string, got {type(prompt).__name__}", field="prompt")

        prompt_ids = self.tokenizer.encode(prompt)
        seed_length = len(prompt_ids) + 1
        if seed_length > self.config.max_token_length:
            raise ValidationError(
                f"Prompt encodes to {seed_length} tokens, more than max_token_length "
                f"{self.config.max_token_length}",
                field="prompt",
            )

        return TokenSequence.from_prompt(
            self.config.bos_token_id, prompt_ids, self.config.max_token_length
        )

    def _next_token(self, sequence: TokenSequence) -> int:
        """One GENERATING step: input tensor, forward pass, scores, argmax."""
        build_start = time.time()
        input_tensor = self.tensor_feeder.build(sequence.token_ids)
        if self.performance_tracker:
            self.performance_tracker.track_tensor_build(time.time() - build_start)

        model_start = time.time()
        logits = self.inference.infer(input_tensor)
        if self.performance_tracker:
            self.performance_tracker.track_model_call(time.time() - model_start)

        scores = self.logit_extractor.extract(logits, sequence.last_position)
        next_token = self.token_selector.select(scores)
        if next_token is None:
            raise GenerationError(
                "Token selector returned no token",
                code=ErrorCode.GENERATION_NO_SELECTION,
                position=sequence.last_position,
            )

        if self.debug_mode:
            self.log(f"Position {sequence.last_position}: selected token {next_token}", level="debug")

        return next_token

    def _decode(self, token_id: int) -> str:
        decode_start = time.time()
        fragment = self.tokenizer.decode([token_id])
        if self.performance_tracker:
            self.performance_tracker.track_decode(time.time() - decode_start, 1)
        return fragment
