"""Generation state entities for the llama runner.

This module defines the states of the greedy generation loop and the result
handed back to callers once the loop has terminated.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .token_sequence import TokenSequence
from ...utils.error_manager import RunnerError


class GenerationStatus(Enum):
    """States of the generation loop."""

    INIT = "init"
    GENERATING = "generating"
    TERMINATED_EOS = "terminated_eos"
    TERMINATED_MAXLEN = "terminated_maxlen"
    TERMINATED_ERROR = "terminated_error"

    @property
    def is_terminal(self) -> bool:
        return self in (
            GenerationStatus.TERMINATED_EOS,
            GenerationStatus.TERMINATED_MAXLEN,
            GenerationStatus.TERMINATED_ERROR,
        )


@dataclass
class GenerationResult:
    """Outcome of one generate() call.

    Fragments emitted before an error stay in ``fragments``; emission is
    append-only and never rolled back.
    """
    prompt: str
    sequence: TokenSequence
    status: GenerationStatus = GenerationStatus.INIT
    fragments: List[str] = field(default_factory=list)
    iterations: int = 0
    elapsed_time: float = 0.0
    error: Optional[RunnerError] = None

    @property
    def generated_ids(self) -> List[int]:
        """Token ids appended during generation."""
        return self.sequence.generated_ids

    @property
    def text(self) -> str:
        """Concatenated decoded fragments."""
        return "".join(self.fragments)

    @property
    def succeeded(self) -> bool:
        return self.status in (GenerationStatus.TERMINATED_EOS, GenerationStatus.TERMINATED_MAXLEN)

    def raise_for_error(self) -> None:
        """Re-raise the error that terminated generation, if any."""
        if self.error is not None:
            raise self.error

    def to_dict(self) -> dict:
        """Plain representation for display or JSON output."""
        return {
            "prompt": self.prompt,
            "status": self.status.value,
            "text": self.text,
            "token_ids": list(self.sequence.token_ids),
            "generated_ids": self.generated_ids,
            "iterations": self.iterations,
            "elapsed_time": self.elapsed_time,
            "error": self.error.to_dict() if self.error is not None else None,
        }
