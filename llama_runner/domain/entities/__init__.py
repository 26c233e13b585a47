"""Domain entities for the llama runner.

Value objects and entities representing the core concepts of greedy
token generation.
"""

from .token_sequence import TokenSequence
from .logits import ScoreVector
from .generation_state import GenerationStatus, GenerationResult

__all__ = [
    "TokenSequence",
    "ScoreVector",
    "GenerationStatus",
    "GenerationResult",
]
