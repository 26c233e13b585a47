"""Token sequence entity for the llama runner.

The sequence is owned by a single generate() call: seeded with the begin
marker and the encoded prompt, then grown by one token per accepted step.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class TokenSequence:
    """Ordered token ids bounded by the model's fixed input length."""
    max_length: int
    token_ids: List[int] = field(default_factory=list)
    prompt_length: int = 0

    def __post_init__(self):
        """Validate sequence properties."""
        if self.max_length < 1:
            raise ValueError(f"max_length must be positive, got {self.max_length}")
        if len(self.token_ids) > self.max_length:
            raise ValueError(
                f"Sequence of {len(self.token_ids)} tokens exceeds max_length {self.max_length}"
            )
        if any(token_id < 0 for token_id in self.token_ids):
            raise ValueError("Token ids must be non-negative")

        if self.prompt_length == 0:
            self.prompt_length = len(self.token_ids)

    @classmethod
    def from_prompt(cls, bos_token_id: int, prompt_ids: List[int], max_length: int) -> "TokenSequence":
        """Seed a sequence with the begin marker followed by the prompt tokens."""
        return cls(max_length=max_length, token_ids=[bos_token_id, *prompt_ids])

    def __len__(self) -> int:
        return len(self.token_ids)

    @property
    def last_position(self) -> int:
        """Zero-based index of the last valid token."""
        return len(self.token_ids) - 1

    @property
    def is_full(self) -> bool:
        """Whether another token would exceed the fixed input length."""
        return len(self.token_ids) >= self.max_length

    @property
    def generated_ids(self) -> List[int]:
        """Tokens appended by generation, excluding the seed."""
        return self.token_ids[self.prompt_length:]

    def append(self, token_id: int) -> None:
        """Append one accepted token."""
        assert not self.is_full, f"Cannot append past max_length {self.max_length}"
        assert token_id >= 0, f"Token ID must be non-negative, got {token_id}"
        self.token_ids.append(token_id)
