"""Tokenizer interface for the llama runner."""

from typing import Protocol, List
from abc import abstractmethod


class TokenizerInterface(Protocol):
    """Interface for turning text into token ids and back."""

    @abstractmethod
    def encode(self, text: str) -> List[int]:
        """Encode text into token ids, without the begin marker.

        Args:
            text: Text to encode

        Returns:
            List of token ids
        """
        ...

    @abstractmethod
    def decode(self, token_ids: List[int]) -> str:
        """Decode token ids into text.

        Args:
            token_ids: Token ids to decode

        Returns:
            Decoded text
        """
        ...
