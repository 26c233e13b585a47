"""Placeholder ASCII tokenizer.

NOT A REAL TOKENIZER. Each character becomes its ASCII code and each id is
turned back into the character with that code point. It exists so the
generation pipeline can run end to end without a vocabulary file; swap in a
real TokenizerInterface implementation for meaningful output.
"""

from typing import List

from llama_runner.domain.interfaces.tokenizer import TokenizerInterface

# Stand-in for characters outside the ASCII range
UNKNOWN_CHARACTER_ID = 0
# Stand-in for ids that are not valid Unicode scalar values
REPLACEMENT_TEXT = " "

MAX_CODE_POINT = 0x10FFFF
SURROGATE_RANGE = range(0xD800, 0xE000)


class AsciiTokenizer(TokenizerInterface):
    """ASCII pass-through tokenizer."""

    def encode(self, text: str) -> List[int]:
        """Map every character to its ASCII code, non-ASCII characters to 0."""
        return [ord(char) if ord(char) < 128 else UNKNOWN_CHARACTER_ID for char in text]

    def decode(self, token_ids: List[int]) -> str:
        """Map every id to the character with that code point."""
        return "".join(self._decode_one(token_id) for token_id in token_ids)

    @staticmethod
    def _decode_one(token_id: int) -> str:
        if 0 <= token_id <= MAX_CODE_POINT and token_id not in SURROGATE_RANGE:
            return chr(token_id)
        return REPLACEMENT_TEXT
