import pytest
import torch

from llama_runner.domain.entities.logits import ScoreVector
from llama_runner.infrastructure.tensors import LogitExtractor
from llama_runner.utils.error_manager import ErrorCode, InferenceError


class TestLogitExtractor:
    """Test suite for the LogitExtractor class."""

    def test_extract_reads_requested_position(self):
        logits = torch.randn(1, 8, 256)
        extractor = LogitExtractor(vocab_size=256)

        scores = extractor.extract(logits, 3)

        assert isinstance(scores, ScoreVector)
        assert scores.sequence_position == 3
        assert len(scores) == 256
        assert torch.equal(scores.tensor, logits[0, 3])

    def test_extract_truncates_wider_vocabulary(self):
        logits = torch.randn(1, 8, 300)
        extractor = LogitExtractor(vocab_size=256)

        scores = extractor.extract(logits, 0)

        assert scores.vocab_size == 256
        assert torch.equal(scores.tensor, logits[0, 0, :256])

    def test_extract_converts_to_float32(self):
        logits = torch.randn(1, 4, 16).half()

        scores = LogitExtractor(vocab_size=16).extract(logits, 1)

        assert scores.tensor.dtype == torch.float32

    def test_extract_last_position(self):
        logits = torch.zeros(1, 4, 16)
        logits[0, 3, 5] = 1.0

        scores = LogitExtractor(vocab_size=16).extract(logits, 3)

        assert int(torch.argmax(scores.tensor)) == 5

    @pytest.mark.parametrize(
        "logits, position, match",
        [
            (torch.zeros(4, 16), 0, "must be 3D"),
            (torch.zeros(1, 4, 16), 4, "out of range"),
            (torch.zeros(1, 4, 8), 0, "smaller than vocab_size"),
            ([[0.0] * 16], 0, "must be a tensor"),
        ],
    )
    def test_malformed_logits(self, logits, position, match):
        extractor = LogitExtractor(vocab_size=16)

        with pytest.raises(InferenceError, match=match) as exc_info:
            extractor.extract(logits, position)

        assert exc_info.value.code == ErrorCode.MODEL_OUTPUT_INVALID

    def test_invalid_vocab_size(self):
        with pytest.raises(AssertionError, match="vocab_size must be positive"):
            LogitExtractor(vocab_size=0)
