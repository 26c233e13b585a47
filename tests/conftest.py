import os
import sys

# Keep test runs from writing log files; must be set before the global config is built
os.environ["LLAMA_RUNNER_LOGGING_ENABLE_FILE_LOGGING"] = "false"

# Add project root to path to ensure imports work correctly
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import torch
from unittest.mock import MagicMock

from llama_runner.infrastructure.tokenization import AsciiTokenizer
from llama_runner.utils.config_manager import GenerationConfig, config as global_config
from llama_runner.utils.logging_utils import apply_runner_config

MAX_LEN = 8
VOCAB_SIZE = 256
BOS_ID = 200
EOS_ID = 2


def one_hot_logits(token_id, max_length=MAX_LEN, vocab_size=VOCAB_SIZE):
    """Logits whose argmax is ``token_id`` at every position."""
    logits = torch.zeros((1, max_length, vocab_size))
    logits[:, :, token_id] = 10.0
    return logits


class ScriptedInference:
    """Inference stub returning logits that select the scripted tokens in order.

    The last scripted token repeats once the script runs out. Every input
    tensor is recorded for inspection.
    """

    def __init__(self, tokens, max_length=MAX_LEN, vocab_size=VOCAB_SIZE):
        self.tokens = list(tokens)
        self.max_length = max_length
        self.vocab_size = vocab_size
        self.inputs = []
        self.device = "cpu"

    def infer(self, input_tensor):
        self.inputs.append(input_tensor.clone())
        index = min(len(self.inputs) - 1, len(self.tokens) - 1)
        return one_hot_logits(self.tokens[index], self.max_length, self.vocab_size)


@pytest.fixture
def mock_device():
    """Return a mock device string for testing."""
    return "cpu"


@pytest.fixture
def generation_config():
    """Small generation config so length-cap tests stay short."""
    return GenerationConfig(
        max_token_length=MAX_LEN,
        vocab_size=VOCAB_SIZE,
        bos_token_id=BOS_ID,
        eos_token_id=EOS_ID,
    )


@pytest.fixture
def tokenizer():
    return AsciiTokenizer()


@pytest.fixture
def scripted_inference():
    """Factory for ScriptedInference stubs."""
    def factory(tokens, max_length=MAX_LEN, vocab_size=VOCAB_SIZE):
        return ScriptedInference(tokens, max_length=max_length, vocab_size=vocab_size)
    return factory


@pytest.fixture
def mock_model():
    """Create a mock HuggingFace-style model returning well-shaped logits."""
    model = MagicMock()

    mock_outputs = MagicMock()
    mock_outputs.logits = one_hot_logits(65)
    model.return_value = mock_outputs

    model.config = MagicMock()
    model.config.model_type = "llama"

    return model


@pytest.fixture
def mock_predict_model():
    """Create a mock packaged model with a feature-dictionary predict()."""
    model = MagicMock(spec=["predict"])
    model.predict.return_value = {"var_2609": one_hot_logits(66).numpy()}
    return model


@pytest.fixture(autouse=True)
def restore_logging():
    """Put the process-wide logging settings back after each test."""
    yield
    apply_runner_config(global_config)
