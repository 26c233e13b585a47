"""End-to-end generation against a tiny randomly initialised Llama model."""

import pytest
import torch

from llama_runner import LlamaRunner
from llama_runner.cli import main
from llama_runner.domain.entities.generation_state import GenerationStatus
from llama_runner.infrastructure.model import ModelAdapter
from llama_runner.infrastructure.tensors import TensorFeeder
from llama_runner.utils.config_manager import (
    GenerationConfig, LoggingConfig, ModelConfig, RunnerConfig,
)
from llama_runner.utils.model_utils import build_random_model

MAX_LEN = 16
VOCAB_SIZE = 300
BOS_ID = 256


@pytest.fixture(scope="module")
def small_generation_config():
    return GenerationConfig(
        max_token_length=MAX_LEN,
        vocab_size=VOCAB_SIZE,
        bos_token_id=BOS_ID,
        eos_token_id=2,
    )


@pytest.fixture(scope="module")
def random_model(small_generation_config):
    torch.manual_seed(0)
    return build_random_model(small_generation_config, device="cpu")


@pytest.fixture
def runner_config(small_generation_config, tmp_path):
    return RunnerConfig(
        logging=LoggingConfig(enable_file_logging=False, log_dir=str(tmp_path)),
        model=ModelConfig(device="cpu"),
        generation=small_generation_config,
    )


def test_random_model_shape(random_model):
    assert random_model.config.vocab_size == VOCAB_SIZE
    assert random_model.config.max_position_embeddings == MAX_LEN
    assert not random_model.training


def test_random_model_widens_vocabulary_for_markers():
    generation = GenerationConfig(max_token_length=8, vocab_size=64, bos_token_id=100)

    model = build_random_model(generation, hidden_size=32, num_layers=1)

    assert model.config.vocab_size == 101


def test_generation_terminates_within_bound(runner_config, random_model):
    runner = LlamaRunner(config=runner_config, model=random_model)

    result = runner.generate("Hi")

    assert result.status in (GenerationStatus.TERMINATED_EOS, GenerationStatus.TERMINATED_MAXLEN)
    assert result.sequence.token_ids[:3] == [BOS_ID, 72, 105]
    assert len(result.sequence) <= MAX_LEN
    assert result.iterations <= MAX_LEN - 1
    assert all(0 <= token_id < VOCAB_SIZE for token_id in result.generated_ids)
    assert len(result.fragments) == len(result.generated_ids)

    if result.status == GenerationStatus.TERMINATED_MAXLEN:
        assert len(result.sequence) == MAX_LEN


def test_generation_is_deterministic(runner_config, random_model):
    runner = LlamaRunner(config=runner_config, model=random_model)

    first = runner.generate("Hi")
    second = runner.generate("Hi")

    assert first.sequence.token_ids == second.sequence.token_ids
    assert first.status == second.status


def test_padding_does_not_change_valid_positions(random_model):
    """Causal attention keeps positions before the pad region independent of it."""
    adapter = ModelAdapter(random_model, max_token_length=MAX_LEN, vocab_size=VOCAB_SIZE)
    tokens = [BOS_ID, 72, 105]

    zero_padded = adapter.infer(TensorFeeder(MAX_LEN, pad_token_id=0).build(tokens))
    other_padded = adapter.infer(TensorFeeder(MAX_LEN, pad_token_id=17).build(tokens))

    assert torch.allclose(zero_padded[0, :3], other_padded[0, :3], atol=1e-5)


def test_runner_builds_random_model(runner_config):
    runner = LlamaRunner(config=runner_config, random_weights=True)

    result = runner.generate("A")

    assert result.status.is_terminal
    assert runner.inference.device == "cpu"


def test_cli_with_random_weights(tmp_path, capsys):
    path = tmp_path / "runner.yaml"
    path.write_text(
        "logging:\n"
        "  enable_file_logging: false\n"
        "model:\n"
        "  device: cpu\n"
        "generation:\n"
        f"  max_token_length: {MAX_LEN}\n"
        f"  vocab_size: {VOCAB_SIZE}\n"
        f"  bos_token_id: {BOS_ID}\n"
    )

    exit_code = main(["--config", str(path), "--random-weights", "--prompt", "Hi", "--stats"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Prompt: Hi" in out
    assert "Performance Statistics" in out


def test_cli_config_file_enables_file_logging(tmp_path):
    log_dir = tmp_path / "logs"
    path = tmp_path / "runner.yaml"
    path.write_text(
        "logging:\n"
        "  enable_file_logging: true\n"
        f"  log_dir: '{log_dir}'\n"
        "  console_logging: false\n"
        "model:\n"
        "  device: cpu\n"
        "generation:\n"
        f"  max_token_length: {MAX_LEN}\n"
        f"  vocab_size: {VOCAB_SIZE}\n"
        f"  bos_token_id: {BOS_ID}\n"
    )

    exit_code = main(["--config", str(path), "--random-weights", "--prompt", "Hi"])

    assert exit_code == 0
    assert (log_dir / "llama_runner.log").exists()
    loop_log = (log_dir / "generation_loop.log").read_text()
    assert "Length cap reached" in loop_log or "end marker selected" in loop_log
