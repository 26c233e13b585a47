import asyncio

import pytest
from unittest.mock import MagicMock, patch

from llama_runner import LlamaRunner
from llama_runner.domain.entities.generation_state import GenerationStatus
from llama_runner.infrastructure.model import ModelAdapter
from llama_runner.utils.config_manager import LoggingConfig, ModelConfig, RunnerConfig
from llama_runner.utils.error_manager import (
    ErrorCode, ResourceInitializationError, ValidationError,
)


@pytest.fixture
def runner_config(generation_config, tmp_path):
    return RunnerConfig(
        logging=LoggingConfig(enable_file_logging=False, log_dir=str(tmp_path)),
        model=ModelConfig(model_id="missing/model", device="cpu"),
        generation=generation_config,
    )


class TestLlamaRunner:
    """Test suite for the LlamaRunner facade."""

    def test_generate_with_injected_inference(self, runner_config, scripted_inference):
        runner = LlamaRunner(config=runner_config, inference=scripted_inference([65, 66, 2]))
        fragments = []
        on_end = MagicMock()

        result = runner.generate("Hi", on_fragment=fragments.append, on_end=on_end)

        assert result.status == GenerationStatus.TERMINATED_EOS
        assert fragments == ["A", "B"]
        on_end.assert_called_once_with(result)

    def test_wraps_given_model(self, runner_config, mock_model):
        runner = LlamaRunner(config=runner_config, model=mock_model)

        result = runner.generate("Hi")

        assert isinstance(runner.inference, ModelAdapter)
        assert runner.inference.device == "cpu"
        # The mock always favours token 65, so generation runs to the cap
        assert result.status == GenerationStatus.TERMINATED_MAXLEN
        assert result.text == "AAAAA"

    def test_model_load_failure(self, runner_config):
        with patch("llama_runner.utils.model_utils.AutoConfig") as mock_auto_config:
            mock_auto_config.from_pretrained.side_effect = OSError("repository not found")

            with pytest.raises(ResourceInitializationError) as exc_info:
                LlamaRunner(config=runner_config)

        assert exc_info.value.code == ErrorCode.INIT_RESOURCE_FAILED
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_unusable_model_object(self, runner_config):
        with patch("llama_runner.application.services.model_service.load_model", return_value=None):
            with pytest.raises(ResourceInitializationError) as exc_info:
                LlamaRunner(config=runner_config)

        assert exc_info.value.code == ErrorCode.INIT_COMPONENT_MISSING

    def test_injected_inference_without_device(self, runner_config, scripted_inference):
        stub = scripted_inference([2])
        inference = MagicMock(spec=["infer"])
        inference.infer.side_effect = stub.infer

        runner = LlamaRunner(config=runner_config, inference=inference)

        assert runner.generate("Hi").status == GenerationStatus.TERMINATED_EOS

    def test_invalid_prompt(self, runner_config, scripted_inference):
        runner = LlamaRunner(config=runner_config, inference=scripted_inference([2]))

        with pytest.raises(ValidationError):
            runner.generate(42)

    def test_generate_async(self, runner_config, scripted_inference):
        runner = LlamaRunner(config=runner_config, inference=scripted_inference([65, 2]))

        result = asyncio.run(runner.generate_async("Hi"))

        assert result.text == "A"
        assert result.status == GenerationStatus.TERMINATED_EOS

    def test_shares_model_across_calls(self, runner_config, scripted_inference):
        inference = scripted_inference([2])
        runner = LlamaRunner(config=runner_config, inference=inference)

        runner.generate("Hi")
        runner.generate("Yo")

        assert len(inference.inputs) == 2
        assert inference.inputs[1][0, :3].tolist() == [200, 89, 111]
        assert runner.performance_tracker.get_stats()["model_calls"] == 2
