"""
Configuration for the llama runner.

Settings come from dataclass defaults, then ``LLAMA_RUNNER_*`` environment
variables, or from a JSON/YAML file. Each section validates itself on
construction; ``RunnerConfig.validate()`` re-runs that after fields have
been assigned directly.
"""

import os
import json
from typing import Dict, Any, Optional, Union
from pathlib import Path
from dataclasses import dataclass, field, asdict

import yaml

from llama_runner.utils.error_manager import ConfigurationError, ErrorCode


ENV_PREFIX = "LLAMA_RUNNER_"
TRUE_VALUES = ["true", "1", "yes"]

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
MODEL_DTYPES = [None, "float16", "bfloat16", "float32"]
DEVICES = [None, "auto", "cpu", "cuda", "mps"]
INPUT_DTYPES = ["int64", "int32", "float32"]


@dataclass
class LoggingConfig:
    """Where log records go. Console output always goes to stderr."""

    enable_file_logging: bool = False
    log_dir: str = field(default_factory=lambda: os.path.join(os.getcwd(), "logs"))
    log_level: str = "INFO"
    console_logging: bool = True

    def __post_init__(self):
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log level: {self.log_level}. Must be one of {LOG_LEVELS}")
        self.log_level = self.log_level.upper()


@dataclass
class ModelConfig:
    """Which checkpoint to load and where."""

    model_id: str = "meta-llama/Llama-3.2-1B"
    device: Optional[str] = None  # None or "auto" detects cuda, then mps, then cpu
    torch_dtype: Optional[str] = None  # None picks per device
    trust_remote_code: bool = False
    revision: Optional[str] = None
    low_cpu_mem_usage: bool = True

    def __post_init__(self):
        if self.torch_dtype not in MODEL_DTYPES:
            raise ConfigurationError(f"Invalid torch_dtype: {self.torch_dtype}. Must be one of {MODEL_DTYPES}")
        if self.device not in DEVICES:
            raise ConfigurationError(f"Invalid device: {self.device}. Must be one of {DEVICES}")


@dataclass
class GenerationConfig:
    """Shape of the model boundary and the generation loop.

    The defaults describe the reference Llama instance: a 128 token window
    over a 32000 entry vocabulary, begin marker 128000 and end marker 2.
    """

    max_token_length: int = 128
    vocab_size: int = 32000
    bos_token_id: int = 128000
    eos_token_id: int = 2
    pad_token_id: int = 0  # fill value for positions past the sequence
    input_dtype: str = "int64"  # "float32" for packaged models fed float ids
    show_progress: bool = False

    def __post_init__(self):
        # The begin marker alone takes one position; at least one more must be free
        if self.max_token_length < 2:
            raise ConfigurationError(f"max_token_length must be >= 2, got {self.max_token_length}")
        if self.vocab_size < 1:
            raise ConfigurationError(f"vocab_size must be >= 1, got {self.vocab_size}")
        for name in ("bos_token_id", "eos_token_id", "pad_token_id"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.input_dtype not in INPUT_DTYPES:
            raise ConfigurationError(f"Invalid input_dtype: {self.input_dtype}. Must be one of {INPUT_DTYPES}")


@dataclass
class DebugConfig:
    """Debug switches: one global, optionally overridden per component."""

    global_debug: bool = False
    module_debug: Dict[str, bool] = field(default_factory=dict)

    def is_debug_enabled(self, module_name: str) -> bool:
        """
        Resolve debug mode for a component.

        LLAMA_RUNNER_DEBUG_<NAME> in the environment wins, then the
        per-component setting, then the global switch.
        """
        env_value = os.environ.get(f"{ENV_PREFIX}DEBUG_{module_name.upper()}")
        if env_value is not None:
            return env_value.lower() in TRUE_VALUES
        return self.module_debug.get(module_name, self.global_debug)


SECTIONS = {
    "logging": LoggingConfig,
    "model": ModelConfig,
    "generation": GenerationConfig,
}


def _coerce(env_name: str, raw: str, current: Any) -> Any:
    """Parse an environment string into the type of the field's current value."""
    try:
        if isinstance(current, bool):
            return raw.lower() in TRUE_VALUES
        if isinstance(current, int):
            return int(raw)
        if isinstance(current, float):
            return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {env_name}: {raw!r}", cause=e) from e
    return raw


@dataclass
class RunnerConfig:
    """All configuration sections of the runner."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)

    @classmethod
    def from_env(cls) -> "RunnerConfig":
        """
        Defaults overridden by environment variables.

        Section fields are read from ``LLAMA_RUNNER_<SECTION>_<FIELD>``, for
        example ``LLAMA_RUNNER_GENERATION_MAX_TOKEN_LENGTH=64``. Debug
        switches are ``LLAMA_RUNNER_DEBUG`` and ``LLAMA_RUNNER_DEBUG_<NAME>``.
        Unknown variables are ignored.
        """
        config = cls()

        for env_name, raw in os.environ.items():
            if not env_name.startswith(ENV_PREFIX):
                continue
            name = env_name[len(ENV_PREFIX):]

            if name == "DEBUG":
                config.debug.global_debug = raw.lower() in TRUE_VALUES
                continue
            if name.startswith("DEBUG_"):
                config.debug.module_debug[name[len("DEBUG_"):].lower()] = raw.lower() in TRUE_VALUES
                continue

            section_name, _, key = name.lower().partition("_")
            section = getattr(config, section_name, None) if section_name in SECTIONS else None
            if section is None or not hasattr(section, key):
                continue

            setattr(section, key, _coerce(env_name, raw, getattr(section, key)))

        config.validate()
        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunnerConfig":
        """Defaults overridden by a nested dict; unknown sections and keys are ignored."""
        config = cls()

        for section_name, values in (data or {}).items():
            section = getattr(config, section_name, None)
            if section is None or not isinstance(values, dict):
                continue
            for key, value in values.items():
                if hasattr(section, key):
                    setattr(section, key, value)

        config.validate()
        return config

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "RunnerConfig":
        """
        Load a JSON or YAML file (chosen by suffix) through from_dict().

        Raises:
            ConfigurationError: CONFIG_FILE_ERROR if the file is missing or
                cannot be parsed, CONFIG_INVALID if a value is invalid
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ConfigurationError(f"Configuration file not found: {file_path}", code=ErrorCode.CONFIG_FILE_ERROR)

        is_yaml = file_path.suffix.lower() in (".yaml", ".yml")
        try:
            with file_path.open("r") as f:
                data = yaml.safe_load(f) if is_yaml else json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            kind = "YAML" if is_yaml else "JSON"
            raise ConfigurationError(
                f"Invalid {kind} in configuration file: {file_path}",
                code=ErrorCode.CONFIG_FILE_ERROR,
                cause=e,
            ) from e

        return cls.from_dict(data)

    def validate(self) -> None:
        """Rebuild each section so its checks run against the current values."""
        for section_name, section_cls in SECTIONS.items():
            setattr(self, section_name, section_cls(**asdict(getattr(self, section_name))))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "logging": asdict(self.logging),
            "model": asdict(self.model),
            "generation": asdict(self.generation),
            "debug": {
                "global_debug": self.debug.global_debug,
                "module_debug": dict(self.debug.module_debug),
            },
        }

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """Write to_dict() as YAML or JSON, chosen by suffix."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with file_path.open("w") as f:
            if file_path.suffix.lower() in (".yaml", ".yml"):
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)

    def get_debug_mode(self, module_name: str) -> bool:
        return self.debug.is_debug_enabled(module_name)


# Process-wide configuration: defaults plus environment
config = RunnerConfig.from_env()


def get_debug_mode(module_name: str) -> bool:
    """Debug mode for a component under the process-wide configuration."""
    return config.get_debug_mode(module_name)
