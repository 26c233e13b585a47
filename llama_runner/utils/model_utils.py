"""
Model utilities for the llama runner.

Centralized model loading and device detection so every entry point
resolves devices, dtypes and checkpoints the same way.
"""

import time
from typing import Optional

import torch
from transformers import (
    AutoConfig,
    AutoModelForCausalLM,
    LlamaConfig,
    LlamaForCausalLM,
    PreTrainedModel,
)

from llama_runner.utils.config_manager import ModelConfig, GenerationConfig
from llama_runner.utils.exception_handlers import handle_resource_errors
from llama_runner.utils.logger import get_logger
from llama_runner.utils.memory_monitor import check_memory_headroom

# Configure logger
logger = get_logger("model_utils")

DEFAULT_REVISION = "main"
SUPPORTED_DEVICES = ["cuda", "mps", "cpu", "auto"]

_DTYPES = {
    "float16": torch.float16,
    "bfloat16": torch.bfloat16,
    "float32": torch.float32,
}


def get_best_device(device: Optional[str] = None) -> str:
    """
    Determine the device to run the model on.

    Args:
        device: Explicit device from configuration, or None/"auto" to detect

    Returns:
        str: 'cuda' if an NVIDIA GPU is available, 'mps' for Apple Silicon, or 'cpu' as fallback
    """
    if device and device != "auto":
        assert device in SUPPORTED_DEVICES, f"Unsupported device: {device}"
        logger.info(f"Using device from configuration: {device}")
        return device

    if torch.cuda.is_available():
        logger.info(f"Auto-detected CUDA device: {torch.cuda.get_device_name(0)}")
        return "cuda"
    if hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
        logger.info("Auto-detected Apple Silicon MPS device")
        return "mps"

    logger.info("No GPU detected, using CPU device")
    return "cpu"


def get_device_dtype(device: str, torch_dtype: Optional[str] = None) -> torch.dtype:
    """
    Determine the model dtype for a device.

    Args:
        device: Resolved device string
        torch_dtype: Optional dtype name from configuration

    Returns:
        torch.dtype: The dtype to load weights in
    """
    if torch_dtype:
        return _DTYPES[torch_dtype]

    if device == "cuda":
        # bfloat16 on Ampere and later, float16 before
        if torch.cuda.is_available() and torch.cuda.get_device_capability()[0] >= 8:
            return torch.bfloat16
        return torch.float16

    # MPS and CPU are most stable with float32
    return torch.float32


@handle_resource_errors(error_message="Failed to load model")
def load_model(model_config: ModelConfig) -> PreTrainedModel:
    """
    Load a causal language model from a HuggingFace id or local path.

    Args:
        model_config: Model section of the runner configuration

    Returns:
        The model in evaluation mode on the resolved device

    Raises:
        ResourceInitializationError: If the checkpoint cannot be loaded
    """
    start_time = time.time()

    device = get_best_device(model_config.device)
    dtype = get_device_dtype(device, model_config.torch_dtype)
    revision = model_config.revision or DEFAULT_REVISION

    check_memory_headroom(device)

    logger.info(
        f"Loading model: {model_config.model_id} (revision: {revision}) "
        f"on device: {device} with dtype: {dtype}"
    )

    hf_config = AutoConfig.from_pretrained(
        model_config.model_id,
        revision=revision,
        trust_remote_code=model_config.trust_remote_code,
    )

    model = AutoModelForCausalLM.from_pretrained(
        model_config.model_id,
        config=hf_config,
        torch_dtype=dtype,
        low_cpu_mem_usage=model_config.low_cpu_mem_usage,
        trust_remote_code=model_config.trust_remote_code,
        revision=revision,
    )
    model = model.to(device)
    model.eval()

    logger.info(f"Loaded model in {time.time() - start_time:.2f}s")
    return model


@handle_resource_errors(error_message="Failed to build random model")
def build_random_model(generation_config: GenerationConfig, device: str = "cpu",
                       hidden_size: int = 64, num_layers: int = 2) -> PreTrainedModel:
    """
    Build a tiny randomly initialised Llama model for offline demos and tests.

    The embedding table is widened to cover the begin and end markers so the
    placeholder token ids are valid lookups; the logit extractor only reads
    the first ``vocab_size`` scores.

    Args:
        generation_config: Generation section of the runner configuration
        device: Device to place the model on
        hidden_size: Width of the model
        num_layers: Number of decoder layers

    Returns:
        LlamaForCausalLM in evaluation mode
    """
    vocab_size = max(
        generation_config.vocab_size,
        generation_config.bos_token_id + 1,
        generation_config.eos_token_id + 1,
        generation_config.pad_token_id + 1,
    )

    llama_config = LlamaConfig(
        vocab_size=vocab_size,
        hidden_size=hidden_size,
        intermediate_size=hidden_size * 2,
        num_hidden_layers=num_layers,
        num_attention_heads=4,
        num_key_value_heads=4,
        max_position_embeddings=generation_config.max_token_length,
        bos_token_id=generation_config.bos_token_id,
        eos_token_id=generation_config.eos_token_id,
        pad_token_id=generation_config.pad_token_id,
    )

    logger.info(
        f"Building random Llama model (vocab={vocab_size}, hidden={hidden_size}, "
        f"layers={num_layers}) on {device}"
    )

    model = LlamaForCausalLM(llama_config).to(device)
    model.eval()
    return model
