"""Fixed-shape input tensor construction.

The model takes a [1, max_token_length] input regardless of how many tokens
are valid. Positions past the sequence are filled with an explicit pad value
so every forward pass sees a deterministic input.
"""

from typing import Sequence

import torch

from llama_runner.domain.interfaces.tensors import TensorFeederInterface
from llama_runner.utils.exception_handlers import handle_tensor_errors
from llama_runner.utils.logging_utils import LoggingMixin

INPUT_DTYPES = {
    "int64": torch.long,
    "int32": torch.int32,
    "float32": torch.float32,
}


class TensorFeeder(LoggingMixin, TensorFeederInterface):
    """Builds the padded model input from the current token sequence."""

    def __init__(self,
                 max_token_length: int,
                 pad_token_id: int = 0,
                 dtype: str = "int64",
                 device: str = "cpu",
                 debug_mode: bool = None):
        """Initialize the tensor feeder.

        Args:
            max_token_length: Fixed input length of the model
            pad_token_id: Fill value for positions past the sequence
            dtype: Name of the input dtype ("int64", "int32" or "float32")
            device: Device to allocate the input on
            debug_mode: Whether to enable debug logging
        """
        super().__init__()

        assert max_token_length > 0, "max_token_length must be positive"
        assert dtype in INPUT_DTYPES, f"Unsupported input dtype: {dtype}"

        self.max_token_length = max_token_length
        self.pad_token_id = pad_token_id
        self.dtype = INPUT_DTYPES[dtype]
        self.device = device

        self.setup_logging("tensor_feeder", debug_mode)

    def build(self, token_ids: Sequence[int]) -> torch.Tensor:
        """Pack token ids into a [1, max_token_length] tensor.

        Args:
            token_ids: Current token sequence, at most max_token_length long

        Returns:
            Input tensor whose first len(token_ids) entries are the ids and
            whose remaining entries equal pad_token_id

        Raises:
            TensorBuildError: If the tensor cannot be allocated or filled
        """
        assert len(token_ids) <= self.max_token_length, (
            f"Sequence of {len(token_ids)} tokens exceeds max_token_length {self.max_token_length}"
        )
        return self._allocate(list(token_ids))

    @handle_tensor_errors(error_message="Failed to build input tensor")
    def _allocate(self, token_ids: list) -> torch.Tensor:
        input_tensor = torch.full(
            (1, self.max_token_length),
            self.pad_token_id,
            dtype=self.dtype,
            device=self.device,
        )
        if token_ids:
            input_tensor[0, :len(token_ids)] = torch.tensor(token_ids, dtype=self.dtype, device=self.device)

        if self.debug_mode:
            self.log(f"Built input tensor with {len(token_ids)} valid tokens", level="debug")

        return input_tensor
