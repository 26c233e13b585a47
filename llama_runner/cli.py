#!/usr/bin/env python3
"""
Command line demo for the llama runner.

Streams greedily generated fragments for a prompt to stdout. The tokenizer
is a placeholder that only handles plain ASCII text.
"""

import argparse
import json
import random
import sys
from typing import Any, Dict, List, Optional

import numpy as np
import torch

from llama_runner.runner import LlamaRunner
from llama_runner.utils.config_manager import RunnerConfig, config as env_config
from llama_runner.utils.error_manager import RunnerError, ResourceInitializationError


class ArgumentParser:
    """
    Responsible for parsing command line arguments for the demo.
    """

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Greedy token-by-token generation with a placeholder ASCII tokenizer"
        )

        parser.add_argument(
            "--config",
            type=str,
            help="Path to YAML or JSON configuration file",
        )
        parser.add_argument(
            "--prompt",
            type=str,
            default="Hello",
            help="Text prompt (plain ASCII only)",
        )
        parser.add_argument(
            "--model",
            type=str,
            help="Model name or path to load",
        )
        parser.add_argument(
            "--device",
            type=str,
            choices=["auto", "cpu", "cuda", "mps"],
            help="Device to run the model on",
        )
        parser.add_argument(
            "--max-length",
            type=int,
            help="Fixed model input length (generation stops when it is full)",
        )
        parser.add_argument(
            "--random-weights",
            action="store_true",
            help="Use a tiny randomly initialised Llama model instead of a checkpoint",
        )
        parser.add_argument(
            "--seed",
            type=int,
            default=42,
            help="Random seed (affects --random-weights)",
        )
        parser.add_argument(
            "--progress",
            action="store_true",
            help="Show a progress bar over generation steps",
        )
        parser.add_argument(
            "--stats",
            action="store_true",
            help="Print performance statistics after generation",
        )
        parser.add_argument(
            "--output-json",
            action="store_true",
            help="Print the final result as JSON instead of streaming text",
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug logging",
        )

        return parser

    @staticmethod
    def parse_args(argv: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Parse command line arguments.

        Returns:
            dict[str, Any]: Dictionary of parsed arguments
        """
        return vars(ArgumentParser.build_parser().parse_args(argv))


def build_config(args: Dict[str, Any]) -> RunnerConfig:
    """Start from the file (or environment) configuration and apply CLI overrides."""
    if args.get("config"):
        runner_config = RunnerConfig.from_file(args["config"])
    else:
        # Copy so overrides never leak into the global configuration
        runner_config = RunnerConfig.from_dict(env_config.to_dict())

    if args.get("model"):
        runner_config.model.model_id = args["model"]
    if args.get("device"):
        runner_config.model.device = args["device"]
    if args.get("max_length") is not None:
        runner_config.generation.max_token_length = args["max_length"]
    if args.get("progress"):
        runner_config.generation.show_progress = True
    if args.get("debug"):
        runner_config.debug.global_debug = True

    runner_config.validate()
    return runner_config


def set_seed(seed: int) -> None:
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the demo."""
    args = ArgumentParser.parse_args(argv)

    try:
        runner_config = build_config(args)
    except RunnerError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    set_seed(args["seed"])
    debug_mode = True if args["debug"] else None

    try:
        runner = LlamaRunner(
            config=runner_config,
            random_weights=args["random_weights"],
            debug_mode=debug_mode,
        )
    except ResourceInitializationError as e:
        print(f"Error loading model: {e}", file=sys.stderr)
        return 1

    print(f"Prompt: {args['prompt']}")

    def stream(fragment: str) -> None:
        print(fragment, end="", flush=True)

    def end(_result) -> None:
        print("\n[END]")

    streaming = not args["output_json"]
    try:
        result = runner.generate(
            args["prompt"],
            on_fragment=stream if streaming else None,
            on_end=end if streaming else None,
        )
    except RunnerError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    if streaming:
        print()
    else:
        print(json.dumps(result.to_dict(), indent=2))

    if args["stats"]:
        runner.performance_tracker.print_stats()

    if result.error is not None:
        print(f"Error during generation: {result.error}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
