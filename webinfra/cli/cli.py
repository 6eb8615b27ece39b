#!/usr/bin/env python3
"""
webinfra CLI - inspect context configuration from a shell or CI job.

Usage:
    webinfra context staging-ta chrome-fr
    webinfra context staging-ta chrome-fr --file contexts/context.yaml --format flat
    webinfra env
"""

import argparse
import json
import sys
from collections.abc import Sequence
from typing import Any

import yaml  # type: ignore[import-untyped]

import webinfra
from webinfra.context import ContextConfigLoader, FileContextSource, get_context_file_path
from webinfra.environment import detected_ci_system, is_running_in_pipeline
from webinfra.settings import EnvironSettings, Settings

from .output import ConsoleOutput, OutputWriter


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="webinfra",
        description="Inspect end-to-end test configuration",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"webinfra {webinfra.__version__}"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    context = sub.add_parser(
        "context",
        aliases=["ctx"],
        help="Display merged context configuration",
        description=(
            "Merge the SauceLabs overlay, environment entries and config key "
            "entries of a context file and print the result."
        ),
    )
    context.add_argument("environment", help="Environment name (e.g. staging-ta)")
    context.add_argument("config_key", help="Config key (e.g. chrome-fr)")
    context.add_argument(
        "--file",
        "-f",
        default=None,
        help=f"Context file (default: {get_context_file_path()})",
    )
    context.add_argument(
        "--format",
        choices=["yaml", "json", "flat"],
        default="yaml",
        help="Output format (default: yaml)",
    )

    sub.add_parser("env", help="Display pipeline detection state")
    return parser


def _format(data: dict[str, Any], output_format: str) -> str:
    if output_format == "json":
        return json.dumps(data, indent=2, sort_keys=True)
    if output_format == "flat":
        return "\n".join(f"{key}={value}" for key, value in sorted(data.items()))
    if not data:
        return "{}"
    result: str = yaml.dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True)
    return result.rstrip()


def run_context(args: argparse.Namespace, out: OutputWriter) -> int:
    """Print the merged configuration for an environment and config key."""
    source = FileContextSource(args.file) if args.file else FileContextSource()
    loader = ContextConfigLoader(source=source)
    merged = loader.get_merged_config(args.environment, args.config_key)
    out.write(_format(merged, args.format))
    return 0


def run_env(settings: Settings, out: OutputWriter) -> int:
    """Print pipeline mode, the test environment signal and the CI system."""
    loader = ContextConfigLoader(settings=settings)
    out.write(f"pipeline_mode={str(loader.is_pipeline_mode()).lower()}")
    out.write(f"test_environment={loader.get_test_environment() or ''}")
    out.write(f"ci_pipeline={str(is_running_in_pipeline(settings)).lower()}")
    out.write(f"ci_system={detected_ci_system(settings)}")
    return 0


def main(
    argv: Sequence[str] | None = None,
    out: OutputWriter | None = None,
    settings: Settings | None = None,
) -> int:
    """Main entry point for the webinfra CLI."""
    args = build_parser().parse_args(argv)
    out = out if out is not None else ConsoleOutput()

    if args.command in ("context", "ctx"):
        return run_context(args, out)
    return run_env(settings if settings is not None else EnvironSettings(), out)


if __name__ == "__main__":
    sys.exit(main())
