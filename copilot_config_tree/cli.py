# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Command-line access to the configuration inspector."""

import argparse
import importlib
import sys
from typing import Any, Optional

from .env_help import EnvHelpFormat
from .exceptions import ConfigTreeError
from .inspector import ConfigInspector
from .schema import ConfigSchema


def load_schema_source(schema_file: Optional[str], dataclass_ref: Optional[str]) -> Any:
    """Load a schema from a JSON/YAML file or a ``module:ClassName`` reference."""
    if schema_file:
        return ConfigSchema.from_file(schema_file)

    module_name, _, attr = dataclass_ref.partition(":")
    if not module_name or not attr:
        raise ValueError(f"expected 'module:ClassName', got '{dataclass_ref}'")
    module = importlib.import_module(module_name)
    return getattr(module, attr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copilot_config_tree",
        description="Print a configuration template or environment-variable help",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--schema", help="Path to a JSON or YAML schema file")
    source.add_argument("--dataclass", help="Configuration dataclass as module:ClassName")

    subcommands = parser.add_subparsers(dest="command", required=True)

    template = subcommands.add_parser("template", help="Print an annotated YAML template")
    template.add_argument(
        "--with-help",
        action="store_true",
        help="Include field descriptions as comments",
    )

    env_help = subcommands.add_parser("env-help", help="Print environment-variable help")
    env_help.add_argument(
        "--format",
        choices=[fmt.value for fmt in EnvHelpFormat],
        default=EnvHelpFormat.ASCII_TABLE.value,
        help="Output style",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        inspector = ConfigInspector(load_schema_source(args.schema, args.dataclass))
        if args.command == "template":
            inspector.print_config_template(args.with_help, stream=sys.stdout)
        else:
            inspector.print_env_help(EnvHelpFormat(args.format), stream=sys.stdout)
    except (ConfigTreeError, ImportError, AttributeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
