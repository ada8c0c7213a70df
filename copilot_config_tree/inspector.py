# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Command-line friendly documentation of a configuration schema."""

import sys
from typing import Any, Optional, TextIO

from .builder import build_tree
from .env import collect_env_info
from .env_help import EnvHelpFormat, render_env_help
from .node import ConfigNode
from .options import DEFAULT_RENDER_OPTIONS, RenderOptions
from .template import render_template

NO_ENV_VARS_MESSAGE = "No environment variables defined."


class ConfigInspector:
    """Renders the template and environment help of a schema without loading it.

    Args:
        schema: Dataclass type, ConfigSchema, or anything SchemaBuilder accepts
        options: Formatting options for both renderers
    """

    def __init__(self, schema: Any, options: Optional[RenderOptions] = None):
        self.tree: ConfigNode = build_tree(schema)
        self.options = options or DEFAULT_RENDER_OPTIONS

    def render_template(self, include_help: bool = False) -> str:
        return render_template(self.tree, include_help, self.options)

    def render_env_help(self, fmt: EnvHelpFormat = EnvHelpFormat.ASCII_TABLE) -> str:
        return render_env_help(self.tree, fmt, self.options)

    def has_env_vars(self) -> bool:
        return any(info.env_var is not None for info in collect_env_info(self.tree))

    def print_config_template(self, include_help: bool = False, stream: TextIO | None = None) -> None:
        """Write the YAML template to ``stream`` (stdout by default)."""
        stream = stream or sys.stdout
        stream.write(self.render_template(include_help))

    def print_env_help(
        self,
        fmt: EnvHelpFormat = EnvHelpFormat.ASCII_TABLE,
        stream: TextIO | None = None,
    ) -> None:
        """Write environment-variable help to ``stream`` (stderr by default)."""
        stream = stream or sys.stderr
        if not self.has_env_vars():
            print(NO_ENV_VARS_MESSAGE, file=stream)
            return
        print("Environment Variables:", file=stream)
        stream.write(self.render_env_help(fmt))
