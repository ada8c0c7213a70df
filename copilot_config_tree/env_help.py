# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Environment-variable documentation in table and inline formats."""

import json
from collections.abc import Iterable
from datetime import timedelta
from enum import Enum
from typing import Any, Optional, Union

from .coercion import format_duration
from .env import collect_env_info
from .exceptions import TemplateRenderError
from .models import EnvInfo
from .node import ConfigNode
from .options import DEFAULT_RENDER_OPTIONS, RenderOptions

HEADERS = ("Variable", "Default", "Description")


class EnvHelpFormat(str, Enum):
    """Output styles for environment-variable help."""

    ASCII_TABLE = "ascii"
    INLINE = "inline"
    MARKDOWN_TABLE = "markdown"


def env_value_text(value: Any) -> str:
    """Format a typed default the way it would be written in an environment variable.

    Raises:
        TemplateRenderError: If the value's type is not supported
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (list, tuple)):
        return ",".join(env_value_text(item) for item in value)
    if isinstance(value, dict):
        try:
            return json.dumps(value, ensure_ascii=False)
        except TypeError as e:
            raise TemplateRenderError(f"unsupported map value: {e}") from e
    raise TemplateRenderError(f"unsupported type: {type(value).__name__}")


def _rows(infos: Iterable[EnvInfo]) -> list[tuple[str, Optional[str], Optional[str]]]:
    rows = []
    for info in infos:
        if info.env_var is None:
            continue
        default = env_value_text(info.default_value) if info.default_present else None
        rows.append((info.env_var, default, info.help_text or None))
    return rows


def _render_ascii(rows, options: RenderOptions) -> str:
    table = [HEADERS] + [(name, default or "", help_text or "") for name, default, help_text in rows]
    widths = [max(len(row[col]) for row in table) for col in range(len(HEADERS))]

    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def format_row(row) -> str:
        cells = (cell.ljust(width) for cell, width in zip(row, widths))
        return "| " + " | ".join(cells) + " |"

    lines = [border, format_row(table[0]), border]
    lines.extend(format_row(row) for row in table[1:])
    lines.append(border)
    return "\n".join(lines) + "\n"


def _markdown_cell(text: Optional[str], options: RenderOptions) -> str:
    if text is None:
        return options.missing_placeholder
    return text.replace("|", "\\|")


def _render_markdown(rows, options: RenderOptions) -> str:
    lines = [
        "| " + " | ".join(HEADERS) + " |",
        "|" + "|".join(" --- " for _ in HEADERS) + "|",
    ]
    for name, default, help_text in rows:
        cells = (name, _markdown_cell(default, options), _markdown_cell(help_text, options))
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines) + "\n"


def _render_inline(rows, options: RenderOptions) -> str:
    lines = []
    for name, default, help_text in rows:
        line = name
        if default is not None:
            line += f" [default={default}]"
        if help_text is not None:
            line += f" {options.comment_prefix} {help_text}"
        lines.append(line)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


_RENDERERS = {
    EnvHelpFormat.ASCII_TABLE: _render_ascii,
    EnvHelpFormat.INLINE: _render_inline,
    EnvHelpFormat.MARKDOWN_TABLE: _render_markdown,
}


def render_env_help(
    source: Union[ConfigNode, Iterable[EnvInfo]],
    fmt: EnvHelpFormat = EnvHelpFormat.ASCII_TABLE,
    options: Optional[RenderOptions] = None,
) -> str:
    """Render documentation for every bound environment variable.

    Leaves without an environment binding are skipped.

    Args:
        source: Schema tree or pre-computed leaf projections
        fmt: Output style
        options: Formatting options

    Returns:
        Rendered text

    Raises:
        TemplateRenderError: If a default value has an unsupported type
    """
    options = options or DEFAULT_RENDER_OPTIONS
    infos = collect_env_info(source) if isinstance(source, ConfigNode) else source
    return _RENDERERS[EnvHelpFormat(fmt)](_rows(infos), options)
