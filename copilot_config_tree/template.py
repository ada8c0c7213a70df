# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Annotated YAML template rendering for a schema tree."""

import json
import math
from datetime import timedelta
from typing import Any, Optional

from .coercion import format_duration
from .exceptions import TemplateRenderError
from .node import ConfigNode
from .options import DEFAULT_RENDER_OPTIONS, RenderOptions

# Width of the "- " list marker; continuation lines of an item align past it
_ITEM_MARKER = "- "


def format_value(value: Any, options: RenderOptions = DEFAULT_RENDER_OPTIONS) -> str:
    """Format a default value as a YAML scalar or flow collection.

    Raises:
        TemplateRenderError: If the value's type is not supported
    """
    if value is None:
        return options.null_marker
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return ".nan"
        if math.isinf(value):
            return ".inf" if value > 0 else "-.inf"
        text = repr(value)
        mantissa, sep, exponent = text.partition("e")
        if sep and "." not in mantissa:
            # YAML 1.1 resolvers only read exponent floats that contain a dot
            text = f"{mantissa}.0e{exponent}"
        return text
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, timedelta):
        return json.dumps(format_duration(value))
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(item, options) for item in value) + "]"
    if isinstance(value, dict):
        items = (
            f"{json.dumps(str(key), ensure_ascii=False)}: {format_value(item, options)}"
            for key, item in value.items()
        )
        return "{" + ", ".join(items) + "}"
    raise TemplateRenderError(f"unsupported type: {type(value).__name__}")


class TemplateRenderer:
    """Serializes a schema tree into an annotated YAML document."""

    def __init__(self, include_help: bool = False, options: Optional[RenderOptions] = None):
        self.include_help = include_help
        self.options = options or DEFAULT_RENDER_OPTIONS

    def render(self, tree: ConfigNode) -> str:
        lines: list[str] = []
        if tree.is_root:
            for child in tree.children:
                self._render_node(child, "", lines)
        else:
            self._render_node(tree, "", lines)
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def _help(self, node: ConfigNode) -> str:
        if self.include_help and node.description:
            return node.description
        return ""

    def _trailing_comment(self, node: ConfigNode) -> str:
        text = self._help(node)
        if not text:
            return ""
        return f"{' ' * self.options.comment_gap}{self.options.comment_prefix} {text}"

    def _comment_line(self, node: ConfigNode, prefix: str, lines: list[str]) -> None:
        text = self._help(node)
        if text:
            lines.append(f"{prefix}{self.options.comment_prefix} {text}")

    def _render_node(self, node: ConfigNode, prefix: str, lines: list[str]) -> None:
        if node.leaf is not None:
            self._render_leaf(node, prefix, lines)
        elif node.is_array_of_structs:
            self._render_struct_array(node, prefix, lines)
        else:
            self._comment_line(node, prefix, lines)
            lines.append(f"{prefix}{node.field_name}:")
            for child in node.children:
                self._render_node(child, prefix + self.options.indent_unit, lines)

    def _render_leaf(self, node: ConfigNode, prefix: str, lines: list[str]) -> None:
        leaf = node.leaf
        comment = self._trailing_comment(node)

        if leaf.is_array:
            lines.append(f"{prefix}{node.field_name}:{comment}")
            if leaf.default_present:
                item_prefix = prefix + self.options.indent_unit
                for item in leaf.default_value:
                    lines.append(f"{item_prefix}{_ITEM_MARKER}{format_value(item, self.options)}")
            return

        if leaf.default_present:
            value = format_value(leaf.default_value, self.options)
        else:
            value = self.options.null_marker
        lines.append(f"{prefix}{node.field_name}: {value}{comment}")

    def _render_struct_array(self, node: ConfigNode, prefix: str, lines: list[str]) -> None:
        self._comment_line(node, prefix, lines)
        lines.append(f"{prefix}{node.field_name}:")

        marker_prefix = prefix + self.options.indent_unit
        item_prefix = marker_prefix + " " * len(_ITEM_MARKER)
        element: list[str] = []
        for child in node.children:
            self._render_node(child, item_prefix, element)

        # The list marker goes on the element's first key, not on a comment line
        comment_start = item_prefix + self.options.comment_prefix
        for index, line in enumerate(element):
            if not line.startswith(comment_start):
                element[index] = marker_prefix + _ITEM_MARKER + line[len(item_prefix):]
                break
        lines.extend(element)


def render_template(
    tree: ConfigNode,
    include_help: bool = False,
    options: Optional[RenderOptions] = None,
) -> str:
    """Render the tree as an annotated YAML template.

    Args:
        tree: Root of the schema tree (or any subtree)
        include_help: Append descriptions as YAML comments
        options: Formatting options

    Returns:
        Template text, one line per node, newline-terminated

    Raises:
        TemplateRenderError: If a default value has an unsupported type
    """
    return TemplateRenderer(include_help, options).render(tree)
