# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Rendering options shared by the template and env-help renderers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderOptions:
    """Formatting settings passed explicitly to renderers.

    Attributes:
        indent_width: Spaces per tree level in templates
        null_marker: Value written for leaves without a default
        missing_placeholder: Text for absent default/help cells in Markdown tables
        comment_prefix: Marker that starts a template comment
        comment_gap: Spaces between a template value and its trailing comment
    """
    indent_width: int = 4
    null_marker: str = "null"
    missing_placeholder: str = "N/A"
    comment_prefix: str = "#"
    comment_gap: int = 2

    @property
    def indent_unit(self) -> str:
        return " " * self.indent_width


DEFAULT_RENDER_OPTIONS = RenderOptions()
