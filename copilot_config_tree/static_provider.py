# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Static/dictionary-backed reader."""

from typing import Any

from .base import EnvironmentReader


class StaticConfigProvider(EnvironmentReader):
    """Reader with static values (useful for tests).

    Non-string values are returned as text, the way they would appear in
    a real environment.
    """

    def __init__(self, values: dict[str, Any] | None = None):
        self._values = values if values is not None else {}

    def get(self, name: str) -> str | None:
        value = self._values.get(name)
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def unset(self, name: str) -> None:
        self._values.pop(name, None)
