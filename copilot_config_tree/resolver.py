# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Layered overlay of defaults, file content and environment variables."""

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from .base import EnvironmentReader
from .env_provider import EnvConfigProvider
from .models import DefaultInfo, EnvBinding

logger = logging.getLogger(__name__)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge two mappings without mutating either.

    Nested mappings are merged key by key; lists and scalars in ``override``
    replace the value in ``base``.
    """
    result: dict[str, Any] = {key: copy.deepcopy(value) for key, value in base.items()}
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def set_path(target: dict[str, Any], dotted_path: str, value: Any) -> None:
    """Assign ``value`` at a dotted path, creating intermediate mappings.

    A non-mapping value found on the way is replaced by a mapping.
    """
    parts = dotted_path.split(".")
    current = target
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


class LayeredResolver:
    """Merges the configuration layers; environment > file > default.

    Args:
        defaults: Dotted path and typed default for each leaf that has one
        env_bindings: Dotted path and variable name for each bound leaf
        env_reader: Source of environment values (process environment by default)
    """

    def __init__(
        self,
        defaults: Iterable[DefaultInfo],
        env_bindings: Iterable[EnvBinding],
        env_reader: Optional[EnvironmentReader] = None,
    ):
        self.defaults = list(defaults)
        self.env_bindings = list(env_bindings)
        self.env_reader = env_reader if env_reader is not None else EnvConfigProvider()

    def default_layer(self) -> dict[str, Any]:
        layer: dict[str, Any] = {}
        for info in self.defaults:
            set_path(layer, info.bind_key, copy.deepcopy(info.default_value))
        return layer

    def env_layer(self) -> dict[str, Any]:
        layer: dict[str, Any] = {}
        for binding in self.env_bindings:
            value = self.env_reader.get(binding.env_var)
            if value is not None:
                logger.debug(f"Using {binding.env_var} for {binding.bind_key}")
                set_path(layer, binding.bind_key, value)
        return layer

    def resolve(self, file_content: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """Build the merged, still untyped, configuration tree.

        Args:
            file_content: Parsed configuration file, if any

        Returns:
            A new nested dictionary; inputs are not modified
        """
        merged = self.default_layer()
        if file_content:
            merged = deep_merge(merged, file_content)
        return deep_merge(merged, self.env_layer())
