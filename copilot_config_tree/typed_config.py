# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Typed configuration wrapper for schemas declared without a dataclass."""

import copy
from typing import Any, Dict, Optional


class TypedConfig:
    """Read-only wrapper that provides attribute-only access to config values.

    Nested structs are themselves TypedConfig instances and struct arrays
    are lists of them. Dictionary-style access is intentionally NOT
    supported so that every access names a declared field.

    Example:
        >>> config = TypedConfig({"port": 8080, "db": TypedConfig({"host": "localhost"})})
        >>> config.port
        8080
        >>> config.db.host
        'localhost'
        >>> config["port"]
        TypeError: TypedConfig does not support dict-style access
    """

    def __init__(self, config_dict: Dict[str, Any], schema_version: Optional[str] = None):
        object.__setattr__(self, '_config', dict(config_dict))
        object.__setattr__(self, '_schema_version', schema_version)

    def get_schema_version(self) -> Optional[str]:
        return object.__getattribute__(self, '_schema_version')

    def __getattr__(self, name: str) -> Any:
        """Get configuration value by attribute name only.

        Raises:
            AttributeError: If configuration key does not exist
        """
        if name.startswith('_'):
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

        config = object.__getattribute__(self, '_config')
        if name not in config:
            raise AttributeError(
                f"Configuration key '{name}' not found. "
                f"Available keys: {sorted(config.keys())}"
            )
        return config[name]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(
            f"Cannot modify configuration. '{name}' is read-only. "
            "Configuration is immutable after loading."
        )

    def __getitem__(self, key: str) -> Any:
        raise TypeError(
            f"TypedConfig does not support dict-style access (config['{key}']). "
            f"Use attribute-style instead: config.{key}"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypedConfig):
            return NotImplemented
        return object.__getattribute__(self, '_config') == object.__getattribute__(other, '_config')

    __hash__ = None

    def __deepcopy__(self, memo: dict) -> "TypedConfig":
        config = object.__getattribute__(self, '_config')
        return TypedConfig(copy.deepcopy(config, memo), self.get_schema_version())

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain nested dictionary of the values."""

        def unwrap(value: Any) -> Any:
            if isinstance(value, TypedConfig):
                return value.to_dict()
            if isinstance(value, list):
                return [unwrap(item) for item in value]
            return copy.deepcopy(value)

        config = object.__getattribute__(self, '_config')
        return {key: unwrap(value) for key, value in config.items()}

    def __repr__(self) -> str:
        config = object.__getattribute__(self, '_config')
        return f"TypedConfig({config!r})"

    def __dir__(self) -> list:
        """Show available configuration keys for IDE autocomplete."""
        config = object.__getattribute__(self, '_config')
        return sorted(config.keys())
