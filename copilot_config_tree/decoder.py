# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Decoding of a merged configuration mapping into typed values."""

import copy
import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from .coercion import coerce_value
from .exceptions import ResolutionError
from .models import zero_value
from .node import ConfigNode
from .typed_config import TypedConfig

_MISSING = object()


def decode(tree: ConfigNode, merged: Mapping[str, Any], schema_version: str | None = None) -> Any:
    """Turn a merged mapping into an instance of the tree's target type.

    Leaves missing from ``merged`` get their declared default or the zero
    value of their kind. Struct-array elements get their element defaults.

    Args:
        tree: Root of the schema tree
        merged: Output of LayeredResolver.resolve()
        schema_version: Recorded on TypedConfig results

    Returns:
        A dataclass instance when the schema came from a dataclass,
        otherwise a TypedConfig

    Raises:
        ResolutionError: If a value cannot be coerced to its declared kind
    """
    return _decode_struct(tree, merged, "", schema_version)


def _decode_struct(node: ConfigNode, data: Any, path: str, schema_version: str | None) -> Any:
    if data is _MISSING or data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ResolutionError(
            f"{path or 'configuration'}: expected a mapping, got {type(data).__name__}"
        )

    values: dict[str, Any] = {}
    for child in node.children:
        child_path = f"{path}.{child.field_name}" if path else child.field_name
        raw = data.get(child.field_name, _MISSING)
        values[child.attr_name] = _decode_node(child, raw, child_path, schema_version)

    target = node.target
    if target is not None and dataclasses.is_dataclass(target):
        return target(**values)
    return TypedConfig(values, schema_version=schema_version if node.is_root else None)


def _decode_node(node: ConfigNode, raw: Any, path: str, schema_version: str | None) -> Any:
    if node.leaf is not None:
        leaf = node.leaf
        if raw is _MISSING or raw is None:
            if leaf.default_present:
                return copy.deepcopy(leaf.default_value)
            return zero_value(leaf.kind, leaf.is_array)
        try:
            return coerce_value(leaf.kind, leaf.is_array, raw)
        except (TypeError, ValueError) as e:
            raise ResolutionError(f"{path}: {e}") from e

    if node.is_array_of_structs:
        if raw is _MISSING or raw is None:
            return []
        if isinstance(raw, str):
            # Environment variables carry the whole list as JSON
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ResolutionError(f"{path}: invalid JSON array: {e}") from e
        if not isinstance(raw, list):
            raise ResolutionError(f"{path}: expected a list, got {type(raw).__name__}")
        return [
            _decode_struct(node, item, f"{path}[{index}]", schema_version)
            for index, item in enumerate(raw)
        ]

    return _decode_struct(node, raw, path, schema_version)
