# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Declarative configuration schemas.

A schema is an ordered list of FieldSpec entries. It is produced once, at
registration time, either from a dataclass whose fields carry their tags in
``dataclasses.field(metadata=...)`` or from a dictionary (JSON/YAML file).
"""

import dataclasses
import json
import os
import types
import typing
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Optional, Union

import yaml

from .exceptions import ConfigSchemaError, ShapeError
from .models import FieldKind, FieldSpec

# Metadata keys understood on dataclass fields
BINDING_KEY_TAG = "mapstructure"
ENV_TAG = "env"
DEFAULT_TAG = "default"
DESCRIPTION_TAG = "desc"

_SCALAR_TYPES = {
    str: FieldKind.STRING,
    int: FieldKind.INT,
    float: FieldKind.FLOAT,
    bool: FieldKind.BOOL,
    timedelta: FieldKind.DURATION,
}

_TYPE_NAMES = {
    "string": FieldKind.STRING,
    "str": FieldKind.STRING,
    "int": FieldKind.INT,
    "integer": FieldKind.INT,
    "float": FieldKind.FLOAT,
    "number": FieldKind.FLOAT,
    "bool": FieldKind.BOOL,
    "boolean": FieldKind.BOOL,
    "duration": FieldKind.DURATION,
    "map": FieldKind.MAP,
    "object": FieldKind.STRUCT,
    "struct": FieldKind.STRUCT,
}


def setting(
    key: Optional[str] = None,
    *,
    default: Optional[str] = None,
    env: str = "",
    desc: str = "",
    **field_kwargs: Any,
) -> Any:
    """Declare a configuration field on a dataclass.

    Args:
        key: Binding key (required for the schema to build)
        default: Raw default text, parsed against the field's annotation
        env: "" to derive the env var name, "-" to suppress it, or an explicit name
        desc: Help text used in templates and env documentation
        **field_kwargs: Passed through to dataclasses.field()

    Example:
        >>> @dataclass
        ... class ServerConfig:
        ...     port: int = setting("port", default="8080", desc="HTTP port")
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    if key is not None:
        metadata[BINDING_KEY_TAG] = key
    if default is not None:
        metadata[DEFAULT_TAG] = default
    if env:
        metadata[ENV_TAG] = env
    if desc:
        metadata[DESCRIPTION_TAG] = desc
    return field(metadata=metadata, **field_kwargs)


def _type_label(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__name__
    return str(tp)


def _unwrap_optional(tp: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _fields_from_dataclass(cls: type) -> list[FieldSpec]:
    hints = typing.get_type_hints(cls)
    specs: list[FieldSpec] = []

    for dc_field in dataclasses.fields(cls):
        tp = _unwrap_optional(hints.get(dc_field.name, dc_field.type))
        metadata = dc_field.metadata
        spec = FieldSpec(
            name=dc_field.name,
            kind=FieldKind.STRING,
            binding_key=metadata.get(BINDING_KEY_TAG),
            description=metadata.get(DESCRIPTION_TAG, ""),
            env=metadata.get(ENV_TAG, ""),
            default=metadata.get(DEFAULT_TAG),
        )

        origin = typing.get_origin(tp)
        if origin in (list, tuple):
            spec.is_array = True
            args = typing.get_args(tp)
            tp = _unwrap_optional(args[0]) if args else str
            origin = typing.get_origin(tp)

        if dataclasses.is_dataclass(tp) and isinstance(tp, type):
            spec.kind = FieldKind.STRUCT
            spec.target = tp
            spec.fields = _fields_from_dataclass(tp)
        elif tp is dict or origin is dict:
            spec.kind = FieldKind.MAP
        elif tp in _SCALAR_TYPES:
            spec.kind = _SCALAR_TYPES[tp]
        else:
            raise ShapeError(
                f"field {dc_field.name}: unsupported type {_type_label(tp)}"
            )
        specs.append(spec)

    return specs


def _raw_default(value: Any) -> Optional[str]:
    """Re-encode a JSON/YAML default as raw text for the coercer."""
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


@dataclass
class ConfigSchema:
    """Declarative configuration schema.

    Attributes:
        fields: Top-level fields in declaration order
        service_name: Name of the owning service or application
        target: Dataclass instantiated for the root, if declared from one
        schema_version: Optional schema version string
        metadata: Free-form metadata carried from schema files
    """
    fields: list[FieldSpec] = field(default_factory=list)
    service_name: str = "unknown"
    target: Optional[type] = None
    schema_version: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dataclass(cls, config_type: Any) -> "ConfigSchema":
        """Create a schema from a dataclass type.

        Raises:
            ShapeError: If config_type is not a dataclass type
        """
        if not (isinstance(config_type, type) and dataclasses.is_dataclass(config_type)):
            raise ShapeError(f"expected a struct type but got {_type_label(config_type)}")
        return cls(
            fields=_fields_from_dataclass(config_type),
            service_name=config_type.__name__,
            target=config_type,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigSchema":
        """Create a schema from a dictionary.

        Args:
            data: Schema data with "service_name" and a "fields" mapping

        Returns:
            ConfigSchema instance
        """
        root_type = data.get("type", "object")
        if _TYPE_NAMES.get(root_type) != FieldKind.STRUCT:
            raise ShapeError(f"expected a struct type but got {root_type}")

        fields_data = data.get("fields", data.get("properties", {}))
        if not isinstance(fields_data, dict):
            raise ConfigSchemaError("schema 'fields' must be a mapping")

        return cls(
            fields=[cls._parse_field_spec(name, spec) for name, spec in fields_data.items()],
            service_name=data.get("service_name", "unknown"),
            schema_version=data.get("schema_version"),
            metadata=data.get("metadata", {}),
        )

    @classmethod
    def _parse_field_spec(cls, name: str, data: dict[str, Any]) -> FieldSpec:
        """Parse a field specification from dictionary.

        Args:
            name: Field name
            data: Field specification data

        Returns:
            FieldSpec instance
        """
        if not isinstance(data, dict):
            raise ConfigSchemaError(f"field {name}: specification must be a mapping")

        type_name = data.get("type", "string")
        is_array = type_name == "array"
        element = data
        if is_array:
            element = data.get("items", {"type": "string"})
            if not isinstance(element, dict):
                raise ConfigSchemaError(f"field {name}: array 'items' must be a mapping")
            type_name = element.get("type", "string")

        kind = _TYPE_NAMES.get(type_name)
        if kind is None:
            raise ShapeError(f"field {name}: unsupported type {type_name}")

        nested = None
        if kind == FieldKind.STRUCT:
            properties = element.get("properties")
            if not isinstance(properties, dict):
                raise ShapeError(f"field {name}: expected a struct type with properties")
            nested = [cls._parse_field_spec(prop, spec) for prop, spec in properties.items()]

        return FieldSpec(
            name=name,
            kind=kind,
            binding_key=data.get("key"),
            description=data.get("description") or "",
            env=data.get("env") or "",
            default=_raw_default(data.get("default")),
            is_array=is_array,
            fields=nested,
        )

    @classmethod
    def from_file(cls, filepath: str) -> "ConfigSchema":
        """Load a schema from a JSON or YAML file.

        Raises:
            ConfigSchemaError: If schema file is invalid or missing
        """
        if not os.path.exists(filepath):
            raise ConfigSchemaError(f"Schema file not found: {filepath}")

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                if filepath.endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigSchemaError(f"Invalid JSON in schema file {filepath}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigSchemaError(f"Invalid YAML in schema file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigSchemaError(f"Schema file {filepath} must contain a mapping")
        return cls.from_dict(data)


SchemaSource = Union[ConfigSchema, type, FieldSpec, list]


def as_schema(source: Any) -> ConfigSchema:
    """Normalize any supported schema declaration into a ConfigSchema.

    Accepts a ConfigSchema, a dataclass type, a struct FieldSpec or a plain
    list of FieldSpec entries.

    Raises:
        ShapeError: If the declaration does not describe a container
    """
    if isinstance(source, ConfigSchema):
        return source
    if isinstance(source, FieldSpec):
        if source.kind != FieldKind.STRUCT or source.is_array:
            kind = f"[]{source.kind.value}" if source.is_array else source.kind.value
            raise ShapeError(f"expected a struct type but got {kind}")
        return ConfigSchema(
            fields=list(source.fields or []),
            service_name=source.name,
            target=source.target,
        )
    if isinstance(source, (list, tuple)):
        return ConfigSchema(fields=list(source))
    return ConfigSchema.from_dataclass(source)
