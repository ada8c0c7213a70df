# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Data models for declarative field descriptions and schema tree projections."""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Optional

ENV_SUPPRESS = "-"


class FieldKind(str, Enum):
    """Declared value kind of a configuration field."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DURATION = "duration"
    MAP = "map"
    STRUCT = "struct"

    @property
    def is_scalar(self) -> bool:
        return self not in (FieldKind.MAP, FieldKind.STRUCT)


def zero_value(kind: FieldKind, is_array: bool = False) -> Any:
    """Return the value a field takes when nothing was declared or supplied."""
    if is_array:
        return []
    zeros = {
        FieldKind.STRING: "",
        FieldKind.INT: 0,
        FieldKind.FLOAT: 0.0,
        FieldKind.BOOL: False,
        FieldKind.DURATION: timedelta(0),
        FieldKind.MAP: {},
    }
    return zeros.get(kind)


@dataclass
class FieldSpec:
    """Declarative description of a single configuration field.

    Attributes:
        name: Declared field name (dataclass attribute or schema property name)
        kind: Value kind; STRUCT for nested containers
        binding_key: Key segment used when merging file/env/default values
        description: Human-readable help text
        env: Override token: "" derives a name, "-" suppresses, anything else is explicit
        default: Raw default text, or None when no default is declared
        is_array: True for list fields (arrays of scalars or of structs)
        fields: Child fields when kind is STRUCT
        target: Dataclass type to instantiate for STRUCT fields, if any
    """
    name: str
    kind: FieldKind
    binding_key: Optional[str] = None
    description: str = ""
    env: str = ""
    default: Optional[str] = None
    is_array: bool = False
    fields: Optional[list["FieldSpec"]] = None
    target: Optional[type] = None

    @property
    def is_struct(self) -> bool:
        return self.kind == FieldKind.STRUCT


@dataclass
class LeafDescriptor:
    """Resolved type and default of a leaf node."""
    kind: FieldKind
    is_array: bool = False
    default_present: bool = False
    default_value: Any = None


@dataclass(frozen=True)
class EnvInfo:
    """Flattened, read-only view of one leaf or struct array.

    Attributes:
        env_var: Derived environment variable name, or None when suppressed
        bind_key: Dotted path used by the resolver
        default_present: Whether the leaf declares a default
        default_value: Typed default value
        kind: Declared kind of the leaf (STRUCT for a struct array)
        is_array: Whether the leaf holds a list
        help_text: Field description
    """
    env_var: Optional[str]
    bind_key: str
    default_present: bool
    default_value: Any
    kind: FieldKind
    is_array: bool = False
    help_text: str = ""


@dataclass(frozen=True)
class DefaultInfo:
    """A (dotted path, typed default) pair handed to the resolver."""
    bind_key: str
    default_value: Any


@dataclass(frozen=True)
class EnvBinding:
    """A (dotted path, environment variable) pair handed to the resolver."""
    bind_key: str
    env_var: str

