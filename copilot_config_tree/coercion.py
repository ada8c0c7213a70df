# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Conversion of raw default text and runtime values into typed values.

Two rule sets live here:

- Declared defaults (``coerce_default``) are parsed strictly. A failure aborts
  schema construction with a DefaultValueError.
- Runtime values coming from files or environment variables
  (``coerce_value``) are accepted more leniently, the same way the
  environment providers interpret booleans and numbers.
"""

import json
import math
import re
from datetime import timedelta
from typing import Any, Optional

from .exceptions import DefaultValueError
from .models import FieldKind, zero_value

_INT_RE = re.compile(r"[+-]?[0-9]+")
_DURATION_PART_RE = re.compile(r"([0-9]*\.?[0-9]*)(ns|us|µs|μs|ms|s|m|h)")

# Microseconds per unit; timedelta cannot go below one microsecond
_DURATION_UNITS = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}

_TRUE_WORDS = ("true", "1", "yes", "on")
_FALSE_WORDS = ("false", "0", "no", "off")


def parse_duration(text: str) -> timedelta:
    """Parse duration text such as "300ms", "1h30m" or "-2.5s".

    Raises:
        ValueError: If the text is not a valid duration
    """
    if not text:
        raise ValueError("empty duration")

    body = text
    sign = 1
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration '{text}'")

    total_us = 0.0
    pos = 0
    while pos < len(body):
        match = _DURATION_PART_RE.match(body, pos)
        if not match or match.group(1) in ("", "."):
            raise ValueError(f"invalid duration '{text}'")
        total_us += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    return timedelta(microseconds=sign * total_us)


def format_duration(value: timedelta) -> str:
    """Format a timedelta as compact duration text, e.g. "1h30m0s"."""
    total_us = round(value.total_seconds() * 1_000_000)
    if total_us == 0:
        return "0s"

    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)

    if total_us < 1_000:
        return f"{sign}{total_us}us"
    if total_us < 1_000_000:
        return f"{sign}{_trim_number(total_us / 1_000)}ms"

    hours, rest = divmod(total_us, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = _trim_number(rest / 1_000_000)

    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return f"{out}{seconds}s"


def _trim_number(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")


def parse_scalar(kind: FieldKind, text: str) -> Any:
    """Parse declared default text into a scalar of the given kind.

    Raises:
        ValueError: If the text does not parse strictly as the kind
    """
    if kind == FieldKind.STRING:
        return text
    if kind == FieldKind.INT:
        if not _INT_RE.fullmatch(text):
            raise ValueError("not a base-10 integer")
        return int(text)
    if kind == FieldKind.FLOAT:
        if text != text.strip() or "_" in text or not text:
            raise ValueError("not a float")
        return float(text)
    if kind == FieldKind.BOOL:
        if text == "true":
            return True
        if text == "false":
            return False
        raise ValueError("expected 'true' or 'false'")
    if kind == FieldKind.DURATION:
        return parse_duration(text)
    raise ValueError(f"kind {kind.value} is not a scalar")


def _parse_json_map(text: str) -> dict:
    value = json.loads(text)
    if not isinstance(value, dict):
        raise ValueError("expected a JSON object")
    return value


def _check_json_element(kind: FieldKind, element: Any) -> Any:
    if isinstance(element, str):
        return parse_scalar(kind, element)
    if kind == FieldKind.INT and isinstance(element, int) and not isinstance(element, bool):
        return element
    if kind == FieldKind.FLOAT and isinstance(element, (int, float)) and not isinstance(element, bool):
        return float(element)
    if kind == FieldKind.BOOL and isinstance(element, bool):
        return element
    raise ValueError(f"element {element!r} is not a {kind.value}")


def _split_array(kind: FieldKind, text: str) -> list[Any]:
    """Decode array text: a JSON array when bracketed, a comma list otherwise."""
    if text == "":
        return []
    if text.startswith("[") and text.endswith("]"):
        decoded = json.loads(text)
        if not isinstance(decoded, list):
            raise ValueError("expected a JSON array")
        return [_check_json_element(kind, element) for element in decoded]
    return [parse_scalar(kind, part) for part in text.split(",")]


def coerce_default(
    field_name: str,
    kind: FieldKind,
    is_array: bool,
    raw: Optional[str],
) -> tuple[bool, Any]:
    """Convert a declared raw default into a typed value.

    Args:
        field_name: Field name used in error messages
        kind: Declared kind (element kind for arrays)
        is_array: Whether the field is a list
        raw: Raw default text, or None when no default is declared

    Returns:
        Tuple of (default_present, value). Without a default the value is the
        kind's zero value.

    Raises:
        DefaultValueError: If the text does not parse as the declared kind
    """
    kind_label = f"[]{kind.value}" if is_array else kind.value

    if kind == FieldKind.STRUCT:
        raise DefaultValueError(field_name, raw or "", kind_label, "struct fields cannot declare defaults")

    if raw is None:
        return False, zero_value(kind, is_array)

    try:
        if is_array:
            if kind == FieldKind.MAP:
                raise ValueError("unsupported array element kind")
            return True, _split_array(kind, raw)
        if kind == FieldKind.MAP:
            return True, _parse_json_map(raw)
        return True, parse_scalar(kind, raw)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError subclass
        raise DefaultValueError(field_name, raw, kind_label, str(e)) from e


def _coerce_runtime_scalar(kind: FieldKind, value: Any) -> Any:
    if kind == FieldKind.STRING:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float)):
            return str(value)
        raise TypeError(f"expected a string, got {type(value).__name__}")

    if kind == FieldKind.INT:
        if isinstance(value, bool):
            raise TypeError("expected an integer, got bool")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            text = value.strip()
            if _INT_RE.fullmatch(text):
                return int(text)
            raise ValueError(f"'{value}' is not an integer")
        raise TypeError(f"expected an integer, got {type(value).__name__}")

    if kind == FieldKind.FLOAT:
        if isinstance(value, bool):
            raise TypeError("expected a float, got bool")
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            return float(value.strip())
        raise TypeError(f"expected a float, got {type(value).__name__}")

    if kind == FieldKind.BOOL:
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return value != 0
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_WORDS:
                return True
            if lowered in _FALSE_WORDS:
                return False
            raise ValueError(f"'{value}' is not a boolean")
        raise TypeError(f"expected a boolean, got {type(value).__name__}")

    if kind == FieldKind.DURATION:
        if isinstance(value, timedelta):
            return value
        if isinstance(value, bool):
            raise TypeError("expected a duration, got bool")
        if isinstance(value, (int, float)):
            if isinstance(value, float) and not math.isfinite(value):
                raise ValueError("duration must be finite")
            return timedelta(seconds=value)
        if isinstance(value, str):
            return parse_duration(value.strip())
        raise TypeError(f"expected a duration, got {type(value).__name__}")

    if kind == FieldKind.MAP:
        if isinstance(value, dict):
            return dict(value)
        if isinstance(value, str):
            return _parse_json_map(value)
        raise TypeError(f"expected a mapping, got {type(value).__name__}")

    raise TypeError(f"kind {kind.value} is not a value kind")


def coerce_value(kind: FieldKind, is_array: bool, value: Any) -> Any:
    """Coerce a value read from a file or the environment into the field's kind.

    Raises:
        ValueError: If the value has the right type but unparseable content
        TypeError: If the value has an incompatible type
    """
    if value is None:
        return zero_value(kind, is_array)

    if not is_array:
        return _coerce_runtime_scalar(kind, value)

    if isinstance(value, str):
        text = value.strip()
        if text.startswith("[") and text.endswith("]"):
            items = json.loads(text)
            if not isinstance(items, list):
                raise ValueError("expected a JSON array")
        elif text == "":
            items = []
        else:
            items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        # A lone scalar is treated as a one-element list
        items = [value]

    return [_coerce_runtime_scalar(kind, item) for item in items]
