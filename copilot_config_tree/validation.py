# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Reusable field checks for configuration validate() hooks.

Every check returns True when the value is acceptable and raises
FieldValidationError otherwise, so a hook can simply call them in turn:

    @dataclass
    class ServerConfig:
        host: str = setting("host", default="localhost")
        port: int = setting("port", default="8080")

        def validate(self):
            is_valid_hostname_or_ip(self.host, "host")
            is_valid_port(self.port, "port")
"""

import ipaddress
import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from croniter import croniter

from .coercion import parse_duration
from .exceptions import FieldValidationError

MAX_PORT = 65535
MAX_HOSTNAME_LENGTH = 255
MAX_LABEL_LENGTH = 63

_EMAIL_PATTERN = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9.\-]+\.[a-z]{2,}$", re.IGNORECASE)

_EVERY_PREFIX = "@every "
_CRON_DESCRIPTORS = frozenset(
    ["@yearly", "@annually", "@monthly", "@weekly", "@daily", "@midnight", "@hourly"]
)


def _empty(value: str, field_name: str, allow_empty: bool) -> bool:
    """Return True if an empty value is accepted; raise if it is not; False if non-empty."""
    if value:
        return False
    if allow_empty:
        return True
    raise FieldValidationError(field_name, "must not be empty")


def is_valid_hostname_or_ip(host: str, field_name: str, allow_empty: bool = False) -> bool:
    """Check that ``host`` is an IPv4/IPv6 address or an RFC 1123 hostname."""
    if _empty(host, field_name, allow_empty):
        return True

    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass

    invalid = FieldValidationError(field_name, f"'{host}' is not a valid hostname or IP address")
    labels = host.split(".")

    # Four numeric labels can only be a (bad) dotted-quad address
    if len(labels) == 4 and all(label.isdigit() for label in labels):
        raise invalid

    if len(host) > MAX_HOSTNAME_LENGTH:
        raise invalid
    for label in labels:
        if not label or len(label) > MAX_LABEL_LENGTH:
            raise invalid
        if label[0] == "-" or label[-1] == "-":
            raise invalid
        if not all(char.isalnum() or char == "-" for char in label):
            raise invalid
    return True


def is_valid_port(port: int, field_name: str, allow_zero: bool = False) -> bool:
    """Check that ``port`` is in 1-65535 (or 0 when ``allow_zero``)."""
    if allow_zero and port == 0:
        return True
    if port <= 0 or port > MAX_PORT:
        raise FieldValidationError(field_name, f"'{port}' must be in range 1-{MAX_PORT}")
    return True


def is_valid_value_in_list(
    value: str,
    field_name: str,
    allowed: Iterable[str],
    case_sensitive: bool = True,
) -> bool:
    allowed = list(allowed)
    if case_sensitive:
        found = value in allowed
    else:
        found = value.lower() in (item.lower() for item in allowed)
    if not found:
        raise FieldValidationError(field_name, f"'{value}' must be one of: {allowed}")
    return True


def is_not_empty(value: str, field_name: str) -> bool:
    _empty(value, field_name, allow_empty=False)
    return True


def is_valid_string_length(
    value: str,
    field_name: str,
    min_len: int,
    max_len: int = 0,
    allow_empty: bool = False,
) -> bool:
    """Check the length of ``value``; a ``max_len`` of 0 means no upper bound."""
    if _empty(value, field_name, allow_empty):
        return True
    length = len(value)
    if length < min_len or (max_len > 0 and length > max_len):
        bound = f"{min_len}-{max_len}" if max_len > 0 else f"at least {min_len}"
        raise FieldValidationError(
            field_name, f"'{value}' has invalid length {length}, expected {bound} characters"
        )
    return True


def is_alphanumeric(value: str, field_name: str, allow_empty: bool = False) -> bool:
    if _empty(value, field_name, allow_empty):
        return True
    if not value.isalnum():
        raise FieldValidationError(field_name, f"'{value}' must contain only letters and digits")
    return True


def is_valid_url(value: str, field_name: str, allow_empty: bool = False) -> bool:
    """Check that ``value`` is an absolute URL or an absolute path."""
    if _empty(value, field_name, allow_empty):
        return True

    invalid = FieldValidationError(field_name, f"'{value}' is not a valid URL")
    if any(char.isspace() for char in value):
        raise invalid
    try:
        parts = urlsplit(value)
    except ValueError as e:
        raise FieldValidationError(field_name, f"'{value}' is not a valid URL: {e}") from e

    if value.startswith("/"):
        return True
    if not parts.scheme or not (parts.netloc or parts.path):
        raise invalid
    return True


def is_valid_email(value: str, field_name: str, allow_empty: bool = False) -> bool:
    if _empty(value, field_name, allow_empty):
        return True
    if not _EMAIL_PATTERN.match(value):
        raise FieldValidationError(field_name, f"'{value}' is not a valid email address")
    return True


def is_positive_int(value: int, field_name: str) -> bool:
    if value <= 0:
        raise FieldValidationError(field_name, f"'{value}' must be a positive number")
    return True


def is_valid_cron_expression(expression: str, field_name: str, with_seconds: bool = False) -> bool:
    """Check a cron schedule with five fields, or six with a leading seconds field.

    Args:
        expression: Schedule such as "0 * * * *" or "*/20 * * * * *"
        field_name: Name used in the error message
        with_seconds: Whether the schedule starts with a seconds field
    """
    expected_fields = 6 if with_seconds else 5
    field_count = len(expression.split())
    if field_count != expected_fields:
        raise FieldValidationError(
            field_name,
            f"cron expression '{expression}' is invalid: expected {expected_fields} fields, got {field_count}",
        )
    if not croniter.is_valid(expression, second_at_beginning=with_seconds):
        raise FieldValidationError(field_name, f"cron expression '{expression}' is invalid")
    return True


def is_valid_cron_descriptor(expression: str, field_name: str) -> bool:
    """Check a standard five-field schedule or a descriptor such as "@hourly" or "@every 2m"."""
    text = expression.strip()
    if text.startswith(_EVERY_PREFIX):
        try:
            parse_duration(text[len(_EVERY_PREFIX):].strip())
        except ValueError as e:
            raise FieldValidationError(field_name, f"cron expression '{expression}' is invalid: {e}") from e
        return True
    if text.startswith("@"):
        if text not in _CRON_DESCRIPTORS:
            raise FieldValidationError(field_name, f"cron expression '{expression}' is invalid: unknown descriptor")
        return True
    return is_valid_cron_expression(text, field_name)
