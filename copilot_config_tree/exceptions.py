# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Exceptions for schema tree construction, rendering and resolution."""


class ConfigTreeError(Exception):
    """Base exception for all configuration tree errors."""
    pass


class ConfigSchemaError(ConfigTreeError):
    """Raised when a schema cannot be loaded or turned into a tree."""
    pass


class ShapeError(ConfigSchemaError):
    """Raised when a container type is required but something else was declared."""
    pass


class TagError(ConfigSchemaError):
    """Raised when a field lacks its mandatory binding key."""
    pass


class DefaultValueError(ConfigSchemaError):
    """Raised when a declared default does not parse against its declared kind."""

    def __init__(self, field_name: str, text: str, kind: str, reason: str | None = None):
        self.field_name = field_name
        self.text = text
        self.kind = kind
        self.reason = reason
        message = f"field {field_name}: cannot parse default '{text}' as {kind}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StructuralError(ConfigSchemaError):
    """Raised when a node would become both a container and a leaf."""
    pass


class ConfigResolutionError(ConfigTreeError):
    """Base exception for failures while producing a configuration value."""
    pass


class ResolutionError(ConfigResolutionError):
    """Raised when a source cannot be read, parsed or decoded."""
    pass


class ValidationError(ConfigResolutionError):
    """Raised when the validation hook rejects a merged configuration."""
    pass


class TemplateRenderError(ConfigTreeError):
    """Raised when a value cannot be formatted by a renderer."""
    pass


class ConfigNotLoadedError(ConfigTreeError, RuntimeError):
    """Raised when the current configuration is read before the first load."""
    pass


class FieldValidationError(ConfigTreeError, ValueError):
    """Raised by the field validator helpers."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        self.message = message
        super().__init__(f"{field_name} {message}")
