# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Copilot-for-Consensus Configuration Tree.

Builds a schema tree from a declarative configuration type and uses it to
render YAML templates and environment-variable help, and to resolve a live
configuration from defaults, a YAML file and the environment.
"""

__version__ = "0.1.0"

from .base import EnvironmentReader
from .builder import SchemaBuilder, build_from_schema_file, build_tree
from .env import collect_env_info, default_values, env_bindings, resolve_env_name
from .env_help import EnvHelpFormat, render_env_help
from .env_provider import EnvConfigProvider
from .exceptions import (
    ConfigNotLoadedError,
    ConfigResolutionError,
    ConfigSchemaError,
    ConfigTreeError,
    DefaultValueError,
    FieldValidationError,
    ResolutionError,
    ShapeError,
    StructuralError,
    TagError,
    TemplateRenderError,
    ValidationError,
)
from .file_source import YamlFileSource
from .inspector import ConfigInspector
from .manager import DEFAULT_CONFIG_PATH, ConfigManager
from .models import DefaultInfo, EnvBinding, EnvInfo, FieldKind, FieldSpec, LeafDescriptor
from .node import ConfigNode
from .notifier import ConfigUpdateMsg, ConfigUpdateNotifier, Subscription
from .options import DEFAULT_RENDER_OPTIONS, RenderOptions
from .resolver import LayeredResolver
from .schema import ConfigSchema, setting
from .static_provider import StaticConfigProvider
from .template import render_template
from .typed_config import TypedConfig

__all__ = [
    # Version
    "__version__",
    # Schema declaration
    "ConfigSchema",
    "FieldKind",
    "FieldSpec",
    "setting",
    # Schema tree
    "ConfigNode",
    "LeafDescriptor",
    "SchemaBuilder",
    "build_tree",
    "build_from_schema_file",
    # Leaf projections
    "EnvInfo",
    "DefaultInfo",
    "EnvBinding",
    "collect_env_info",
    "default_values",
    "env_bindings",
    "resolve_env_name",
    # Rendering
    "RenderOptions",
    "DEFAULT_RENDER_OPTIONS",
    "render_template",
    "EnvHelpFormat",
    "render_env_help",
    "ConfigInspector",
    # Resolution
    "EnvironmentReader",
    "EnvConfigProvider",
    "StaticConfigProvider",
    "YamlFileSource",
    "LayeredResolver",
    "TypedConfig",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    # Change notification
    "ConfigUpdateMsg",
    "ConfigUpdateNotifier",
    "Subscription",
    # Exceptions
    "ConfigTreeError",
    "ConfigSchemaError",
    "ShapeError",
    "TagError",
    "DefaultValueError",
    "StructuralError",
    "ConfigResolutionError",
    "ResolutionError",
    "ValidationError",
    "TemplateRenderError",
    "ConfigNotLoadedError",
    "FieldValidationError",
]
