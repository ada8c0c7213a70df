# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Configuration manager: resolution, validation, hot reload and change fan-out."""

import copy
import logging
import os
import threading
from collections.abc import Callable
from typing import Any, Generic, Optional, TypeVar

from .base import EnvironmentReader
from .builder import build_tree
from .decoder import decode
from .env import default_values, env_bindings
from .env_provider import EnvConfigProvider
from .exceptions import ConfigNotLoadedError, ConfigResolutionError, ValidationError
from .file_source import YamlFileSource
from .models import DefaultInfo, EnvBinding
from .node import ConfigNode
from .notifier import ConfigUpdateMsg, ConfigUpdateNotifier, Subscription
from .resolver import LayeredResolver
from .schema import as_schema

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONFIG_PATH = "./config.yml"

ErrorHandler = Callable[[Exception], None]


def _log_error(error: Exception) -> None:
    logger.error(f"Configuration reload failed: {error}")


def _validation_hook(target: Optional[type]) -> Optional[Callable[[Any], Any]]:
    """Return the target type's validate() method, if it declares one."""
    if target is None:
        return None
    validate = getattr(target, "validate", None)
    return validate if callable(validate) else None


class ConfigManager(Generic[T]):
    """Owns the current configuration value of a service.

    The schema tree is built once. The first resolution happens during
    construction and its errors propagate. Later reloads, whether explicit
    or triggered by the file watcher, keep the previous value when they fail.

    Args:
        schema: Dataclass type, ConfigSchema, or anything SchemaBuilder accepts
        config_file_path: YAML or JSON file layered between defaults and environment
        config_file_required: Whether a missing file fails resolution
        error_handler: Receives errors from watcher-triggered reloads
        env_reader: Source of environment values (process environment by default)
        watch: Start watching the configuration file for changes

    Example:
        >>> manager = ConfigManager(ServerConfig, config_file_path="server.yml")
        >>> manager.config().port
        8080
    """

    def __init__(
        self,
        schema: Any,
        *,
        config_file_path: str | os.PathLike = DEFAULT_CONFIG_PATH,
        config_file_required: bool = True,
        error_handler: Optional[ErrorHandler] = None,
        env_reader: Optional[EnvironmentReader] = None,
        watch: bool = True,
    ):
        config_schema = as_schema(schema)
        self._schema_version = config_schema.schema_version
        self._tree = build_tree(config_schema)
        self._validate = _validation_hook(self._tree.target)

        self._source = YamlFileSource(config_file_path, required=config_file_required)
        self._resolver = LayeredResolver(
            default_values(self._tree),
            env_bindings(self._tree),
            env_reader if env_reader is not None else EnvConfigProvider(),
        )
        self._notifier = ConfigUpdateNotifier()
        self._error_handler: ErrorHandler = error_handler or _log_error

        self._lock = threading.Lock()
        # Serializes reloads so swaps and notifications keep their order
        self._reload_lock = threading.Lock()
        self._config: Optional[T] = None

        self.reload()
        if watch:
            self._source.watch(self._on_file_change)

    @property
    def tree(self) -> ConfigNode:
        return self._tree

    @property
    def config_file_path(self) -> str:
        return str(self._source.path)

    def default_values(self) -> list[DefaultInfo]:
        return default_values(self._tree)

    def env_bindings(self) -> list[EnvBinding]:
        return env_bindings(self._tree)

    def config(self) -> T:
        """Return a copy of the current configuration.

        Raises:
            ConfigNotLoadedError: If no resolution has succeeded yet
        """
        with self._lock:
            if self._config is None:
                raise ConfigNotLoadedError("configuration has not been loaded")
            return copy.deepcopy(self._config)

    def reload(self) -> T:
        """Re-resolve, validate and publish the configuration.

        Returns:
            A copy of the new configuration

        Raises:
            ResolutionError: If a source cannot be read or a value cannot be decoded
            ValidationError: If the validation hook rejects the merged value
        """
        with self._reload_lock:
            merged = self._resolver.resolve(self._source.read())
            new_config = decode(self._tree, merged, self._schema_version)
            self._run_validation(new_config)

            with self._lock:
                old_config = self._config
                self._config = new_config

            if old_config is not None:
                self._notifier.publish(
                    ConfigUpdateMsg(copy.deepcopy(old_config), copy.deepcopy(new_config))
                )
            logger.info(f"Loaded configuration from {self._source.path}")
            return copy.deepcopy(new_config)

    def subscribe(self, cancel: threading.Event) -> Subscription:
        """Receive a ConfigUpdateMsg after each successful reload until ``cancel`` is set."""
        return self._notifier.subscribe(cancel)

    def set_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        """Replace the handler for watcher-triggered reload errors (None restores logging)."""
        with self._lock:
            self._error_handler = handler or _log_error

    def close(self) -> None:
        """Stop watching the configuration file."""
        self._source.stop()

    def __enter__(self) -> "ConfigManager[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _run_validation(self, config: T) -> None:
        if self._validate is None:
            return
        try:
            result = self._validate(config)
        except Exception as e:
            raise ValidationError(f"configuration validation failed: {e}") from e
        if result is not None:
            raise ValidationError(f"configuration validation failed: {result}")

    def _on_file_change(self) -> None:
        try:
            self.reload()
        except ConfigResolutionError as e:
            with self._lock:
                handler = self._error_handler
            handler(e)
