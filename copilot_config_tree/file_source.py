# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""File-backed configuration source with change watching."""

import json
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import yaml
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .exceptions import ResolutionError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)


class _FileChangeHandler(FileSystemEventHandler):
    """Forwards modify/create/move events for a single file to a callback."""

    def __init__(self, path: Path, callback: Callable[[], None]):
        super().__init__()
        self._path = path
        self._callback = callback

    def _matches(self, raw_path: Any) -> bool:
        if not raw_path:
            return False
        return Path(os.fsdecode(raw_path)).resolve() == self._path

    def _handle(self, event: FileSystemEvent, *paths: Any) -> None:
        if event.is_directory or not any(self._matches(p) for p in paths):
            return
        logger.debug(f"Detected {event.event_type} event for {self._path}")
        try:
            self._callback()
        except Exception as e:
            # The observer thread must survive a failing callback
            logger.exception(f"Configuration change callback failed: {e}")

    def on_modified(self, event: FileSystemEvent) -> None:
        self._handle(event, event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        self._handle(event, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._handle(event, event.src_path, getattr(event, "dest_path", None))


class YamlFileSource:
    """Reads a YAML or JSON configuration file and watches it for changes.

    Args:
        path: Path to the configuration file
        required: Whether a missing file is an error or an empty document
    """

    def __init__(self, path: str | os.PathLike, required: bool = True):
        self.path = Path(path)
        self.required = required
        self._observer: Optional[Observer] = None
        self._lock = threading.Lock()

    def read(self) -> dict[str, Any]:
        """Parse the file into a mapping.

        Returns:
            File content; an empty file or an optional missing file gives {}

        Raises:
            ResolutionError: If the file is missing (when required), unreadable,
                malformed, has an unknown suffix or does not hold a mapping
        """
        suffix = self.path.suffix.lower()
        if suffix not in YAML_SUFFIXES + JSON_SUFFIXES:
            raise ResolutionError(f"Unsupported configuration file type: {self.path}")

        if not self.path.exists():
            if self.required:
                raise ResolutionError(f"Configuration file not found: {self.path}")
            logger.debug(f"Optional configuration file {self.path} not found")
            return {}

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ResolutionError(f"Failed to read configuration file {self.path}: {e}") from e

        if not text.strip():
            return {}

        try:
            if suffix in JSON_SUFFIXES:
                content = json.loads(text)
            else:
                content = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ResolutionError(f"Failed to parse configuration file {self.path}: {e}") from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ResolutionError(
                f"Configuration file {self.path} must contain a mapping, "
                f"got {type(content).__name__}"
            )
        return content

    @property
    def watching(self) -> bool:
        with self._lock:
            return self._observer is not None

    def watch(self, callback: Callable[[], None]) -> bool:
        """Call ``callback`` whenever the file is modified, created or moved into place.

        Returns:
            True if a watcher was started, False if the directory does not exist
            or a watcher is already running
        """
        directory = self.path.resolve().parent
        with self._lock:
            if self._observer is not None:
                return False
            if not directory.is_dir():
                logger.warning(f"Not watching {self.path}: directory {directory} does not exist")
                return False

            handler = _FileChangeHandler(self.path.resolve(), callback)
            observer = Observer()
            observer.schedule(handler, str(directory), recursive=False)
            observer.daemon = True
            observer.start()
            self._observer = observer

        logger.debug(f"Watching configuration file {self.path}")
        return True

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the watcher, if running, and wait for its thread."""
        with self._lock:
            observer = self._observer
            self._observer = None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=timeout)
        logger.debug(f"Stopped watching {self.path}")
