# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Base environment reader interface."""

from abc import ABC, abstractmethod


class EnvironmentReader(ABC):
    """Abstract source of raw environment-variable values."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        """Get the raw value of a variable, or None when it is unset."""
        raise NotImplementedError

    def is_set(self, name: str) -> bool:
        return self.get(name) is not None
