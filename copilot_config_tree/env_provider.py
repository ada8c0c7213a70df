# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Environment-backed reader."""

import os
from collections.abc import Mapping
from typing import Optional

from .base import EnvironmentReader


class EnvConfigProvider(EnvironmentReader):
    """Reads variables from the process environment or an injected mapping."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ if environ is not None else os.environ

    def get(self, name: str) -> str | None:
        return self._environ.get(name)
