# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Module entry point for running the configuration inspector."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
