# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Example demonstrating the configuration tree.

This example shows how to:
1. Declare a configuration dataclass with tagged fields
2. Print a YAML template and environment-variable help
3. Load configuration from defaults, a file and the environment
4. Receive change notifications and reject invalid reloads
"""

import os
import sys
import tempfile
import threading
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from copilot_config_tree import (
    ConfigInspector,
    ConfigManager,
    EnvHelpFormat,
    StaticConfigProvider,
    ValidationError,
    setting,
)
from copilot_config_tree.validation import is_valid_hostname_or_ip, is_valid_port


@dataclass
class Database:
    host: str = setting("host", default="localhost", desc="Database host")
    port: int = setting("port", default="5432", desc="Database port")
    password: str = setting("password", env="DB_PASSWORD", desc="Database password")


@dataclass
class Device:
    host: str = setting("host", desc="Device address")
    port: int = setting("port", default="502", desc="Device port")


@dataclass
class ServiceConfig:
    port: int = setting("port", default="8080", desc="HTTP port")
    timeout: timedelta = setting("timeout", default="30s", desc="Request timeout")
    tags: list[str] = setting("tags", default="api,public", desc="Service tags")
    db: Database = setting("db", desc="Database connection")
    devices: list[Device] = setting("devices", desc="Polled devices")

    def validate(self):
        is_valid_port(self.port, "port")
        is_valid_hostname_or_ip(self.db.host, "db.host")


def example_documentation():
    """Example 1: Template and environment help."""
    print("=" * 60)
    print("Example 1: Template and Environment Help")
    print("=" * 60)

    inspector = ConfigInspector(ServiceConfig)
    inspector.print_config_template(include_help=True)
    print()
    inspector.print_env_help(EnvHelpFormat.ASCII_TABLE, stream=sys.stdout)
    print()


def example_loading(config_path: str):
    """Example 2: Layered loading, change notification and validation."""
    print("=" * 60)
    print("Example 2: Layered Loading")
    print("=" * 60)

    Path(config_path).write_text(
        "port: 9090\n"
        "db:\n"
        "    host: db.internal\n"
        "devices:\n"
        "    - host: 10.0.0.5\n",
        encoding="utf-8",
    )
    env = StaticConfigProvider({"DB_PASSWORD": "example-only", "PORT": "9191"})

    with ConfigManager(ServiceConfig, config_file_path=config_path, env_reader=env, watch=False) as manager:
        config = manager.config()
        print(f"port={config.port} (environment wins over file)")
        print(f"db.host={config.db.host} (file wins over default)")
        print(f"devices[0].port={config.devices[0].port} (element default)")

        cancel = threading.Event()
        subscription = manager.subscribe(cancel)

        env.set("PORT", "7070")
        manager.reload()
        update = subscription.get(timeout=1.0)
        print(f"update: {update.old_config.port} -> {update.new_config.port}")

        env.set("PORT", "70000")
        try:
            manager.reload()
        except ValidationError as e:
            print(f"rejected: {e}")
        print(f"still serving port={manager.config().port}")
        cancel.set()
    print()


if __name__ == "__main__":
    example_documentation()
    with tempfile.TemporaryDirectory() as tmp:
        example_loading(os.path.join(tmp, "config.yml"))
