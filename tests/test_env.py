# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for environment naming and leaf projections."""

from dataclasses import dataclass

from copilot_config_tree.builder import build_tree
from copilot_config_tree.env import collect_env_info, default_values, env_bindings, resolve_env_name
from copilot_config_tree.models import DefaultInfo, EnvBinding, FieldKind
from copilot_config_tree.schema import setting


@dataclass
class Database:
    host: str = setting("host", default="localhost", desc="Database host")
    password: str = setting("password", env="db_pass")


@dataclass
class Device:
    host: str = setting("host", default="10.0.0.1")


@dataclass
class AppConfig:
    port: int = setting("port", default="8080", desc="HTTP port")
    db: Database = setting("db")
    internal: str = setting("internal", env="-", default="x")
    devices: list[Device] = setting("devices")


class TestResolveEnvName:
    """Tests for resolve_env_name."""

    def test_bound_and_suppressed(self):
        """Test bound leaves give a name and suppressed ones give None."""
        root = build_tree(AppConfig)

        assert resolve_env_name(root.children[0]) == "PORT"
        assert resolve_env_name(root.children[2]) is None


class TestCollectEnvInfo:
    """Tests for collect_env_info."""

    def test_projects_addressable_leaves(self):
        """Test leaves and struct arrays are projected in declaration order."""
        infos = collect_env_info(build_tree(AppConfig))

        assert [info.bind_key for info in infos] == ["port", "db.host", "db.password", "internal", "devices"]

    def test_struct_array_projected_as_one_record(self):
        """Test a struct array is bound as a whole instead of per element leaf."""
        devices = collect_env_info(build_tree(AppConfig))[-1]

        assert devices.env_var == "DEVICES"
        assert devices.kind == FieldKind.STRUCT
        assert devices.is_array
        assert not devices.default_present

    def test_projection_fields(self):
        """Test the projected values of a leaf."""
        port = collect_env_info(build_tree(AppConfig))[0]

        assert port.env_var == "PORT"
        assert port.default_present
        assert port.default_value == 8080
        assert port.kind == FieldKind.INT
        assert not port.is_array
        assert port.help_text == "HTTP port"

    def test_suppressed_leaf_has_no_env_var(self):
        """Test suppression is reflected in the projection."""
        infos = {info.bind_key: info for info in collect_env_info(build_tree(AppConfig))}

        assert infos["internal"].env_var is None
        assert infos["db.password"].env_var == "DB_PASS"


class TestResolverProjections:
    """Tests for the pairs handed to the resolver."""

    def test_default_values(self):
        """Test only leaves with a declared default are listed."""
        defaults = default_values(build_tree(AppConfig))

        assert defaults == [
            DefaultInfo("port", 8080),
            DefaultInfo("db.host", "localhost"),
            DefaultInfo("internal", "x"),
        ]

    def test_env_bindings(self):
        """Test suppressed leaves have no binding."""
        bindings = env_bindings(build_tree(AppConfig))

        assert bindings == [
            EnvBinding("port", "PORT"),
            EnvBinding("db.host", "DB_HOST"),
            EnvBinding("db.password", "DB_PASS"),
            EnvBinding("devices", "DEVICES"),
        ]
