# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for decoding merged values and the TypedConfig wrapper."""

import copy
from dataclasses import dataclass
from datetime import timedelta

import pytest
from copilot_config_tree.builder import build_tree
from copilot_config_tree.decoder import decode
from copilot_config_tree.exceptions import ResolutionError
from copilot_config_tree.schema import ConfigSchema, setting
from copilot_config_tree.typed_config import TypedConfig


@dataclass
class Device:
    host: str = setting("host")
    port: int = setting("port", default="502")


@dataclass
class Database:
    host: str = setting("host", default="localhost")
    port: int = setting("port")


@dataclass
class AppConfig:
    port: int = setting("port", default="8080")
    debug: bool = setting("debug")
    timeout: timedelta = setting("timeout", default="5s")
    tags: list[str] = setting("tags")
    db: Database = setting("db")
    devices: list[Device] = setting("devices")


class TestDecodeDataclass:
    """Tests for decoding into dataclass targets."""

    def test_defaults_and_zero_values(self):
        """Test missing values fall back to defaults, then zero values."""
        config = decode(build_tree(AppConfig), {})

        assert config == AppConfig(
            port=8080,
            debug=False,
            timeout=timedelta(seconds=5),
            tags=[],
            db=Database(host="localhost", port=0),
            devices=[],
        )

    def test_runtime_values_are_coerced(self):
        """Test text from the environment is converted to declared kinds."""
        merged = {"port": "9090", "debug": "yes", "timeout": "1m", "tags": "a,b", "db": {"port": "5432"}}

        config = decode(build_tree(AppConfig), merged)

        assert config.port == 9090
        assert config.debug is True
        assert config.timeout == timedelta(minutes=1)
        assert config.tags == ["a", "b"]
        assert config.db == Database(host="localhost", port=5432)

    def test_struct_array_elements_get_defaults(self):
        """Test each list element is decoded with the element defaults."""
        merged = {"devices": [{"host": "10.0.0.1"}, {"host": "10.0.0.2", "port": 1502}]}

        config = decode(build_tree(AppConfig), merged)

        assert config.devices == [Device("10.0.0.1", 502), Device("10.0.0.2", 1502)]

    def test_bad_value_names_path(self):
        """Test coercion failures report the dotted path."""
        with pytest.raises(ResolutionError) as exc_info:
            decode(build_tree(AppConfig), {"db": {"port": "not-a-port"}})

        assert "db.port" in str(exc_info.value)

    def test_struct_array_must_be_list(self):
        """Test a struct array given a scalar is rejected."""
        with pytest.raises(ResolutionError):
            decode(build_tree(AppConfig), {"devices": "10.0.0.1"})

    def test_struct_must_be_mapping(self):
        """Test a struct given a scalar is rejected."""
        with pytest.raises(ResolutionError) as exc_info:
            decode(build_tree(AppConfig), {"db": "localhost"})

        assert "db" in str(exc_info.value)

    def test_element_error_names_index(self):
        """Test element failures report the list index."""
        with pytest.raises(ResolutionError) as exc_info:
            decode(build_tree(AppConfig), {"devices": [{"host": "a"}, {"port": "x"}]})

        assert "devices[1].port" in str(exc_info.value)


class TestDecodeTypedConfig:
    """Tests for decoding dictionary-declared schemas."""

    SCHEMA = {
        "schema_version": "2.0.0",
        "fields": {
            "port": {"type": "int", "key": "port", "default": 8080},
            "db": {"type": "object", "key": "db", "properties": {
                "host": {"type": "string", "key": "host", "default": "localhost"},
            }},
            "devices": {"type": "array", "key": "devices", "items": {
                "type": "object", "properties": {"host": {"type": "string", "key": "host"}},
            }},
        },
    }

    def test_typed_config(self):
        """Test nested TypedConfig values with attribute access."""
        schema = ConfigSchema.from_dict(self.SCHEMA)
        config = decode(build_tree(schema), {"devices": [{"host": "a"}]}, schema.schema_version)

        assert isinstance(config, TypedConfig)
        assert config.port == 8080
        assert config.db.host == "localhost"
        assert config.devices[0].host == "a"
        assert config.get_schema_version() == "2.0.0"
        assert config.to_dict() == {"port": 8080, "db": {"host": "localhost"}, "devices": [{"host": "a"}]}


class TestTypedConfig:
    """Tests for the TypedConfig wrapper."""

    def test_attribute_access(self):
        """Test values are read as attributes."""
        config = TypedConfig({"port": 8080})

        assert config.port == 8080

    def test_unknown_key(self):
        """Test missing keys raise AttributeError listing the known keys."""
        config = TypedConfig({"port": 8080})

        with pytest.raises(AttributeError) as exc_info:
            _ = config.host

        assert "port" in str(exc_info.value)

    def test_read_only(self):
        """Test values cannot be assigned."""
        config = TypedConfig({"port": 8080})

        with pytest.raises(AttributeError):
            config.port = 1

    def test_dict_access_blocked(self):
        """Test dictionary-style access is rejected."""
        with pytest.raises(TypeError):
            _ = TypedConfig({"port": 8080})["port"]

    def test_equality_and_deepcopy(self):
        """Test copies are equal but independent."""
        config = TypedConfig({"tags": ["a"], "db": TypedConfig({"host": "x"})}, schema_version="1")

        clone = copy.deepcopy(config)
        clone.tags.append("b")

        assert clone.db == config.db
        assert clone.get_schema_version() == "1"
        assert config.tags == ["a"]

    def test_dir_lists_keys(self):
        """Test keys are offered for autocomplete."""
        assert dir(TypedConfig({"b": 1, "a": 2})) == ["a", "b"]
