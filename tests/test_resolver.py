# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for the layered overlay resolver."""

import copy

from copilot_config_tree.models import DefaultInfo, EnvBinding
from copilot_config_tree.resolver import LayeredResolver, deep_merge, set_path
from copilot_config_tree.static_provider import StaticConfigProvider


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_merge(self):
        """Test nested mappings merge key by key."""
        base = {"db": {"host": "a", "port": 1}, "name": "x"}
        override = {"db": {"host": "b"}}

        assert deep_merge(base, override) == {"db": {"host": "b", "port": 1}, "name": "x"}

    def test_lists_replaced(self):
        """Test lists are replaced, not concatenated."""
        assert deep_merge({"tags": ["a", "b"]}, {"tags": ["c"]}) == {"tags": ["c"]}

    def test_inputs_not_mutated(self):
        """Test neither input is modified."""
        base = {"db": {"host": "a"}}
        override = {"db": {"port": 2}}
        base_copy = copy.deepcopy(base)
        override_copy = copy.deepcopy(override)

        merged = deep_merge(base, override)
        merged["db"]["host"] = "changed"

        assert base == base_copy
        assert override == override_copy


class TestSetPath:
    """Tests for set_path."""

    def test_creates_intermediate_mappings(self):
        """Test dotted assignment creates missing levels."""
        target = {}
        set_path(target, "db.primary.host", "x")

        assert target == {"db": {"primary": {"host": "x"}}}

    def test_replaces_scalar_on_path(self):
        """Test a scalar in the way is replaced by a mapping."""
        target = {"db": 5}
        set_path(target, "db.host", "x")

        assert target == {"db": {"host": "x"}}


class TestLayeredResolver:
    """Tests for LayeredResolver.resolve."""

    def make_resolver(self, env=None):
        defaults = [DefaultInfo("port", 8080), DefaultInfo("db.host", "localhost"), DefaultInfo("tags", ["a"])]
        bindings = [EnvBinding("port", "PORT"), EnvBinding("db.host", "DB_HOST")]
        return LayeredResolver(defaults, bindings, StaticConfigProvider(env or {}))

    def test_defaults_only(self):
        """Test defaults expand into a nested mapping."""
        assert self.make_resolver().resolve() == {"port": 8080, "db": {"host": "localhost"}, "tags": ["a"]}

    def test_file_over_default(self):
        """Test file values override defaults."""
        merged = self.make_resolver().resolve({"db": {"host": "db.internal"}, "extra": True})

        assert merged["db"]["host"] == "db.internal"
        assert merged["port"] == 8080
        assert merged["extra"] is True

    def test_env_over_file(self):
        """Test environment values override the file."""
        resolver = self.make_resolver({"PORT": "9191"})

        merged = resolver.resolve({"port": 9090})

        assert merged["port"] == "9191"

    def test_unset_env_ignored(self):
        """Test only set variables take part."""
        merged = self.make_resolver({"OTHER": "1"}).resolve({"port": 9090})

        assert merged["port"] == 9090

    def test_defaults_not_shared(self):
        """Test results do not alias the declared defaults."""
        resolver = self.make_resolver()

        merged = resolver.resolve()
        merged["tags"].append("b")

        assert resolver.resolve()["tags"] == ["a"]
