# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for field validation helpers."""

import pytest
from copilot_config_tree.exceptions import FieldValidationError
from copilot_config_tree.validation import (
    is_alphanumeric,
    is_not_empty,
    is_positive_int,
    is_valid_cron_descriptor,
    is_valid_cron_expression,
    is_valid_email,
    is_valid_hostname_or_ip,
    is_valid_port,
    is_valid_string_length,
    is_valid_url,
    is_valid_value_in_list,
)


class TestHostnameOrIp:
    """Tests for is_valid_hostname_or_ip."""

    @pytest.mark.parametrize("host", ["localhost", "db.internal", "10.0.0.1", "::1", "my-host.example.com"])
    def test_valid(self, host):
        """Test addresses and hostnames are accepted."""
        assert is_valid_hostname_or_ip(host, "host")

    @pytest.mark.parametrize("host", ["256.1.1.1", "-bad.example", "a..b", "under_score", "x" * 64])
    def test_invalid(self, host):
        """Test malformed hosts are rejected."""
        with pytest.raises(FieldValidationError) as exc_info:
            is_valid_hostname_or_ip(host, "host")

        assert exc_info.value.field_name == "host"

    def test_empty(self):
        """Test empty values depend on allow_empty."""
        assert is_valid_hostname_or_ip("", "host", allow_empty=True)
        with pytest.raises(FieldValidationError):
            is_valid_hostname_or_ip("", "host")


class TestPort:
    """Tests for is_valid_port."""

    def test_range(self):
        """Test the accepted port range."""
        assert is_valid_port(1, "port")
        assert is_valid_port(65535, "port")
        with pytest.raises(FieldValidationError):
            is_valid_port(65536, "port")
        with pytest.raises(FieldValidationError):
            is_valid_port(0, "port")

    def test_allow_zero(self):
        """Test zero can be allowed explicitly."""
        assert is_valid_port(0, "port", allow_zero=True)


class TestStrings:
    """Tests for string helpers."""

    def test_value_in_list(self):
        """Test membership with and without case sensitivity."""
        allowed = ["debug", "info"]

        assert is_valid_value_in_list("info", "level", allowed)
        assert is_valid_value_in_list("INFO", "level", allowed, case_sensitive=False)
        with pytest.raises(FieldValidationError):
            is_valid_value_in_list("INFO", "level", allowed)
        assert allowed == ["debug", "info"]

    def test_not_empty(self):
        """Test empty strings are rejected."""
        assert is_not_empty("x", "name")
        with pytest.raises(FieldValidationError) as exc_info:
            is_not_empty("", "name")

        assert str(exc_info.value) == "name must not be empty"

    def test_string_length(self):
        """Test length bounds, with 0 meaning unbounded."""
        assert is_valid_string_length("abc", "name", 1, 3)
        assert is_valid_string_length("a" * 100, "name", 1)
        assert is_valid_string_length("", "name", 1, 3, allow_empty=True)
        with pytest.raises(FieldValidationError):
            is_valid_string_length("abcd", "name", 1, 3)
        with pytest.raises(FieldValidationError):
            is_valid_string_length("a", "name", 2, 3)

    def test_alphanumeric(self):
        """Test letters and digits only."""
        assert is_alphanumeric("abc123", "id")
        with pytest.raises(FieldValidationError):
            is_alphanumeric("abc-123", "id")


class TestUrlAndEmail:
    """Tests for URL and email helpers."""

    @pytest.mark.parametrize("url", ["http://example.com", "https://example.com/path?q=1", "/api/v1"])
    def test_valid_url(self, url):
        """Test absolute URLs and paths."""
        assert is_valid_url(url, "endpoint")

    @pytest.mark.parametrize("url", ["example.com", "http://exa mple.com", "relative/path"])
    def test_invalid_url(self, url):
        """Test relative or malformed URLs are rejected."""
        with pytest.raises(FieldValidationError):
            is_valid_url(url, "endpoint")

    def test_email(self):
        """Test email syntax."""
        assert is_valid_email("ops@example.com", "email")
        assert is_valid_email("", "email", allow_empty=True)
        with pytest.raises(FieldValidationError):
            is_valid_email("not-an-email", "email")


class TestPositiveInt:
    """Tests for is_positive_int."""

    def test_positive(self):
        """Test zero and negatives are rejected."""
        assert is_positive_int(1, "workers")
        with pytest.raises(FieldValidationError):
            is_positive_int(0, "workers")


class TestCron:
    """Tests for cron schedule helpers."""

    @pytest.mark.parametrize(
        "expression,with_seconds",
        [
            ("*/20 * * * * *", True),
            ("0 * * * *", False),
            ("30 2 * * 1-5", False),
        ],
    )
    def test_valid_expression(self, expression, with_seconds):
        """Test five-field schedules and six-field schedules with seconds."""
        assert is_valid_cron_expression(expression, "schedule", with_seconds)

    @pytest.mark.parametrize(
        "expression,with_seconds",
        [
            ("*/30 * * * * * *", True),
            ("0 * * * * *", False),
            ("0 * * * *", True),
            ("61 * * * *", False),
            ("", False),
        ],
    )
    def test_invalid_expression(self, expression, with_seconds):
        """Test wrong field counts and out-of-range values are rejected."""
        with pytest.raises(FieldValidationError) as exc_info:
            is_valid_cron_expression(expression, "DataBackup", with_seconds)

        assert str(exc_info.value).startswith(f"DataBackup cron expression '{expression}' is invalid")

    @pytest.mark.parametrize("expression", ["@hourly", "@daily", "@every 2m", "@every 1h30m", "15 4 * * *"])
    def test_valid_descriptor(self, expression):
        """Test descriptors, intervals and standard schedules."""
        assert is_valid_cron_descriptor(expression, "schedule")

    @pytest.mark.parametrize("expression", ["@fortnightly", "@every soon", "@every ", "*/5 * * * * *"])
    def test_invalid_descriptor(self, expression):
        """Test unknown descriptors, bad intervals and seconds fields are rejected."""
        with pytest.raises(FieldValidationError):
            is_valid_cron_descriptor(expression, "schedule")
