"""Tests for rulescope constants."""
import re

import pytest

from rulescope.core.constants import (
    DEFAULT_CONFIG,
    DEFAULT_EXTENSION_PATTERN,
    RULESCOPE_VERSION,
    ConfigKey,
    CriterionKey,
    ErrorCode,
    Phase,
    RuleKey,
)


class TestVersion:
    """Tests for version information."""

    def test_version_format(self):
        """Test version is semantic."""
        assert re.match(r"^\d+\.\d+\.\d+$", RULESCOPE_VERSION)


class TestErrorCode:
    """Tests for ErrorCode."""

    def test_values(self):
        """Test error code values."""
        assert ErrorCode.SUCCESS == 0
        assert ErrorCode.INVALID_INPUT == 1
        assert ErrorCode.NOT_FOUND == 2
        assert ErrorCode.CONFLICT == 3
        assert ErrorCode.INTERNAL_ERROR == 4


class TestPhase:
    """Tests for Phase."""

    def test_values(self):
        """Test phase values."""
        assert [p.value for p in Phase] == ["pre", "normal", "post"]

    @pytest.mark.parametrize("value,expected", [
        ("pre", Phase.PRE),
        ("NORMAL", Phase.NORMAL),
        (Phase.POST, Phase.POST),
    ])
    def test_parse(self, value, expected):
        """Test parsing phases from strings and members."""
        assert Phase.parse(value) is expected

    def test_parse_invalid(self):
        """Test unknown phases raise ValueError."""
        with pytest.raises(ValueError):
            Phase.parse("loader")


class TestKeys:
    """Tests for key constants."""

    def test_rule_keys(self):
        """Test child list keys."""
        assert RuleKey.SEQUENCE == "sequence"
        assert RuleKey.ONE_OF == "oneOf"
        assert set(RuleKey.RESOURCE_KEYS) == {"test", "include", "exclude", "resource"}

    def test_criterion_keys(self):
        """Test criterion descriptor keys."""
        assert CriterionKey.ALL == ("predicate", "processor", "phase", "resource")

    def test_config_keys_under_root(self):
        """Test config dot paths start at the root key."""
        for key in (ConfigKey.DEFAULT_PHASE, ConfigKey.FAKE_FILE_NAME,
                    ConfigKey.EXTENSION_PATTERN, ConfigKey.PROCESSOR_SUFFIXES,
                    ConfigKey.LOG_LEVEL, ConfigKey.LOG_FILE):
            assert key.startswith(ConfigKey.ROOT + ".")


class TestDefaultConfig:
    """Tests for DEFAULT_CONFIG."""

    def test_matching_defaults(self):
        """Test matching defaults."""
        matching = DEFAULT_CONFIG["rulescope"]["matching"]
        assert matching["default_phase"] == "normal"
        assert matching["fake_file_name"] == "fake_file_name"
        assert matching["extension_pattern"] == DEFAULT_EXTENSION_PATTERN
        assert matching["processor_suffixes"] == ["-loader", "-processor"]

    def test_logging_defaults(self):
        """Test logging defaults."""
        assert DEFAULT_CONFIG["rulescope"]["logging"] == {"level": "INFO", "file": None}
