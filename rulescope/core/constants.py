"""
rulescope Core: Constants and Type Definitions

This module provides library-wide constants, error codes, rule keys and
the default configuration tree.
"""
from enum import Enum, IntEnum
from typing import Any, Dict, List, TypeAlias

# Version information
RULESCOPE_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for rulescope operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Malformed rule tree or configuration
    NOT_FOUND = 2  # No rule matched, or file missing
    CONFLICT = 3  # More rules matched than expected
    INTERNAL_ERROR = 4  # Bug in rulescope


class Phase(Enum):
    """Ordering tag controlling when a rule's processors run."""

    PRE = "pre"
    NORMAL = "normal"
    POST = "post"

    @classmethod
    def parse(cls, value: Any) -> "Phase":
        """Accept a Phase or its string value."""
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


# Type aliases for clarity
Rule: TypeAlias = Dict[str, Any]
RuleList: TypeAlias = List[Rule]
ResourcePath: TypeAlias = str


class RuleKey:
    """Keys recognised on a raw rule dict."""

    PHASE = "phase"
    PROCESSOR = "processor"
    USE = "use"
    SEQUENCE = "sequence"
    ONE_OF = "oneOf"

    # Resource-test specification, read only by the normalizer
    TEST = "test"
    INCLUDE = "include"
    EXCLUDE = "exclude"
    RESOURCE = "resource"

    RESOURCE_KEYS = (TEST, INCLUDE, EXCLUDE, RESOURCE)


class CriterionKey:
    """Keys recognised on a dict criterion."""

    PREDICATE = "predicate"
    PROCESSOR = "processor"
    PHASE = "phase"
    RESOURCE = "resource"

    ALL = (PREDICATE, PROCESSOR, PHASE, RESOURCE)


class ConfigKey:
    """Configuration key constants (dot paths under the root key)."""

    ROOT = "rulescope"
    MATCHING = "matching"
    LOGGING = "logging"

    DEFAULT_PHASE = "rulescope.matching.default_phase"
    FAKE_FILE_NAME = "rulescope.matching.fake_file_name"
    EXTENSION_PATTERN = "rulescope.matching.extension_pattern"
    PROCESSOR_SUFFIXES = "rulescope.matching.processor_suffixes"
    LOG_LEVEL = "rulescope.logging.level"
    LOG_FILE = "rulescope.logging.file"


# Bare extensions such as ".css" are matched through a synthetic filename
DEFAULT_FAKE_FILE_NAME = "fake_file_name"
DEFAULT_EXTENSION_PATTERN = r"^\.[a-zA-Z]{2,4}$"
DEFAULT_PROCESSOR_SUFFIXES = ("-loader", "-processor")

DEFAULT_CONFIG = {
    ConfigKey.ROOT: {
        ConfigKey.MATCHING: {
            "default_phase": Phase.NORMAL.value,
            "fake_file_name": DEFAULT_FAKE_FILE_NAME,
            "extension_pattern": DEFAULT_EXTENSION_PATTERN,
            "processor_suffixes": list(DEFAULT_PROCESSOR_SUFFIXES),
        },
        ConfigKey.LOGGING: {
            "level": "INFO",
            "file": None,
        },
    }
}
