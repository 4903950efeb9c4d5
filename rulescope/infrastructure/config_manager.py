#!/usr/bin/env python3
"""Layered configuration manager for rulescope.

This module provides configuration management with:
- 4-level precedence hierarchy
- YAML configuration files
- Environment variable overrides
- Dot-path access with deep merging
- Loading rule trees from YAML files

Example:
    >>> config = ConfigManager()
    >>> config.load_file("rulescope.yaml")
    >>> config.get("rulescope.matching.default_phase")
    'normal'
"""

import copy
import os
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from rulescope.core.constants import DEFAULT_CONFIG, ConfigKey, ErrorCode, RuleList
from rulescope.core.validators import ValidationError, validate_matching_config

ENV_PREFIX = "RULESCOPE_"
# Double underscore separates nesting levels, single underscores stay in key names
ENV_SEPARATOR = "__"


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    USER_CONFIG = 2
    ENVIRONMENT = 3
    RUNTIME = 4  # Highest precedence


@dataclass
class ConfigValue:
    """Configuration value with metadata."""

    value: Any
    source: ConfigSource
    timestamp: float = field(default_factory=time.time)


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigManager:
    """Thread-safe hierarchical configuration manager.

    Manages configuration from multiple sources with precedence:
    1. Compiled defaults (lowest)
    2. User config file
    3. Environment variables (RULESCOPE_*)
    4. Runtime updates (highest)
    """

    def __init__(self, config_file: Optional[str] = None, load_environment: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Optional config file to load
            load_environment: Whether to read RULESCOPE_* variables
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(DEFAULT_CONFIG)

        if config_file:
            self.load_file(config_file)

        if load_environment:
            self._load_environment()

    def load_file(self, file_path: Union[str, Path],
                  source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded, parsed or validated
        """
        config_data = _read_yaml(file_path)

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}", ErrorCode.INVALID_INPUT)

        section = config_data.get(ConfigKey.ROOT) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"'{ConfigKey.ROOT}' must be a mapping in {file_path}")

        matching = section.get(ConfigKey.MATCHING)
        if matching is not None:
            try:
                validate_matching_config(matching)
            except ValidationError as e:
                raise ConfigError(f"Invalid matching section in {file_path}: {e}")

        with self._lock:
            self._config[source] = config_data

    def load_dict(self, config_data: Dict[str, Any],
                  source: ConfigSource = ConfigSource.RUNTIME) -> None:
        """Load configuration from dictionary.

        Args:
            config_data: Configuration dictionary
            source: Configuration source level
        """
        with self._lock:
            self._config[source] = copy.deepcopy(config_data)

    def _load_environment(self) -> None:
        """Load configuration from environment variables.

        Environment variables in format: RULESCOPE_SECTION__KEY=value
        Example: RULESCOPE_MATCHING__DEFAULT_PHASE=pre
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX):].lower().split(ENV_SEPARATOR)

            current = env_config
            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = self._parse_env_value(value)

        if env_config:
            with self._lock:
                self._config[ConfigSource.ENVIRONMENT] = {ConfigKey.ROOT: env_config}

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value.

        Returns:
            Parsed value (bool, int, float, list of str, or str)
        """
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        if "," in value:
            return [item.strip() for item in value.split(",") if item.strip()]

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "rulescope.matching.default_phase")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        with self._lock:
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                value = self._get_nested(self._config[source], key)
                if value is not None:
                    return value

            return default

    def get_value(self, key: str) -> Optional[ConfigValue]:
        """Get a value together with the source it came from."""
        with self._lock:
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                value = self._get_nested(self._config[source], key)
                if value is not None:
                    return ConfigValue(value=value, source=source)
            return None

    def _get_nested(self, config: Dict[str, Any], key: str) -> Optional[Any]:
        current: Any = config
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def set(self, key: str, value: Any, source: ConfigSource = ConfigSource.RUNTIME) -> None:
        """Set configuration value.

        Args:
            key: Dot-separated key path
            value: Value to set
            source: Configuration source level
        """
        with self._lock:
            current = self._config.setdefault(source, {})

            parts = key.split(".")
            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = value

    def get_all(self) -> Dict[str, Any]:
        """Get merged configuration from all sources.

        Returns:
            Merged configuration dictionary
        """
        with self._lock:
            merged: Dict[str, Any] = {}

            for source in sorted(self._config.keys(), key=lambda s: s.value):
                merged = self._deep_merge(merged, self._config[source])

            return merged

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def clear(self, source: Optional[ConfigSource] = None) -> None:
        """Clear configuration.

        Args:
            source: Specific source to clear, or None for all except defaults
        """
        with self._lock:
            if source:
                if source in self._config and source != ConfigSource.COMPILED_DEFAULTS:
                    del self._config[source]
            else:
                for s in [s for s in self._config if s != ConfigSource.COMPILED_DEFAULTS]:
                    del self._config[s]


def _read_yaml(file_path: Union[str, Path]) -> Any:
    path = Path(file_path).expanduser().resolve()

    if not path.exists():
        raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

    try:
        with open(path, "r") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error in {file_path}: {e}", ErrorCode.INVALID_INPUT)
    except OSError as e:
        raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.INTERNAL_ERROR)


def load_rules_file(file_path: Union[str, Path]) -> RuleList:
    """Load a rule list from a YAML file.

    The document is either a list of rules or a mapping with a ``rules`` key.

    Args:
        file_path: Path to YAML file

    Returns:
        The rule list, ready to hand to a RuleSet

    Raises:
        ConfigError: If the file is missing, unparsable, or holds no rule list
    """
    data = _read_yaml(file_path)

    if isinstance(data, dict):
        data = data.get("rules")

    if not isinstance(data, list):
        raise ConfigError(f"No rule list found in {file_path}", ErrorCode.INVALID_INPUT)

    return data


# Global config manager instance
_global_config: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[str] = None) -> ConfigManager:
    """Get or create global configuration manager.

    Args:
        config_file: Optional config file to load

    Returns:
        Global configuration manager
    """
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager(config_file)
    return _global_config


def set_global_config(config: Optional[ConfigManager]) -> None:
    """Set the global configuration manager.

    Args:
        config: Configuration manager to use globally, or None to reset
    """
    global _global_config
    _global_config = config

