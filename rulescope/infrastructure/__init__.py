"""rulescope Infrastructure Layer.

Services used by the rules layer:
- ConfigManager: Layered YAML configuration with environment overrides
- Logger: Structured logging system
"""

from .config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSource,
    ConfigValue,
    get_config_manager,
    load_rules_file,
    set_global_config,
)
from .logger import Logger, LogLevel, configure_logging, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "set_global_logger",
    # Config exports
    "ConfigError",
    "ConfigManager",
    "ConfigSource",
    "ConfigValue",
    "get_config_manager",
    "load_rules_file",
    "set_global_config",
]
