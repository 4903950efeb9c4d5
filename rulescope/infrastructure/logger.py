#!/usr/bin/env python3
"""Structured logging for rulescope.

Thin wrapper over the standard ``logging`` module that appends key=value
context to every message. Context can be pushed for the duration of a
block, which the RuleSet uses to tag all messages of one lookup.

Example:
    >>> logger = Logger(level=LogLevel.DEBUG)
    >>> logger.debug("Inserted rule", position="after", index=2)
    >>> with logger.add_context(criterion="babel-loader"):
    ...     logger.debug("Collecting matches")
"""

import logging
import logging.handlers
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from rulescope.core.constants import ConfigKey
from rulescope.infrastructure.config_manager import get_config_manager

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG  # 10
    INFO = logging.INFO  # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR  # 40
    CRITICAL = logging.CRITICAL  # 50


class Logger:
    """Structured logger with context support.

    Wraps a standard library logger and appends key-value context to each
    message. Context pushed with ``add_context`` is kept per thread.
    """

    # Thread-local storage for context
    _context_stack = threading.local()

    def __init__(
        self,
        name: str = "rulescope",
        level: Union[LogLevel, str] = LogLevel.INFO,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Args:
            name: Logger name for identification
            level: Minimum log level to output
            handlers: Optional list of logging handlers
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.set_level(level)

        if handlers is None:
            handlers = [self._create_console_handler()]

        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)

        # Library output stays out of the host application's root logger
        self.logger.propagate = False

    def _create_console_handler(self) -> logging.StreamHandler:
        """Create default console handler with formatting.

        Returns:
            Configured stream handler
        """
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        return handler

    def create_file_handler(
        self,
        filename: Union[str, Path],
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
    ) -> logging.handlers.RotatingFileHandler:
        """Create rotating file handler.

        Args:
            filename: Path to log file
            max_bytes: Maximum size before rotation
            backup_count: Number of backup files to keep

        Returns:
            Configured rotating file handler
        """
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backup_count
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        return handler

    def add_handler(self, handler: logging.Handler) -> None:
        """Add a new output handler.

        Args:
            handler: Logging handler to add
        """
        self.logger.addHandler(handler)

    def remove_handler(self, handler: logging.Handler) -> None:
        """Remove an output handler.

        Args:
            handler: Logging handler to remove
        """
        self.logger.removeHandler(handler)

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """Set the minimum log level.

        Args:
            level: New log level (LogLevel or string)
        """
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        self.logger.setLevel(level)

    def get_level(self) -> LogLevel:
        """Get current log level.

        Returns:
            Current minimum log level
        """
        return LogLevel(self.logger.level)

    def _get_context(self) -> Dict[str, Any]:
        """Merge all levels of the current thread's context stack."""
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        context: Dict[str, Any] = {}
        for ctx in self._context_stack.stack:
            context.update(ctx)
        return context

    def _format_message(self, msg: str, context: Dict[str, Any]) -> str:
        """Format message with context.

        Args:
            msg: Log message
            context: Context dictionary

        Returns:
            Message followed by " | key=value" pairs when there is context
        """
        if context:
            ctx_str = " ".join(f"{k}={v}" for k, v in context.items())
            return f"{msg} | {ctx_str}"
        return msg

    @contextmanager
    def add_context(self, **kwargs):
        """Context manager to add temporary context.

        Args:
            **kwargs: Key-value pairs to add to context
        """
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        self._context_stack.stack.append(kwargs)
        try:
            yield
        finally:
            self._context_stack.stack.pop()

    def _log(self, level: LogLevel, msg: str, context: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return
        combined_context = self._get_context()
        combined_context.update(context)
        formatted_msg = self._format_message(msg, combined_context)
        self.logger.log(level, formatted_msg, extra={"context": combined_context})

    def debug(self, msg: str, **context) -> None:
        """Log debug message.

        Args:
            msg: Log message
            **context: Additional context key-value pairs
        """
        self._log(LogLevel.DEBUG, msg, context)

    def info(self, msg: str, **context) -> None:
        """Log info message.

        Args:
            msg: Log message
            **context: Additional context key-value pairs
        """
        self._log(LogLevel.INFO, msg, context)

    def warning(self, msg: str, **context) -> None:
        """Log warning message.

        Args:
            msg: Log message
            **context: Additional context key-value pairs
        """
        self._log(LogLevel.WARNING, msg, context)

    def error(self, msg: str, **context) -> None:
        """Log error message.

        Args:
            msg: Log message
            **context: Additional context key-value pairs
        """
        self._log(LogLevel.ERROR, msg, context)

    def is_enabled_for(self, level: Union[LogLevel, str]) -> bool:
        """Check if logger is enabled for given level."""
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        return self.logger.isEnabledFor(level)


# Global logger instance
_global_logger: Optional[Logger] = None


def get_logger(name: str = "rulescope") -> Logger:
    """Get or create a logger instance.

    The first logger is configured from the global ConfigManager's
    ``logging`` section.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    global _global_logger
    if _global_logger is None or _global_logger.name != name:
        configure_logging(get_config_manager(), name=name)
    return _global_logger


def set_global_logger(logger: Optional[Logger]) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger to use globally, or None to reset
    """
    global _global_logger
    _global_logger = logger


def configure_logging(config: Any, name: str = "rulescope") -> Logger:
    """Build the global logger from a ConfigManager's ``logging`` section.

    Args:
        config: ConfigManager (anything with a dot-path ``get``)
        name: Logger name

    Returns:
        The configured global logger
    """
    logger = Logger(name=name, level=config.get(ConfigKey.LOG_LEVEL, LogLevel.INFO.name))
    log_file = config.get(ConfigKey.LOG_FILE)
    if log_file:
        logger.add_handler(logger.create_file_handler(log_file))
    set_global_logger(logger)
    return logger
