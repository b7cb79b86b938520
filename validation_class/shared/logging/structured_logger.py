"""
Structured logger implementation.

This module provides a structured logging implementation that
formats log messages as single-line JSON documents.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from .log_formatter import LogFormatter
from .logger_interface import LoggerInterface, LogLevel

LOG_LEVEL_ENV = "VALIDATION_CLASS_LOG_LEVEL"

_loggers: Dict[str, "StructuredLogger"] = {}


class StructuredLogger(LoggerInterface):
    """
    Structured logger implementation.

    Entries are emitted through the standard logging module, one JSON
    document per record. Only one stream handler is ever attached to a
    given logger name.
    """

    def __init__(
        self,
        name: str,
        level: LogLevel = LogLevel.WARNING,
        output: TextIO = sys.stderr
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Initial log level
            output: Output stream for logs
        """
        self.name = name
        self._level = level
        self._output = output
        self._context: Dict[str, Any] = {}

        self._logger = logging.getLogger(name)
        self._logger.setLevel(level.numeric)
        self._logger.propagate = False

        self._handler = self._find_handler()
        if self._handler is None:
            self._handler = logging.StreamHandler(output)
            self._handler.setFormatter(logging.Formatter('%(message)s'))
            self._handler._structured = True  # type: ignore[attr-defined]
            self._logger.addHandler(self._handler)
        elif self._handler.stream is not output:
            self._handler.setStream(output)

    def _find_handler(self) -> Optional[logging.StreamHandler]:
        for handler in self._logger.handlers:
            if getattr(handler, "_structured", False):
                return handler  # type: ignore[return-value]
        return None

    def _log(
        self,
        level: LogLevel,
        message: str,
        exc_info: Optional[Exception] = None,
        **kwargs: Any
    ) -> None:
        """
        Internal logging method.

        Args:
            level: Log level
            message: Message to log
            exc_info: Optional exception
            **kwargs: Additional context
        """
        if level.numeric < self._level.numeric:
            return

        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level.value,
            "logger": self.name,
            "message": message,
            "context": LogFormatter.format_context({**self._context, **kwargs})
        }

        if exc_info:
            log_entry["exception"] = LogFormatter.format_error(exc_info)

        self._logger.log(level.numeric, json.dumps(log_entry))

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self._log(LogLevel.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        """Log a critical message."""
        self._log(LogLevel.CRITICAL, message, **kwargs)

    def exception(self, message: str, exc_info: Optional[Exception] = None, **kwargs: Any) -> None:
        """Log an exception."""
        self._log(LogLevel.ERROR, message, exc_info=exc_info, **kwargs)

    def set_level(self, level: LogLevel) -> None:
        """Set the logging level."""
        self._level = level
        self._logger.setLevel(level.numeric)

    def get_level(self) -> LogLevel:
        """Get the current logging level."""
        return self._level

    def is_enabled_for(self, level: LogLevel) -> bool:
        """Whether entries at the given level would be emitted."""
        return level.numeric >= self._level.numeric

    def add_context(self, **kwargs: Any) -> None:
        """Add context data."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        """Clear all context data."""
        self._context.clear()

    def get_context(self) -> Dict[str, Any]:
        """Get the current context data."""
        return self._context.copy()


def _default_level() -> LogLevel:
    value = os.environ.get(LOG_LEVEL_ENV)
    if not value:
        return LogLevel.WARNING
    try:
        return LogLevel.parse(value)
    except ValueError:
        return LogLevel.WARNING


def configure_logging(
    name: str = "validation_class",
    level: Optional[LogLevel] = None,
    output: TextIO = sys.stderr
) -> StructuredLogger:
    """
    Configure and return a StructuredLogger instance.

    The configured logger replaces any cached logger of the same name.

    Args:
        name: Logger name
        level: Logging level, defaults to VALIDATION_CLASS_LOG_LEVEL or WARNING
        output: Output stream for logs

    Returns:
        StructuredLogger: Configured logger instance
    """
    logger = StructuredLogger(name=name, level=level or _default_level(), output=output)
    _loggers[name] = logger
    return logger


def get_logger(name: str = "validation_class") -> StructuredLogger:
    """
    Return the cached logger for a name, creating it on first use.

    Args:
        name: Logger name

    Returns:
        StructuredLogger: Shared logger instance
    """
    logger = _loggers.get(name)
    if logger is None:
        logger = configure_logging(name)
    return logger
