"""
Logger contract shared by the engine, resolver and expander.

Every call takes a message plus keyword fields, which end up in the
entry's ``context`` next to any context bound with ``add_context``.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(Enum):
    """Level names accepted by ``--log-level`` and VALIDATION_CLASS_LOG_LEVEL."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.value)

    @classmethod
    def parse(cls, value: str) -> "LogLevel":
        """
        Parse a level name, ignoring case and surrounding blanks.

        Raises:
            ValueError: If the name is not a known level
        """
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown log level: {value}") from None


class LoggerInterface(ABC):
    """
    What the validation components need from a logger.

    Engines log runs and profiles at DEBUG, and the unknown-field policy
    reports at WARNING. Anything implementing these methods can be passed
    as ``logger=`` to an engine.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def critical(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def exception(self, message: str, exc_info: Optional[Exception] = None, **kwargs: Any) -> None:
        """Log at ERROR with the details of ``exc_info`` attached."""

    @abstractmethod
    def set_level(self, level: LogLevel) -> None:
        pass

    @abstractmethod
    def get_level(self) -> LogLevel:
        pass

    @abstractmethod
    def add_context(self, **kwargs: Any) -> None:
        """Bind fields included in every later entry, such as a request id."""

    @abstractmethod
    def clear_context(self) -> None:
        pass

    @abstractmethod
    def get_context(self) -> Dict[str, Any]:
        pass
