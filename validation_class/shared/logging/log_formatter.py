"""
Log formatter for consistent message formatting.

This module provides helpers shared by the structured logger and the
engine when building log entries.
"""

import traceback
from typing import Any, Dict, Optional


class LogFormatter:
    """Static helpers for log entry payloads."""

    @staticmethod
    def format_error(
        error: Exception,
        include_traceback: bool = True
    ) -> Dict[str, Any]:
        """
        Format an error for logging.

        Args:
            error: The error to format
            include_traceback: Whether to include traceback

        Returns:
            Dict[str, Any]: Formatted error
        """
        formatted: Dict[str, Any] = {
            "type": error.__class__.__name__,
            "message": str(error)
        }

        if include_traceback:
            formatted["traceback"] = traceback.format_exception(
                type(error),
                error,
                error.__traceback__
            )

        return formatted

    @staticmethod
    def format_context(
        context: Dict[str, Any],
        exclude_keys: Optional[set] = None
    ) -> Dict[str, Any]:
        """
        Format context data for logging.

        Values that cannot be serialized as JSON are rendered with repr(),
        so callables and compiled patterns in a context never break a
        log entry.

        Args:
            context: Context data to format
            exclude_keys: Optional set of keys to exclude

        Returns:
            Dict[str, Any]: Formatted context
        """
        exclude_keys = exclude_keys or set()
        return {
            k: LogFormatter._jsonable(v)
            for k, v in context.items()
            if k not in exclude_keys
        }

    @staticmethod
    def format_duration(seconds: float) -> str:
        """
        Format a duration in seconds.

        Args:
            seconds: Duration in seconds

        Returns:
            str: Formatted duration
        """
        if seconds < 1:
            return f"{seconds * 1000:.2f}ms"
        elif seconds < 60:
            return f"{seconds:.2f}s"
        minutes = seconds / 60
        return f"{minutes:.2f}m"

    @staticmethod
    def _jsonable(value: Any) -> Any:
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        if isinstance(value, (list, tuple, set)):
            return [LogFormatter._jsonable(v) for v in value]
        if isinstance(value, dict):
            return {str(k): LogFormatter._jsonable(v) for k, v in value.items()}
        return repr(value)
