"""
Error context management system.

This module provides utilities for capturing structured information
about configuration and policy errors raised by the validation engine.
"""

import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ErrorContext:
    """
    Structured error context information.

    Every exception raised by the engine carries one of these, so callers
    (and the CLI) can report where a failure came from without parsing
    the exception message.
    """

    timestamp: datetime = field(default_factory=_utcnow)
    error_type: str = ""
    error_message: str = ""
    operation: Optional[str] = None
    component: Optional[str] = None
    stack_trace: Optional[List[str]] = None
    context_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error context to dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "error_type": self.error_type,
            "error_message": self.error_message,
            "operation": self.operation,
            "component": self.component,
            "stack_trace": self.stack_trace,
            "context_data": self.context_data,
        }

    def add_context(self, **kwargs: Any) -> None:
        """
        Add context data.

        Args:
            **kwargs: Context data to add
        """
        self.context_data.update(kwargs)


class ErrorContextManager:
    """Helpers for creating and rendering error contexts."""

    @staticmethod
    def create_context(
        error: Exception,
        include_stack_trace: bool = False,
        **context_data: Any
    ) -> ErrorContext:
        """
        Create error context from exception.

        When the exception already carries a context, that context is
        extended rather than replaced.

        Args:
            error: The exception to create context from
            include_stack_trace: Whether to include stack trace
            **context_data: Additional context data

        Returns:
            ErrorContext: Created error context
        """
        existing = getattr(error, "context", None)
        if isinstance(existing, ErrorContext):
            context = existing
            context.add_context(**context_data)
        else:
            context = ErrorContext(
                error_type=error.__class__.__name__,
                error_message=str(error),
                context_data=dict(context_data)
            )

        if include_stack_trace:
            context.stack_trace = traceback.format_exception(
                type(error),
                error,
                error.__traceback__
            )

        return context

    @staticmethod
    def format_context(context: ErrorContext) -> str:
        """
        Format error context as string.

        Args:
            context: Error context to format

        Returns:
            str: Formatted error context
        """
        parts = [
            f"Error: {context.error_type}",
            f"Message: {context.error_message}",
        ]

        if context.operation:
            parts.append(f"Operation: {context.operation}")

        if context.component:
            parts.append(f"Component: {context.component}")

        if context.context_data:
            context_str = ", ".join(
                f"{k}={v}" for k, v in context.context_data.items()
            )
            parts.append(f"Context: {context_str}")

        if context.stack_trace:
            parts.append("Stack Trace:")
            parts.extend(context.stack_trace)

        return "\n".join(parts)
