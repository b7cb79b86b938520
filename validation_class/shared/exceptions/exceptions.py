"""
Exception hierarchy for the validation engine.

Field validation failures are never raised; they are recorded as error
messages. The exceptions below cover programmer errors in the rule
declarations and the unknown field policy.
"""

from typing import Any, Optional

from .error_context import ErrorContext


class ValidationClassError(Exception):
    """Base class for all errors raised by the engine."""

    component: str = "engine"

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        **details: Any
    ):
        """
        Initialize the error.

        Args:
            message: Human readable error message
            operation: Operation that was running when the error occurred
            **details: Additional context data
        """
        super().__init__(message)
        self.message = message
        self.context = ErrorContext(
            error_type=self.__class__.__name__,
            error_message=message,
            operation=operation,
            component=self.component,
            context_data=dict(details)
        )


class ConfigurationError(ValidationClassError):
    """Raised when field, mixin or directive declarations are invalid."""

    component = "resolver"


class DirectiveDependencyError(ConfigurationError):
    """Raised when directive dependencies form a cycle."""

    component = "registry"


class UnknownFieldError(ValidationClassError):
    """Raised when a requested field has no declaration."""

    component = "pipeline"


class UnknownProfileError(UnknownFieldError):
    """Raised when a requested validation profile is not registered."""
