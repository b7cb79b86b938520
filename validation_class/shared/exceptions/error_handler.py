"""
Unknown field policy handler.

This module centralizes the tri-state policy applied whenever the engine
meets a name it has no declaration for: raise, silently ignore, or
record a class-level error.
"""

from enum import Enum
from typing import Any, Callable, List, Optional, Type

from .error_context import ErrorContext, ErrorContextManager
from .exceptions import UnknownFieldError
from ..logging.logger_interface import LoggerInterface
from ..logging.structured_logger import get_logger


class UnknownPolicy(Enum):
    """How unknown fields and profiles are treated."""
    RAISE = "raise"
    IGNORE = "ignore"
    REPORT = "report"

    @classmethod
    def from_switches(cls, ignore_unknown: bool, report_unknown: bool) -> "UnknownPolicy":
        if not ignore_unknown:
            return cls.RAISE
        return cls.REPORT if report_unknown else cls.IGNORE


class UnknownPolicyHandler:
    """
    Applies the unknown field policy.

    The handler either raises, records the message in the supplied error
    collection, or drops it. Registered callbacks are notified in every
    case, before the policy is applied.
    """

    def __init__(
        self,
        policy: UnknownPolicy = UnknownPolicy.RAISE,
        logger: Optional[LoggerInterface] = None
    ):
        """
        Initialize the handler.

        Args:
            policy: Policy to apply
            logger: Optional logger, defaults to the module logger
        """
        self.policy = policy
        self.logger = logger or get_logger(__name__)
        self._callbacks: List[Callable[[Exception, ErrorContext], None]] = []

    def register_callback(
        self,
        callback: Callable[[Exception, ErrorContext], None]
    ) -> None:
        """
        Register a callback invoked for every unknown name.

        Args:
            callback: Callable receiving the error and its context
        """
        self._callbacks.append(callback)

    def handle(
        self,
        message: str,
        errors: Any = None,
        error_type: Type[UnknownFieldError] = UnknownFieldError,
        **context_data: Any
    ) -> None:
        """
        Apply the policy to an unknown name.

        Args:
            message: Message describing the unknown name
            errors: Error collection receiving the message under REPORT
            error_type: Exception class raised under RAISE
            **context_data: Additional context data

        Raises:
            UnknownFieldError: When the policy is RAISE
        """
        error = error_type(message, operation="validate", **context_data)
        context = ErrorContextManager.create_context(error, policy=self.policy.value)

        for callback in self._callbacks:
            callback(error, context)

        if self.policy is UnknownPolicy.RAISE:
            raise error

        if self.policy is UnknownPolicy.REPORT:
            self.logger.warning(message, **context.context_data)
            if errors is not None:
                errors.add(message)
        else:
            self.logger.debug(f"Ignored: {message}", **context.context_data)
