"""
Command plumbing for the validation-class tool.

Commands return a ``CommandResult`` whose ``exit_code`` becomes the
process status: 0 when parameters are valid, 1 when they are not, and
2 when validation could not run at all.
"""

import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from ...cli.formatters.output_formatter import OutputFormatter
from ....shared.exceptions.exceptions import ValidationClassError

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


@dataclass
class CommandResult:
    """Outcome of a command, including its exit status."""

    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[Exception] = None
    exit_code: int = EXIT_OK


class CommandHandler(ABC):
    """A single ``validation-class`` subcommand."""

    def __init__(self, formatter: OutputFormatter):
        self.formatter = formatter

    @abstractmethod
    def execute(self, **kwargs) -> CommandResult:
        """Run the command with its parsed CLI arguments."""

    def handle_error(
        self,
        error: Exception,
        headline: str = "Unexpected failure"
    ) -> CommandResult:
        """
        Report a command that could not finish.

        Declaration and unknown-field errors are shown by message only,
        since they describe the user's input. Anything else is a bug and
        is shown with its traceback.

        Args:
            error: What was raised
            headline: Title of the error panel

        Returns:
            CommandResult: Failed result with ``EXIT_ERROR``
        """
        if isinstance(error, ValidationClassError):
            details = error.message
        else:
            details = "".join(traceback.format_exception(type(error), error, error.__traceback__))

        self.formatter.print(self.formatter.format_error(headline, details))
        return CommandResult(success=False, message=headline, error=error, exit_code=EXIT_ERROR)

    def handle_success(
        self,
        message: str,
        data: Optional[Any] = None,
        details: Optional[str] = None
    ) -> CommandResult:
        self.formatter.print(self.formatter.format_success(message, details))
        return CommandResult(success=True, message=message, data=data)


class CLIApplication:
    """Dispatches subcommand names to their handlers."""

    def __init__(self, formatter: OutputFormatter):
        self.formatter = formatter
        self._commands: Dict[str, Type[CommandHandler]] = {}

    def register_command(self, name: str, handler: Type[CommandHandler]) -> None:
        self._commands[name] = handler

    def execute_command(self, name: str, **kwargs) -> CommandResult:
        """
        Run a registered command.

        Exceptions never escape: they are reported through the handler
        and turned into an ``EXIT_ERROR`` result.

        Args:
            name: Subcommand name
            **kwargs: Parsed CLI arguments

        Returns:
            CommandResult: The command's result
        """
        handler_class = self._commands.get(name)
        if handler_class is None:
            return CommandResult(
                success=False,
                message=f"Unknown command: {name}",
                exit_code=EXIT_ERROR
            )

        handler = handler_class(self.formatter)
        try:
            return handler.execute(**kwargs)
        except ValidationClassError as e:
            return handler.handle_error(e, "Validation could not run")
        except Exception as e:
            return handler.handle_error(e)
