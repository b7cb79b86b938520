"""
Directives command for CLI.

This module lists the directives an engine understands.
"""

from ...cli.handlers.cli_handler import CommandHandler, CommandResult
from ....infrastructure.registry.directive_registry import get_default_registry


class DirectivesCommand(CommandHandler):
    """List the built-in directives."""

    def execute(self, output_format: str = "table", **kwargs) -> CommandResult:
        """
        Execute the directives command.

        Args:
            output_format: "table" or "plain"
            **kwargs: Additional arguments

        Returns:
            CommandResult: Command execution result
        """
        rows = [
            {
                "Directive": info["name"],
                "Mixin": "yes" if info["mixin"] else "no",
                "Field": "yes" if info["field"] else "no",
                "Multi": "yes" if info["multi"] else "no",
                "Message": info["message"],
            }
            for info in (directive.describe() for directive in get_default_registry())
        ]

        if output_format == "plain":
            self.formatter.print(self.formatter.format_plain(rows), raw=True)
        else:
            self.formatter.print(self.formatter.format_table(rows, title="Directives"))

        return CommandResult(success=True, message=f"{len(rows)} directives", data=rows)
