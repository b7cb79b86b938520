"""
Output formatter for CLI commands.

This module provides consistent formatting for CLI output,
including tables, JSON, and status panels.
"""

from typing import Any, Dict, List, Optional, Union
import json
from tabulate import tabulate
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text


class OutputFormatter:
    """
    Formatter for CLI command output.

    With ``use_rich`` tables and messages are rendered as rich objects,
    otherwise as plain text via tabulate.
    """

    def __init__(self, use_rich: bool = True):
        """
        Initialize the formatter.

        Args:
            use_rich: Whether to use rich formatting
        """
        self.use_rich = use_rich
        self.console = Console() if use_rich else None

    def format_table(
        self,
        data: List[Dict[str, Any]],
        headers: Optional[List[str]] = None,
        title: Optional[str] = None
    ) -> Any:
        """
        Format data as a table.

        Args:
            data: List of dictionaries containing row data
            headers: Optional list of header names
            title: Optional table title

        Returns:
            Any: A rich Table, or the tabulated text
        """
        if not data:
            return "No data to display"

        columns = headers or list(data[0].keys())

        if self.use_rich:
            table = Table(title=title) if title else Table()
            for column in columns:
                table.add_column(column)
            for row in data:
                table.add_row(*[str(row.get(key, "")) for key in columns])
            return table

        text = tabulate(
            [[row.get(key, "") for key in columns] for row in data],
            headers=columns,
            tablefmt="grid"
        )
        return f"{title}\n{text}" if title else text

    def format_plain(self, data: List[Dict[str, Any]]) -> str:
        """Format rows as a borderless text table."""
        if not data:
            return "No data to display"
        return tabulate(data, headers="keys", tablefmt="plain")

    def format_json(
        self,
        data: Union[Dict[str, Any], List[Any]],
        pretty: bool = True
    ) -> str:
        """
        Format data as JSON.

        Args:
            data: Data to format
            pretty: Whether to pretty print

        Returns:
            str: Formatted JSON
        """
        if pretty:
            return json.dumps(data, indent=2, default=str)
        return json.dumps(data, default=str)

    def format_error(
        self,
        message: str,
        details: Optional[str] = None
    ) -> Any:
        """
        Format error message.

        Args:
            message: Error message
            details: Optional error details

        Returns:
            Any: A rich Panel, or plain text
        """
        if self.use_rich:
            error_text = Text(message, style="bold red")
            if details:
                error_text.append("\n" + details, style="red")
            return Panel(error_text, title="Error", border_style="red")
        if details:
            return f"Error: {message}\n{details}"
        return f"Error: {message}"

    def format_success(
        self,
        message: str,
        details: Optional[str] = None
    ) -> Any:
        """
        Format success message.

        Args:
            message: Success message
            details: Optional success details

        Returns:
            Any: A rich Panel, or plain text
        """
        if self.use_rich:
            success_text = Text(message, style="bold green")
            if details:
                success_text.append("\n" + details, style="green")
            return Panel(success_text, title="Success", border_style="green")
        if details:
            return f"Success: {message}\n{details}"
        return f"Success: {message}"

    def print(
        self,
        content: Any,
        style: Optional[str] = None,
        raw: bool = False
    ) -> None:
        """
        Print content with optional styling.

        Args:
            content: Content to print
            style: Optional style
            raw: Print text exactly as given, without markup or wrapping
        """
        if not self.use_rich:
            print(content)
        elif raw:
            self.console.print(
                content,
                markup=False,
                highlight=False,
                emoji=False,
                soft_wrap=True
            )
        elif style:
            self.console.print(content, style=style)
        else:
            self.console.print(content)
