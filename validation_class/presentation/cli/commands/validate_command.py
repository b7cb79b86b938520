"""
Validate command for CLI.

This module provides the command handler that validates a parameter
file against a declaration file.
"""

from typing import Any, Dict, List, Optional, Sequence

import yaml

from ...cli.handlers.cli_handler import EXIT_INVALID, EXIT_OK, CommandHandler, CommandResult
from ...cli.formatters.output_formatter import OutputFormatter
from ....shared.exceptions.exceptions import ConfigurationError
from ....shared.validation.validation_engine import ValidationEngine, parse_selector


def load_params(path: str) -> Dict[str, Any]:
    """
    Read submitted parameters from a YAML or JSON file.

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping
    """
    try:
        with open(path, "r") as f:
            params = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not read parameters from {path}: {e}",
            operation="load_params",
            path=path
        ) from e

    if params is None:
        return {}
    if not isinstance(params, dict):
        raise ConfigurationError(
            f"Parameters in {path} must be a mapping",
            operation="load_params",
            path=path
        )
    return params


class ValidateCommand(CommandHandler):
    """Validate a parameter file against declared fields."""

    def __init__(self, formatter: OutputFormatter):
        super().__init__(formatter)

    def execute(
        self,
        rules: str,
        params: str,
        selectors: Sequence[str] = (),
        profile: Optional[str] = None,
        environment: Optional[str] = None,
        ignore_unknown: Optional[bool] = None,
        report_unknown: Optional[bool] = None,
        filtering: Optional[str] = None,
        output_format: str = "table",
        **kwargs
    ) -> CommandResult:
        """
        Execute the validate command.

        Args:
            rules: Declaration file
            params: Parameter file
            selectors: Field selectors, ``/regex/`` and ``+``/``-`` prefixes allowed
            profile: Profile to run instead of the selectors
            environment: Declaration overlay to merge
            ignore_unknown: Ignore unknown fields
            report_unknown: Report ignored unknown fields as errors
            filtering: Filtering mode override
            output_format: "table" or "json"
            **kwargs: Additional arguments

        Returns:
            CommandResult: Command execution result
        """
        engine = ValidationEngine.from_config(
            rules,
            environment,
            ignore_unknown=ignore_unknown,
            report_unknown=report_unknown,
            filtering=filtering
        )
        engine.params = load_params(params)

        if profile:
            valid = bool(engine.validate_profile(profile)) and engine.error_count == 0
        else:
            valid = engine.validate(*[parse_selector(s) for s in selectors])

        report = {
            "valid": valid,
            "error_count": engine.error_count,
            "errors": engine.get_errors(),
            "fields": engine.error_fields(),
            "params": engine.get_params_hash(),
        }

        if output_format == "json":
            self.formatter.print(self.formatter.format_json(report), raw=True)
            return CommandResult(
                success=valid,
                message="valid" if valid else "invalid",
                data=report,
                exit_code=EXIT_OK if valid else EXIT_INVALID
            )

        if valid:
            return self.handle_success(
                "Parameters are valid",
                data=report,
                details=f"{len(engine.params)} parameter(s) checked against {rules}"
            )

        rows: List[Dict[str, str]] = [
            {"Field": name, "Error": message}
            for name, messages in report["fields"].items()
            for message in messages
        ]
        reported = {row["Error"] for row in rows}
        rows.extend(
            {"Field": "", "Error": message}
            for message in report["errors"]
            if message not in reported
        )
        self.formatter.print(self.formatter.format_table(rows, title="Validation Errors"))
        self.formatter.print(
            self.formatter.format_error(
                "Validation failed",
                f"{engine.error_count} error(s)"
            )
        )
        return CommandResult(
            success=False,
            message="invalid",
            data=report,
            exit_code=EXIT_INVALID
        )
