"""Command line entry point for validation-class."""

import sys
from typing import Optional, Tuple

import click

from .commands.directives_command import DirectivesCommand
from .commands.validate_command import ValidateCommand
from .formatters.output_formatter import OutputFormatter
from .handlers.cli_handler import CLIApplication
from ...shared.logging.logger_interface import LogLevel
from ...shared.logging.structured_logger import configure_logging


def build_application(use_rich: bool = True) -> CLIApplication:
    """Create the application with every command registered."""
    application = CLIApplication(OutputFormatter(use_rich=use_rich))
    application.register_command("validate", ValidateCommand)
    application.register_command("directives", DirectivesCommand)
    return application


@click.group()
@click.option(
    "--log-level",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    default=None,
    help="Log level for the engine (logs go to stderr).",
)
@click.option("--plain", is_flag=True, help="Disable rich output.")
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str], plain: bool) -> None:
    """Validate parameters against declarative field rules."""
    if log_level:
        level = LogLevel.parse(log_level)
        configure_logging("validation_class.shared.validation.validation_engine", level, sys.stderr)
    ctx.obj = build_application(use_rich=not plain)


@main.command("validate")
@click.argument("rules", type=click.Path(exists=True, dir_okay=False))
@click.argument("params", type=click.Path(exists=True, dir_okay=False))
@click.argument("selectors", nargs=-1)
@click.option("--profile", default=None, help="Run a declared profile instead of selectors.")
@click.option("--env", "environment", default=None, help="Merge RULES.<env>.yaml on top of RULES.")
@click.option("--ignore-unknown", is_flag=True, help="Skip fields that are not declared.")
@click.option("--report-unknown", is_flag=True, help="Report skipped fields as errors.")
@click.option(
    "--filtering",
    type=click.Choice(["pre", "post", "off"]),
    default=None,
    help="When declared filters run.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
)
@click.pass_obj
def validate_command(
    application: CLIApplication,
    rules: str,
    params: str,
    selectors: Tuple[str, ...],
    profile: Optional[str],
    environment: Optional[str],
    ignore_unknown: bool,
    report_unknown: bool,
    filtering: Optional[str],
    output_format: str,
) -> None:
    """Validate the PARAMS file against the fields declared in RULES.

    SELECTORS restrict validation to some fields. A leading + or - forces
    a field to be required or optional for this run, and /pattern/
    selects every field whose name matches.

    Exit status is 0 when valid, 1 when invalid and 2 when the
    declarations or parameters could not be used.
    """
    result = application.execute_command(
        "validate",
        rules=rules,
        params=params,
        selectors=selectors,
        profile=profile,
        environment=environment,
        ignore_unknown=ignore_unknown or None,
        report_unknown=report_unknown or None,
        filtering=filtering,
        output_format=output_format,
    )
    sys.exit(result.exit_code)


@main.command("directives")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "plain"]),
    default="table",
    show_default=True,
)
@click.pass_obj
def directives_command(application: CLIApplication, output_format: str) -> None:
    """List the built-in directives."""
    result = application.execute_command("directives", output_format=output_format)
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
