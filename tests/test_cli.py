"""
Tests for the command line interface.
"""

import json

import pytest
from click.testing import CliRunner

from validation_class.presentation.cli.formatters.output_formatter import OutputFormatter
from validation_class.presentation.cli.handlers.cli_handler import (
    CLIApplication,
    CommandHandler,
    CommandResult
)
from validation_class.presentation.cli.main import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def good_params(write_yaml):
    return write_yaml("good.yaml", {"login": "admin", "password": "secret", "password2": "secret"})


@pytest.fixture
def bad_params(write_yaml):
    return write_yaml("bad.yaml", {"login": "adm", "password": "secret", "password2": "secrex"})


class TestValidateCommand:
    """Test suite for ``validation-class validate``."""

    def test_valid_parameters(self, runner, rules_file, good_params):
        result = runner.invoke(main, ["--plain", "validate", str(rules_file), str(good_params)])
        assert result.exit_code == 0
        assert "Parameters are valid" in result.output
        assert "3 parameter(s) checked" in result.output

    def test_invalid_parameters_as_json(self, runner, rules_file, bad_params):
        result = runner.invoke(
            main,
            ["--plain", "validate", str(rules_file), str(bad_params), "--format", "json"]
        )
        assert result.exit_code == 1
        report = json.loads(result.output)
        assert report["valid"] is False
        assert report["errors"] == [
            "User Login is too short",
            "password2 does not match password",
        ]
        assert report["fields"]["login"] == ["User Login is too short"]

    def test_invalid_parameters_as_table(self, runner, rules_file, bad_params):
        result = runner.invoke(main, ["--plain", "validate", str(rules_file), str(bad_params)])
        assert result.exit_code == 1
        assert "User Login is too short" in result.output
        assert "Validation failed" in result.output

    def test_rich_output(self, runner, rules_file, bad_params):
        result = runner.invoke(main, ["validate", str(rules_file), str(bad_params)])
        assert result.exit_code == 1

    def test_selectors(self, runner, rules_file, bad_params):
        result = runner.invoke(
            main,
            ["--plain", "validate", str(rules_file), str(bad_params), "login", "--format", "json"]
        )
        assert json.loads(result.output)["errors"] == ["User Login is too short"]

    def test_regex_selector(self, runner, rules_file, bad_params):
        result = runner.invoke(
            main,
            ["--plain", "validate", str(rules_file), str(bad_params), "/^pass/", "--format", "json"]
        )
        assert json.loads(result.output)["errors"] == ["password2 does not match password"]

    def test_profile(self, runner, rules_file, good_params):
        result = runner.invoke(
            main,
            ["--plain", "validate", str(rules_file), str(good_params), "--profile", "signup"]
        )
        assert result.exit_code == 0

    def test_unknown_field_is_an_error(self, runner, rules_file, write_yaml):
        params = write_yaml("unknown.yaml", {"nope": "x"})
        result = runner.invoke(main, ["--plain", "validate", str(rules_file), str(params)])
        assert result.exit_code == 2
        assert "Data validation field nope does not exist" in result.output

    def test_ignore_unknown(self, runner, rules_file, write_yaml):
        params = write_yaml("unknown.yaml", {"nope": "x"})
        result = runner.invoke(
            main,
            ["--plain", "validate", str(rules_file), str(params), "--ignore-unknown"]
        )
        assert result.exit_code == 0

    def test_report_unknown(self, runner, rules_file, write_yaml):
        params = write_yaml("unknown.yaml", {"nope": "x"})
        result = runner.invoke(
            main,
            [
                "--plain", "validate", str(rules_file), str(params),
                "--ignore-unknown", "--report-unknown", "--format", "json"
            ]
        )
        assert result.exit_code == 1
        assert json.loads(result.output)["errors"] == ["Data validation field nope does not exist"]

    def test_post_filtering_is_reported(self, runner, rules_file, write_yaml):
        params = write_yaml(
            "spaced.yaml",
            {"login": "  admin  ", "password": "secret", "password2": "secret"}
        )
        result = runner.invoke(
            main,
            [
                "--plain", "validate", str(rules_file), str(params),
                "--filtering", "post", "--format", "json"
            ]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["params"]["login"] == "admin"

    def test_params_must_be_a_mapping(self, runner, rules_file, write_yaml):
        params = write_yaml("list.yaml", ["a", "b"])
        result = runner.invoke(main, ["--plain", "validate", str(rules_file), str(params)])
        assert result.exit_code == 2
        assert "must be a mapping" in result.output

    def test_missing_rules_file(self, runner, tmp_path, good_params):
        result = runner.invoke(main, ["validate", str(tmp_path / "missing.yaml"), str(good_params)])
        assert result.exit_code == 2


class TestDirectivesCommand:
    """Test suite for ``validation-class directives``."""

    def test_plain_listing(self, runner):
        result = runner.invoke(main, ["directives", "--format", "plain"])
        assert result.exit_code == 0
        assert "required" in result.output
        assert "%s is required" in result.output

    def test_table_listing(self, runner):
        result = runner.invoke(main, ["--plain", "directives"])
        assert result.exit_code == 0
        assert "multiples" in result.output


class TestCLIApplication:
    """Test suite for command dispatch."""

    def test_unknown_command(self):
        application = CLIApplication(OutputFormatter(use_rich=False))
        result = application.execute_command("missing")
        assert not result.success
        assert result.exit_code == 2

    def test_unexpected_errors_are_reported(self, capsys):
        class Broken(CommandHandler):
            def execute(self, **kwargs) -> CommandResult:
                raise RuntimeError("boom")

        application = CLIApplication(OutputFormatter(use_rich=False))
        application.register_command("broken", Broken)
        result = application.execute_command("broken")

        assert result.exit_code == 2
        assert isinstance(result.error, RuntimeError)
        assert "boom" in capsys.readouterr().out
