"""
Tests for settings, environment overrides and declaration files.
"""

import pytest

from validation_class.infrastructure.config.config_manager import ConfigManager
from validation_class.infrastructure.config.config_validator import ConfigValidator
from validation_class.infrastructure.config.environment_config import (
    EnvironmentConfig,
    ValidationSettings,
    normalize_filtering
)
from validation_class.shared.exceptions.exceptions import ConfigurationError
from validation_class.shared.validation.validation_engine import ValidationEngine


class TestValidationSettings:
    """Test suite for engine settings."""

    def test_defaults(self):
        settings = ValidationSettings()
        assert settings.to_dict() == {
            "ignore_unknown": False,
            "report_unknown": False,
            "filtering": "pre",
            "hash_delimiter": ".",
            "array_delimiter": ":",
        }

    def test_overrides_skip_none(self):
        settings = ValidationSettings().with_overrides(ignore_unknown="yes", filtering=None)
        assert settings.ignore_unknown is True
        assert settings.filtering == "pre"

    def test_unknown_setting(self):
        with pytest.raises(ConfigurationError):
            ValidationSettings().with_overrides(strict=True)

    @pytest.mark.parametrize("value,expected", [
        ("pre", "pre"), ("POST", "post"), ("off", ""), (None, ""), (False, ""),
    ])
    def test_normalize_filtering(self, value, expected):
        assert normalize_filtering(value) == expected

    def test_invalid_settings(self):
        with pytest.raises(ConfigurationError):
            ValidationSettings(filtering="sometimes")
        with pytest.raises(ConfigurationError):
            ValidationSettings(hash_delimiter=":", array_delimiter=":")


class TestEnvironmentConfig:
    """Test suite for environment overrides."""

    def test_environment_wins(self):
        config = EnvironmentConfig(
            {"ignore_unknown": False, "filtering": "pre"},
            environ={
                "VALIDATION_CLASS_IGNORE_UNKNOWN": "1",
                "VALIDATION_CLASS_FILTERING": "post",
                "VALIDATION_CLASS_LOG_LEVEL": "debug",
            }
        )
        settings = config.settings()
        assert settings.ignore_unknown is True
        assert settings.filtering == "post"
        assert config.get_log_level() == "debug"

    def test_without_environment(self):
        settings = EnvironmentConfig({"report_unknown": True}, environ={}).settings()
        assert settings.report_unknown is True
        assert settings.ignore_unknown is False


class TestConfigManager:
    """Test suite for declaration files."""

    def test_load_sections(self, rules_file):
        declarations = ConfigManager(str(rules_file)).load()
        assert list(declarations.fields) == ["login", "password", "password2", "email"]
        assert declarations.mixins["basic"]["required"] == 1
        assert declarations.profiles["signup"] == ["login", "password", "password2"]
        assert declarations.messages == {"min_length": "%s is too short"}

    def test_environment_overlay_is_merged(self, rules_file, write_yaml):
        write_yaml("rules.staging.yaml", {"fields": {"email": {"required": 1}}})
        declarations = ConfigManager(str(rules_file), "staging").load()
        assert declarations.fields["email"] == {"email": 1, "required": 1}
        assert "login" in declarations.fields

    def test_missing_overlay_is_ignored(self, rules_file):
        declarations = ConfigManager(str(rules_file), "production").load()
        assert "email" in declarations.fields

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigManager(str(tmp_path / "missing.yaml")).load()

    def test_unparsable_file(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("fields: [unclosed")
        with pytest.raises(ConfigurationError):
            ConfigManager(str(path)).load()


class TestConfigValidator:
    """Test suite for declaration file checks."""

    def test_collects_every_problem(self):
        validator = ConfigValidator()
        with pytest.raises(ConfigurationError) as exc_info:
            validator.validate_config({
                "rules": {},
                "settings": {"filtering": "later", "strict": True},
                "fields": {"a": "required"},
                "profiles": {"p": "a"},
            })
        assert len(validator.errors) == 5
        assert "Unknown section: rules" in str(exc_info.value)

    def test_invalid_profile_pattern(self):
        validator = ConfigValidator()
        with pytest.raises(ConfigurationError):
            validator.validate_config({"profiles": {"p": ["/(/"]}})

    def test_valid_document(self, rules_document):
        ConfigValidator().validate_config(rules_document)


class TestEngineFromConfig:
    """Test suite for building engines from declaration files."""

    def test_profiles_and_messages(self, rules_file):
        engine = ValidationEngine.from_config(str(rules_file))
        engine.params = {"login": "  adm ", "password": "secret", "password2": "secret"}

        assert not engine.validate_profile("signup")
        assert engine.get_errors() == ["User Login is too short"]

    def test_regex_profile(self, rules_file):
        engine = ValidationEngine.from_config(str(rules_file))
        engine.params = {"password": "secret", "password2": "secrex"}
        assert not engine.validate_profile("credentials")
        assert engine.get_errors() == ["password2 does not match password"]

    def test_overrides(self, rules_file):
        engine = ValidationEngine.from_config(str(rules_file), ignore_unknown=True)
        assert engine.settings.ignore_unknown is True
        assert engine.validate("nope")
