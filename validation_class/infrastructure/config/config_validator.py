"""
Configuration validator for declaration files.

This module checks the shape of a loaded declaration file before any
field is resolved, so that mistakes are reported all at once.
"""

import re
from typing import Any, Dict, List

from .environment_config import FILTERING_MODES, ValidationSettings
from ...shared.exceptions.exceptions import ConfigurationError

SECTIONS = ("settings", "mixins", "fields", "profiles", "messages")


class ConfigValidator:
    """
    Validator for declaration files.

    Problems are collected in ``errors`` and raised together.
    """

    def __init__(self):
        """Initialize the validator."""
        self.errors: List[str] = []

    def validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate a declaration file.

        Args:
            config: Parsed YAML document

        Raises:
            ConfigurationError: If the declarations are malformed
        """
        self.errors = []

        if not isinstance(config, dict):
            self.errors.append("The declaration file must contain a mapping")
        else:
            for key in config:
                if key not in SECTIONS:
                    self.errors.append(
                        f"Unknown section: {key} (expected one of {', '.join(SECTIONS)})"
                    )
            if "settings" in config:
                self._validate_settings(config["settings"])
            for section in ("mixins", "fields"):
                if section in config:
                    self._validate_declarations(section, config[section])
            if "profiles" in config:
                self._validate_profiles(config["profiles"])
            if "messages" in config:
                self._validate_messages(config["messages"])

        if self.errors:
            raise ConfigurationError("\n".join(self.errors), operation="load_config")

    def _validate_settings(self, settings: Any) -> None:
        if not isinstance(settings, dict):
            self.errors.append("Settings must be a mapping")
            return

        known = set(ValidationSettings.__dataclass_fields__) | {"log_level"}
        for key in settings:
            if key not in known:
                self.errors.append(f"Unknown setting: {key}")

        filtering = settings.get("filtering", "pre")
        if filtering not in (None, False, "off", "none") and filtering not in FILTERING_MODES:
            self.errors.append("Filtering must be one of pre, post or off")

        for key in ("hash_delimiter", "array_delimiter"):
            if key in settings:
                value = settings[key]
                if not isinstance(value, str) or not value:
                    self.errors.append(f"Setting {key} must be a non-empty string")

    def _validate_declarations(self, section: str, declarations: Any) -> None:
        if declarations is None:
            return
        if not isinstance(declarations, dict):
            self.errors.append(f"Section {section} must map names to directives")
            return
        for name, directives in declarations.items():
            if not isinstance(name, str) or not name:
                self.errors.append(f"Names in {section} must be non-empty strings")
            elif directives is not None and not isinstance(directives, dict):
                self.errors.append(f"Entry {name} in {section} must be a mapping of directives")

    def _validate_profiles(self, profiles: Any) -> None:
        if not isinstance(profiles, dict):
            self.errors.append("Profiles must map names to lists of field selectors")
            return
        for name, selectors in profiles.items():
            if not isinstance(selectors, list) or not all(isinstance(s, str) for s in selectors):
                self.errors.append(f"Profile {name} must be a list of field selectors")
                continue
            for selector in selectors:
                if len(selector) > 2 and selector.startswith("/") and selector.endswith("/"):
                    try:
                        re.compile(selector[1:-1])
                    except re.error as e:
                        self.errors.append(f"Profile {name} has an invalid pattern {selector}: {e}")

    def _validate_messages(self, messages: Any) -> None:
        if not isinstance(messages, dict) or not all(
            isinstance(value, str) for value in messages.values()
        ):
            self.errors.append("Messages must map directive names to message templates")
