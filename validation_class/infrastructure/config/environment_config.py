"""
Engine settings and environment overrides.

This module defines the switches recognised by the validation engine and
reads overrides for them from environment variables.
"""

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ...shared.exceptions.exceptions import ConfigurationError

ENV_PREFIX = "VALIDATION_CLASS_"
FILTERING_MODES = ("pre", "post", "")


def normalize_filtering(value: Any) -> str:
    """
    Map a filtering setting to ``"pre"``, ``"post"`` or ``""``.

    None, False, "off" and "none" all disable filtering.

    Raises:
        ConfigurationError: On any other value
    """
    if value is None or value is False:
        return ""
    text = str(value).strip().lower()
    if text in ("off", "none", "false", "0"):
        return ""
    if text not in FILTERING_MODES:
        raise ConfigurationError(
            f"Filtering must be one of pre, post or off, got {value!r}",
            operation="configure"
        )
    return text


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class ValidationSettings:
    """Switches controlling a validation engine."""

    ignore_unknown: bool = False
    report_unknown: bool = False
    filtering: str = "pre"
    hash_delimiter: str = "."
    array_delimiter: str = ":"

    def __post_init__(self) -> None:
        self.ignore_unknown = parse_bool(self.ignore_unknown)
        self.report_unknown = parse_bool(self.report_unknown)
        self.filtering = normalize_filtering(self.filtering)
        if not self.hash_delimiter or not self.array_delimiter:
            raise ConfigurationError(
                "Parameter delimiters must be non-empty strings",
                operation="configure"
            )
        if self.hash_delimiter == self.array_delimiter:
            raise ConfigurationError(
                "The hash and array delimiters must differ",
                operation="configure"
            )

    def with_overrides(self, **overrides: Any) -> "ValidationSettings":
        """
        Copy the settings, replacing the given switches.

        None values are ignored so optional CLI flags can be passed through.

        Raises:
            ConfigurationError: If a switch name is unknown
        """
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown setting(s): {', '.join(unknown)}",
                operation="configure"
            )
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


class EnvironmentConfig:
    """
    Environment-specific configuration.

    Reads ``VALIDATION_CLASS_*`` variables on top of a settings mapping,
    for example ``VALIDATION_CLASS_IGNORE_UNKNOWN=1``.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize the configuration.

        Args:
            config: Base settings mapping
            environ: Environment mapping, defaults to os.environ
        """
        self.config: Dict[str, Any] = dict(config or {})
        self._environ = os.environ if environ is None else environ
        self._apply_environment_overrides()

    def _apply_environment_overrides(self) -> None:
        """Apply environment variable overrides to the configuration."""
        for key in ("ignore_unknown", "report_unknown", "filtering",
                    "hash_delimiter", "array_delimiter", "log_level"):
            variable = ENV_PREFIX + key.upper()
            if variable in self._environ:
                self.config[key] = self._environ[variable]

    def get_ignore_unknown(self) -> bool:
        return parse_bool(self.config.get("ignore_unknown", False))

    def get_report_unknown(self) -> bool:
        return parse_bool(self.config.get("report_unknown", False))

    def get_filtering(self) -> str:
        return normalize_filtering(self.config.get("filtering", "pre"))

    def get_log_level(self) -> Optional[str]:
        return self.config.get("log_level")

    def settings(self) -> ValidationSettings:
        """
        Build engine settings from the configuration.

        Returns:
            ValidationSettings: Settings with environment overrides applied
        """
        return ValidationSettings(
            ignore_unknown=self.get_ignore_unknown(),
            report_unknown=self.get_report_unknown(),
            filtering=self.get_filtering(),
            hash_delimiter=self.config.get("hash_delimiter", "."),
            array_delimiter=self.config.get("array_delimiter", ":"),
        )
