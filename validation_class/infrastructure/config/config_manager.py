"""
Configuration manager for declaration files.

This module loads field, mixin and profile declarations from YAML,
with support for per-environment overlay files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config_validator import ConfigValidator
from ...shared.exceptions.exceptions import ConfigurationError


@dataclass
class Declarations:
    """Sections of a loaded declaration file."""

    settings: Dict[str, Any] = field(default_factory=dict)
    mixins: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    fields: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    profiles: Dict[str, List[str]] = field(default_factory=dict)
    messages: Dict[str, str] = field(default_factory=dict)


class ConfigManager:
    """
    Manager for declaration files.

    ``rules.yaml`` loaded with environment ``staging`` is merged with
    ``rules.staging.yaml`` from the same directory when that file exists.
    """

    def __init__(self, path: str, environment: Optional[str] = None):
        """
        Initialize the manager.

        Args:
            path: Declaration file path
            environment: Optional environment name
        """
        self.path = Path(path)
        self.environment = environment
        self.validator = ConfigValidator()
        self._config: Optional[Dict[str, Any]] = None

    def load_config(self) -> Dict[str, Any]:
        """
        Load and validate the merged declaration document.

        Returns:
            Dict[str, Any]: Merged document

        Raises:
            ConfigurationError: If a file is missing, unreadable or invalid
        """
        if self._config is not None:
            return self._config

        config = self._load_yaml(self.path)

        if self.environment:
            overlay = self.path.with_name(f"{self.path.stem}.{self.environment}{self.path.suffix}")
            if overlay.exists():
                config = self._merge_configs(config, self._load_yaml(overlay))

        self.validator.validate_config(config)
        self._config = config
        return config

    def load(self) -> Declarations:
        """
        Load the declarations.

        Returns:
            Declarations: Sections of the merged document
        """
        config = self.load_config()
        return Declarations(
            settings=dict(config.get("settings") or {}),
            mixins={name: dict(d or {}) for name, d in (config.get("mixins") or {}).items()},
            fields={name: dict(d or {}) for name, d in (config.get("fields") or {}).items()},
            profiles=dict(config.get("profiles") or {}),
            messages=dict(config.get("messages") or {}),
        )

    def _load_yaml(self, file_path: Path) -> Dict[str, Any]:
        if not file_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {file_path}",
                operation="load_config",
                path=str(file_path)
            )

        try:
            with open(file_path, "r") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Could not parse {file_path}: {e}",
                operation="load_config",
                path=str(file_path)
            ) from e

    def _merge_configs(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Merge two documents, recursing into nested mappings.

        Args:
            base: Base document
            override: Overlay document

        Returns:
            Dict[str, Any]: Merged document
        """
        result = base.copy()

        for key, value in override.items():
            if (
                key in result and
                isinstance(result[key], dict) and
                isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result
