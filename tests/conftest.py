"""
Test configuration and fixtures for validation_class tests.
"""

import io
import uuid
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
import yaml

from validation_class.shared.logging.logger_interface import LogLevel
from validation_class.shared.logging.structured_logger import StructuredLogger
from validation_class.shared.validation.validation_engine import ValidationEngine


@pytest.fixture
def make_engine() -> Callable[..., ValidationEngine]:
    """Factory building engines from keyword arguments."""
    def _make(**kwargs: Any) -> ValidationEngine:
        return ValidationEngine(**kwargs)
    return _make


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def debug_logger(log_stream) -> StructuredLogger:
    """Logger writing DEBUG entries into ``log_stream``."""
    return StructuredLogger(
        name=f"validation_class.tests.{uuid.uuid4().hex}",
        level=LogLevel.DEBUG,
        output=log_stream
    )


@pytest.fixture
def rules_document() -> Dict[str, Any]:
    """Declaration file contents used by config and CLI tests."""
    return {
        "settings": {"filtering": "pre"},
        "mixins": {
            "basic": {"required": 1, "filters": ["trim", "strip"]},
        },
        "fields": {
            "login": {"mixin": "basic", "min_length": 5, "label": "User Login"},
            "password": {"mixin": "basic", "min_length": 5},
            "password2": {"mixin_field": "password", "matches": "password"},
            "email": {"email": 1},
        },
        "profiles": {
            "signup": ["login", "password", "password2"],
            "credentials": ["/^pass/"],
        },
        "messages": {"min_length": "%s is too short"},
    }


@pytest.fixture
def rules_file(tmp_path, rules_document) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(yaml.safe_dump(rules_document, sort_keys=False))
    return path


@pytest.fixture
def write_yaml(tmp_path) -> Callable[[str, Any], Path]:
    """Write any document as YAML into the temporary directory."""
    def _write(name: str, document: Any) -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(document, sort_keys=False))
        return path
    return _write
