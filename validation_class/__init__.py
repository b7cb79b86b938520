"""
Declarative parameter validation.

Declare fields (and reusable mixins) as mappings of directives, hand the
engine a set of parameters, and validate:

    engine = ValidationEngine(
        fields={"login": {"required": 1, "min_length": 5}},
        params={"login": "admin"},
    )
    engine.validate()
"""

from .core.entities import ErrorCollection, Field, Mixin
from .core.interfaces import Directive, ValidationPhase
from .infrastructure.config.environment_config import ValidationSettings
from .infrastructure.registry.directive_registry import DirectiveRegistry
from .infrastructure.registry.filter_registry import FilterRegistry
from .shared.exceptions.exceptions import (
    ConfigurationError,
    DirectiveDependencyError,
    UnknownFieldError,
    UnknownProfileError,
    ValidationClassError
)
from .shared.validation.validation_engine import ValidationEngine

__version__ = "1.0.0"

__all__ = [
    'ValidationEngine',
    'ValidationSettings',
    'Field',
    'Mixin',
    'ErrorCollection',
    'Directive',
    'ValidationPhase',
    'DirectiveRegistry',
    'FilterRegistry',
    'ValidationClassError',
    'ConfigurationError',
    'DirectiveDependencyError',
    'UnknownFieldError',
    'UnknownProfileError'
]
