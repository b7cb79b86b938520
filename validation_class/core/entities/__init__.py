"""
Core entities module for validation_class.

This module provides access to the entity classes shared by the
resolver, the expander and the validation engine.
"""

from .error_entity import ErrorCollection
from .field_entity import Field, Mixin, as_list, has_value, truthy
from .run_entity import ValidationRun
from .params_entity import (
    DEFAULT_ARRAY_DELIMITER,
    DEFAULT_HASH_DELIMITER,
    collapse_indexed,
    flatten_params,
    indexed_name,
    parse_indexed_name,
    unflatten_params
)

__all__ = [
    'ErrorCollection',
    'Field',
    'Mixin',
    'as_list',
    'has_value',
    'truthy',
    'ValidationRun',
    'DEFAULT_ARRAY_DELIMITER',
    'DEFAULT_HASH_DELIMITER',
    'collapse_indexed',
    'flatten_params',
    'indexed_name',
    'parse_indexed_name',
    'unflatten_params'
]
