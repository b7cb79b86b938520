"""
Field and mixin entities.

A field is the resolved rule set for one parameter plus the working
state of the current validation run. A mixin is a named template of
directives merged into fields at resolution time.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .error_entity import ErrorCollection
from ...shared.exceptions.exceptions import ConfigurationError


def as_list(value: Any) -> List[Any]:
    """Wrap a scalar directive argument in a list, leaving lists alone."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def has_value(value: Any) -> bool:
    """Whether a parameter value counts as supplied (not None, "" or [])."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return True


def truthy(value: Any) -> bool:
    """Interpret a directive flag, treating "0", "false", "no" and "off" as false."""
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(value)


@dataclass
class Mixin:
    """Named, reusable set of directives."""

    name: str
    directives: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.directives)


class Field:
    """
    Resolved validation rules for a single parameter.

    Directives are held in a plain mapping and accessed with item syntax
    (``field["required"]``). The ``name`` directive always mirrors the
    field's identity and cannot be reassigned.

    Working state (``value``, ``errors``, ``toggle`` and ``halted``) is
    reset at the start of every validation run.
    """

    def __init__(self, name: str, directives: Optional[Dict[str, Any]] = None):
        """
        Initialize the field.

        Args:
            name: Field name
            directives: Mapping of directive name to argument
        """
        self._name = name
        self.directives: Dict[str, Any] = {
            key: value for key, value in (directives or {}).items() if key != "name"
        }
        self.directives["name"] = name
        self.value: Any = None
        self.errors = ErrorCollection()
        self.toggle: Optional[str] = None
        self.halted = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def label(self) -> str:
        """Display name used in messages: the label, or the name."""
        return self.directives.get("label") or self._name

    def get(self, key: str, default: Any = None) -> Any:
        return self.directives.get(key, default)

    def keys(self) -> List[str]:
        return list(self.directives)

    def reset(self) -> None:
        """Clear per-run working state."""
        self.value = None
        self.errors.clear()
        self.toggle = None
        self.halted = False

    def copy(self, name: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> "Field":
        """
        Copy the field's directives into a new field.

        Args:
            name: Name of the copy, defaults to this field's name
            overrides: Directives replacing the copied ones

        Returns:
            Field: The new field, with fresh working state
        """
        directives = copy.deepcopy(self.directives)
        directives.update(copy.deepcopy(overrides or {}))
        return Field(name or self._name, directives)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.directives)

    def __getitem__(self, key: str) -> Any:
        return self.directives[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if key == "name" and value != self._name:
            raise ConfigurationError(
                f"The name of field {self._name} cannot be changed",
                operation="set_directive",
                field=self._name
            )
        self.directives[key] = value

    def __delitem__(self, key: str) -> None:
        if key == "name":
            raise ConfigurationError(
                f"The name of field {self._name} cannot be removed",
                operation="delete_directive",
                field=self._name
            )
        del self.directives[key]

    def __contains__(self, key: object) -> bool:
        return key in self.directives

    def __iter__(self) -> Iterator[str]:
        return iter(list(self.directives))

    def __repr__(self) -> str:
        return f"Field({self._name!r}, {self.directives!r})"
