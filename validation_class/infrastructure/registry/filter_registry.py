"""
Filter registry.

Filters are named ``str -> str`` transforms applied to parameters before
or after validation, depending on the field's ``filtering`` mode.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

FilterFunction = Callable[[str], str]
FilterEntry = Union[str, FilterFunction]


class FilterRegistry:
    """Registry of named filter functions."""

    def __init__(self, filters: Optional[Dict[str, FilterFunction]] = None):
        self._filters: Dict[str, FilterFunction] = dict(filters or {})

    @classmethod
    def default(cls) -> "FilterRegistry":
        """Build a registry holding every built-in filter."""
        from ...shared.validation.validation_filters import BUILTIN_FILTERS

        return cls(BUILTIN_FILTERS)

    def register(self, name: str, function: FilterFunction) -> None:
        """
        Add or replace a filter.

        Args:
            name: Filter name used in ``filters`` directives
            function: Callable receiving and returning a string
        """
        if not callable(function):
            raise TypeError(f"Filter {name} must be callable")
        self._filters[name] = function

    def get(self, name: str) -> Optional[FilterFunction]:
        return self._filters.get(name)

    def names(self) -> List[str]:
        return list(self._filters)

    def is_known(self, entry: Any) -> bool:
        """Whether a ``filters`` entry can be applied."""
        return callable(entry) or (isinstance(entry, str) and entry in self._filters)

    def apply(self, entries: Iterable[FilterEntry], value: Any) -> Any:
        """
        Run filters over a value in declared order.

        Lists are filtered element by element. Non-string values are
        returned untouched.

        Args:
            entries: Filter names or callables
            value: Scalar or list value

        Returns:
            Any: Filtered value
        """
        functions = [entry if callable(entry) else self._filters[entry] for entry in entries]
        if not functions:
            return value

        def run(item: Any) -> Any:
            if not isinstance(item, str):
                return item
            for function in functions:
                item = function(item)
            return item

        if isinstance(value, list):
            return [run(item) for item in value]
        return run(value)

    def copy(self) -> "FilterRegistry":
        return FilterRegistry(self._filters)

    def __contains__(self, name: object) -> bool:
        return name in self._filters


_default_filters: Optional[FilterRegistry] = None


def get_default_filters() -> FilterRegistry:
    """Shared registry of built-in filters."""
    global _default_filters
    if _default_filters is None:
        _default_filters = FilterRegistry.default()
    return _default_filters
