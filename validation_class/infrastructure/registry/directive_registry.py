"""
Directive registry.

This module provides the catalog of directives known to an engine and
computes the dependency-respecting order in which their hooks run.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ...core.interfaces.directive_interface import Directive, ValidationPhase
from ...shared.exceptions.exceptions import DirectiveDependencyError
from ...shared.logging.structured_logger import get_logger

logger = get_logger(__name__)


class DirectiveRegistry:
    """
    Registry of named directives.

    Registration order is remembered and used to break ties when sorting.
    The dependency graph is checked on every registration, so a registry
    never holds a cycle.
    """

    def __init__(self, directives: Optional[Iterable[Directive]] = None):
        """
        Initialize the registry.

        Args:
            directives: Optional directives to register up front
        """
        self._directives: Dict[str, Directive] = {}
        self._order_cache: Dict[Tuple[ValidationPhase, Tuple[str, ...]], List[str]] = {}
        for directive in directives or []:
            self._directives[directive.name] = directive
        self._check_graph()

    @classmethod
    def default(cls) -> "DirectiveRegistry":
        """Build a registry holding every built-in directive."""
        from ...shared.validation.validation_rules import BUILTIN_DIRECTIVES

        return cls(directive_class() for directive_class in BUILTIN_DIRECTIVES)

    def register(self, directive: Directive) -> None:
        """
        Add or replace a directive.

        Args:
            directive: Directive to register

        Raises:
            DirectiveDependencyError: If the directive introduces a cycle,
                in which case the registry is left unchanged
        """
        if not directive.name:
            raise DirectiveDependencyError(
                f"Directive {directive!r} has no name",
                operation="register"
            )

        previous = self._directives.get(directive.name)
        self._directives[directive.name] = directive
        self._order_cache.clear()
        try:
            self._check_graph()
        except DirectiveDependencyError:
            if previous is None:
                del self._directives[directive.name]
            else:
                self._directives[directive.name] = previous
            self._order_cache.clear()
            raise

        logger.debug(f"Registered directive {directive.name}", replaced=previous is not None)

    def get(self, name: str) -> Optional[Directive]:
        return self._directives.get(name)

    def names(self) -> List[str]:
        """Directive names in registration order."""
        return list(self._directives)

    def mixin_directives(self) -> List[str]:
        """Names of directives usable on mixins."""
        return [name for name, d in self._directives.items() if d.mixin]

    def field_directives(self) -> List[str]:
        """Names of directives usable on fields."""
        return [name for name, d in self._directives.items() if d.field]

    def ordered(self, phase: ValidationPhase, candidate_names: Iterable[str]) -> List[str]:
        """
        Sort names so every directive follows its dependencies.

        Only dependencies that are themselves among the candidates are
        considered. Ties are broken by registration order, and names the
        registry does not know come last in their given order.

        Args:
            phase: Phase whose dependency lists apply
            candidate_names: Names to sort

        Returns:
            List[str]: Sorted names, duplicates removed

        Raises:
            DirectiveDependencyError: If the candidates' dependencies form a cycle
        """
        position = {name: index for index, name in enumerate(self._directives)}
        unique = list(dict.fromkeys(candidate_names))
        candidates = tuple(sorted(unique, key=lambda name: position.get(name, len(position))))
        key = (phase, candidates)
        cached = self._order_cache.get(key)
        if cached is not None:
            return list(cached)

        present = set(candidates)
        done: set = set()
        result: List[str] = []

        def visit(name: str, path: List[str]) -> None:
            if name in done:
                return
            if name in path:
                cycle = path[path.index(name):] + [name]
                raise DirectiveDependencyError(
                    f"Circular {phase.value} dependency detected: {' -> '.join(cycle)}",
                    operation="ordered",
                    phase=phase.value,
                    cycle=cycle
                )
            directive = self._directives.get(name)
            if directive is not None:
                for dependency in directive.dependencies_for(phase):
                    if dependency in present:
                        visit(dependency, path + [name])
            done.add(name)
            result.append(name)

        for name in candidates:
            visit(name, [])

        self._order_cache[key] = result
        return list(result)

    def copy(self) -> "DirectiveRegistry":
        """Independent registry holding the same directive instances."""
        return DirectiveRegistry(self._directives.values())

    def _check_graph(self) -> None:
        for phase in ValidationPhase:
            self.ordered(phase, self._directives)

    def __contains__(self, name: object) -> bool:
        return name in self._directives

    def __iter__(self) -> Iterator[Directive]:
        return iter(list(self._directives.values()))

    def __len__(self) -> int:
        return len(self._directives)


_default_registry: Optional[DirectiveRegistry] = None


def get_default_registry() -> DirectiveRegistry:
    """
    Shared registry of built-in directives.

    Engines treat it as read-only and copy it before registering their
    own directives.
    """
    global _default_registry
    if _default_registry is None:
        _default_registry = DirectiveRegistry.default()
    return _default_registry
