"""
Validation run entity.

Working state owned by a single ``validate()`` call: the fields still to
visit, the clones created by multi-value expansion, and scratch space
for directives that need to undo their own changes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set, Tuple

from .field_entity import Field


@dataclass
class ValidationRun:
    """State of one validation call."""

    targets: List[str] = field(default_factory=list)
    replaced: Set[str] = field(default_factory=set)
    clones: Dict[str, Tuple[str, int]] = field(default_factory=dict)
    retired: Dict[str, Field] = field(default_factory=dict)
    scratch: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def replace(self, name: str, replacements: List[str]) -> None:
        """
        Queue replacements right after ``name`` and mark it as replaced.

        A replaced field still runs its after-validation hooks but none of
        its checks.
        """
        position = self.targets.index(name) + 1 if name in self.targets else len(self.targets)
        self.targets[position:position] = list(replacements)
        self.replaced.add(name)

    def is_replaced(self, name: str) -> bool:
        return name in self.replaced
