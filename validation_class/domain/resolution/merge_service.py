"""
Merge engine.

Pure functions combining directive mappings. Neither function mutates
its inputs, and applying the same merge twice gives the same result as
applying it once.
"""

import copy
from typing import Any, Dict, List

from ...infrastructure.registry.directive_registry import DirectiveRegistry

PROTECTED_KEYS = ("name", "label")


def _append_unique(existing: Any, incoming: Any) -> List[Any]:
    merged: List[Any] = []
    for value in _listify(existing) + _listify(incoming):
        if value not in merged:
            merged.append(value)
    return merged


def _listify(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _is_multi(registry: DirectiveRegistry, key: str) -> bool:
    directive = registry.get(key)
    return bool(directive and directive.multi)


def merge_mixin_into_field(
    field: Dict[str, Any],
    mixin: Dict[str, Any],
    registry: DirectiveRegistry
) -> Dict[str, Any]:
    """
    Merge a mixin's directives into a field's directives.

    Keys the field lacks are copied in. Keys both define are appended and
    de-duplicated (field values first) for multi-valued directives; for
    every other directive the field's own value is kept. A mixin never
    supplies the field's name.

    Args:
        field: Field directives
        mixin: Mixin directives
        registry: Registry used to look up multiplicity

    Returns:
        Dict[str, Any]: New merged mapping
    """
    merged = copy.deepcopy(field)
    for key, value in mixin.items():
        if key == "name":
            continue
        if key not in merged or merged[key] is None:
            merged[key] = copy.deepcopy(value)
        elif _is_multi(registry, key):
            combined = _append_unique(merged[key], copy.deepcopy(value))
            # nothing new: keep the existing shape (scalar stays scalar)
            if combined != _listify(merged[key]):
                merged[key] = combined
    return merged


def merge_field_into_field(
    target: Dict[str, Any],
    source: Dict[str, Any],
    registry: DirectiveRegistry
) -> Dict[str, Any]:
    """
    Merge another field's directives into a field (``mixin_field``).

    Same rules as :func:`merge_mixin_into_field`, restricted to the
    directives usable on mixins. The target's ``name`` and ``label`` are
    always preserved.

    Args:
        target: Receiving field directives
        source: Template field directives
        registry: Registry used to look up usability and multiplicity

    Returns:
        Dict[str, Any]: New merged mapping
    """
    usable = {
        key: value for key, value in source.items()
        if key not in PROTECTED_KEYS
        and registry.get(key) is not None
        and registry.get(key).mixin
    }
    merged = merge_mixin_into_field(target, usable, registry)
    for key in PROTECTED_KEYS:
        if key in target:
            merged[key] = copy.deepcopy(target[key])
        else:
            merged.pop(key, None)
    return merged
