"""
Parameter set helpers.

Parameters are held as a flat mapping from name to a scalar or a list of
scalars. Nested structures are flattened into path-like names using a
hash delimiter for mapping keys and an array delimiter for list indices,
e.g. ``{"user": {"emails": [{"kind": "home"}]}}`` becomes
``{"user.emails:0.kind": "home"}``. Lists of scalars are kept as lists.
"""

import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

DEFAULT_HASH_DELIMITER = "."
DEFAULT_ARRAY_DELIMITER = ":"


def _is_scalar_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and not any(
        isinstance(item, (dict, list, tuple)) for item in value
    )


def flatten_params(
    params: Optional[Dict[str, Any]],
    hash_delimiter: str = DEFAULT_HASH_DELIMITER,
    array_delimiter: str = DEFAULT_ARRAY_DELIMITER
) -> Dict[str, Any]:
    """
    Flatten a nested parameter structure.

    Args:
        params: Possibly nested mapping
        hash_delimiter: Separator for nested mapping keys
        array_delimiter: Separator for list indices

    Returns:
        Dict[str, Any]: Flat mapping
    """
    flat: Dict[str, Any] = {}

    def walk(prefix: str, value: Any) -> None:
        if isinstance(value, dict):
            for key, item in value.items():
                name = f"{prefix}{hash_delimiter}{key}" if prefix else str(key)
                walk(name, item)
        elif isinstance(value, (list, tuple)) and not _is_scalar_list(value):
            for index, item in enumerate(value):
                walk(f"{prefix}{array_delimiter}{index}", item)
        elif isinstance(value, tuple):
            flat[prefix] = list(value)
        else:
            flat[prefix] = value

    for key, value in (params or {}).items():
        walk(str(key), value)

    return flat


def _split_path(
    name: str,
    hash_delimiter: str,
    array_delimiter: str
) -> List[Any]:
    tokens: List[Any] = []
    index_re = re.compile(re.escape(array_delimiter) + r"(\d+)")
    for part in name.split(hash_delimiter):
        # split() alternates base text and captured indices
        pieces = index_re.split(part)
        if any(pieces[2::2]):
            tokens.append(part)
            continue
        tokens.append(pieces[0])
        tokens.extend(int(index) for index in pieces[1::2])
    return tokens


def unflatten_params(
    params: Dict[str, Any],
    hash_delimiter: str = DEFAULT_HASH_DELIMITER,
    array_delimiter: str = DEFAULT_ARRAY_DELIMITER
) -> Dict[str, Any]:
    """
    Rebuild a nested structure from flat parameter names.

    Args:
        params: Flat mapping
        hash_delimiter: Separator for nested mapping keys
        array_delimiter: Separator for list indices

    Returns:
        Dict[str, Any]: Nested mapping
    """
    root: Dict[str, Any] = {}

    for name, value in params.items():
        tokens = _split_path(name, hash_delimiter, array_delimiter)
        container: Any = root
        for position, token in enumerate(tokens):
            last = position == len(tokens) - 1
            following = None if last else tokens[position + 1]
            empty = [] if isinstance(following, int) else {}
            if isinstance(token, int):
                if not isinstance(container, list):
                    break
                while len(container) <= token:
                    container.append(None)
                if last:
                    container[token] = value
                elif container[token] is None:
                    container[token] = empty
                container = container[token]
            else:
                if not isinstance(container, dict):
                    break
                if last:
                    container[token] = value
                else:
                    container = container.setdefault(token, empty)

    return root


def indexed_name(name: str, index: int, array_delimiter: str = DEFAULT_ARRAY_DELIMITER) -> str:
    """Name of the element ``index`` of the array parameter ``name``."""
    return f"{name}{array_delimiter}{index}"


def parse_indexed_name(
    name: str,
    array_delimiter: str = DEFAULT_ARRAY_DELIMITER
) -> Optional[Tuple[str, int]]:
    """
    Split an indexed parameter name into base name and index.

    Returns:
        Optional[Tuple[str, int]]: ``(base, index)`` or None when the name
        carries no trailing index
    """
    match = re.match(r"^(.+)" + re.escape(array_delimiter) + r"(\d+)$", name)
    if not match:
        return None
    return match.group(1), int(match.group(2))


def collapse_indexed(
    params: Dict[str, Any],
    names: Iterable[str],
    array_delimiter: str = DEFAULT_ARRAY_DELIMITER
) -> Dict[str, Any]:
    """
    Gather ``base:0``, ``base:1``... entries back into a list under ``base``.

    Only bases listed in ``names`` are collapsed; other indexed entries
    are left untouched. Missing indices become None.

    Args:
        params: Flat mapping
        names: Known field names
        array_delimiter: Separator for list indices

    Returns:
        Dict[str, Any]: Mapping with collapsed entries
    """
    known = set(names)
    gathered: Dict[str, Dict[int, Any]] = {}
    result: Dict[str, Any] = {}

    for key, value in params.items():
        parsed = parse_indexed_name(key, array_delimiter)
        if parsed and parsed[0] in known and key not in known and parsed[0] not in params:
            base, index = parsed
            if base not in gathered:
                gathered[base] = {}
                result[base] = None
            gathered[base][index] = value
        else:
            result[key] = value

    for base, items in gathered.items():
        values: List[Any] = [None] * (max(items) + 1)
        for index, value in items.items():
            values[index] = value
        result[base] = values

    return result
