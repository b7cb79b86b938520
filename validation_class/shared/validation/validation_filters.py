"""
Built-in parameter filters.

Each filter is a pure ``str -> str`` transform referenced by name from a
field's ``filters`` directive.
"""

import re
from typing import Callable, Dict


def alpha(value: str) -> str:
    """Keep ASCII letters only."""
    return re.sub(r"[^A-Za-z]", "", value)


def alphanumeric(value: str) -> str:
    """Keep ASCII letters and digits only."""
    return re.sub(r"[^A-Za-z0-9]", "", value)


def capitalize(value: str) -> str:
    """Uppercase the first letter and the first letter of each sentence."""
    value = value[:1].upper() + value[1:]
    return re.sub(r"\.\s+([a-z])", lambda m: ". " + m.group(1).upper(), value)


def decimal(value: str) -> str:
    """Keep digits, dots and commas."""
    return re.sub(r"[^0-9.,]", "", value)


def lowercase(value: str) -> str:
    return value.lower()


def numeric(value: str) -> str:
    """Keep digits only."""
    return re.sub(r"\D", "", value)


def strip(value: str) -> str:
    """Collapse whitespace runs to one space and trim both ends."""
    return re.sub(r"\s+", " ", value).strip()


def titlecase(value: str) -> str:
    """Lowercase the value, then uppercase the first letter of each word."""
    return " ".join(word[:1].upper() + word[1:] for word in re.split(r"\s", value.lower()))


def trim(value: str) -> str:
    """Remove leading and trailing whitespace."""
    return value.strip()


def uppercase(value: str) -> str:
    return value.upper()


BUILTIN_FILTERS: Dict[str, Callable[[str], str]] = {
    "alpha": alpha,
    "alphanumeric": alphanumeric,
    "capitalize": capitalize,
    "decimal": decimal,
    "lowercase": lowercase,
    "numeric": numeric,
    "strip": strip,
    "titlecase": titlecase,
    "trim": trim,
    "uppercase": uppercase,
}
