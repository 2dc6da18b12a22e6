"""
Input normalization for cake configurations.

Request bodies arrive loosely typed (numbers as strings, missing keys,
scalars where lists belong). Each field goes through one of the coercion
steps below before the engine sees it; none of them raise.
"""
import math
import re
from typing import Any, Optional

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')
_WHITESPACE = re.compile(r'\s+')


def parse_int(value: Any, default: int = 0) -> int:
    """
    Parse an integer the way a lenient form handler would.
    
    Ints pass through, floats truncate toward zero, strings are read up to
    the first non-digit ("3.7" -> 3, "12 cakes" -> 12). Anything else,
    including booleans, yields `default`.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            try:
                return int(match.group(1))
            except ValueError:
                # longer than the interpreter allows for int() on a str
                return default
    return default


def coerce_count(value: Any) -> int:
    """Cake unit count: parsed integer clamped at zero."""
    return max(0, parse_int(value, 0))


def coerce_layers(value: Any) -> int:
    """Layer count: defaults to 1, never below 1."""
    return max(1, parse_int(value, 1))


def coerce_identifier(value: Any, default: str) -> str:
    """Single option id (shape, icing type); missing/empty -> default."""
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def coerce_list(value: Any) -> tuple[str, ...]:
    """
    Multi-select option ids. Order and duplicates are preserved so a flavor
    listed twice is charged twice. Non-list input is treated as empty.
    """
    if isinstance(value, (set, frozenset)):
        value = sorted(value, key=str)
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item) for item in value if item is not None)


def coerce_template(value: Any) -> Optional[str]:
    """Template selector: None/empty -> None, numbers -> their decimal string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def normalize_key(value: Any) -> str:
    """Lookup key for a rules table entry: "Gold Leaf" -> "gold-leaf"."""
    return _WHITESPACE.sub('-', str(value).strip()).lower()
