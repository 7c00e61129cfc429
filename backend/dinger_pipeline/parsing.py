"""
Defensive parsers for Stats API payloads.

Upstream documents routinely omit nested objects or carry numbers as strings
(".312", "-.--"). Nothing in here raises on bad input.
"""

from __future__ import annotations

import math
from typing import Any, Optional

INT64_LIMIT = 2**63


def dig(payload: Any, *keys: Any, default: Any = None) -> Any:
    """Walk nested dicts/lists, returning `default` as soon as a step is missing."""
    node = payload
    for key in keys:
        if isinstance(node, dict):
            node = node.get(key)
        elif isinstance(node, list) and isinstance(key, int):
            node = node[key] if -len(node) <= key < len(node) else None
        else:
            return default
        if node is None:
            return default
    return node


def _finite(val: Any) -> Optional[float]:
    """Float value of `val`, or None when missing, unparseable or not finite."""
    try:
        if val is None or val == "":
            return None
        number = float(val)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def safe_int(val: Any) -> int:
    number = _finite(val)
    if number is None or abs(number) >= INT64_LIMIT:
        return 0
    return int(number)


def safe_float(val: Any) -> float:
    number = _finite(val)
    return number if number is not None else 0.0


def optional_float(val: Any, places: int | None = None) -> Optional[float]:
    """Like safe_float, but keeps "missing" distinguishable from zero."""
    number = _finite(val)
    if number is None:
        return None
    return round(number, places) if places is not None else number


def optional_int(val: Any) -> Optional[int]:
    number = _finite(val)
    # Stored in 64-bit INTEGER columns.
    if number is None or abs(number) >= INT64_LIMIT:
        return None
    return int(round(number))


def fixed(val: Any, places: int) -> str:
    """Format a stat for display with a fixed number of decimals ("0.312", "12.50")."""
    return f"{safe_float(val):.{places}f}"
