from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

"""Column resolution against the header alias table."""

__all__ = [
    "is_blank",
    "resolve",
    "recognised_headers",
]


def is_blank(value: Any) -> bool:
    """True for None, NaN and strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def resolve(row: Mapping[str, Any], aliases: Iterable[str]) -> Any | None:
    """Return the value of the first alias present in ``row`` with a non-blank value.

    Aliases are matched as exact keys, in order. ``None`` when nothing matches;
    absence is for the caller to judge.
    """
    for alias in aliases:
        value = row.get(alias)
        if not is_blank(value):
            return value
    return None


def recognised_headers(alias_table: Mapping[str, Iterable[str]]) -> frozenset[str]:
    """Every header named anywhere in ``alias_table``."""
    return frozenset(h for headers in alias_table.values() for h in headers)
