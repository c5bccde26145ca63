"""
Filter matching for the reference backend.

A filter maps field names to either a literal (equality) or a nested filter
(recursive match against a nested mapping). Keys are ANDed; the empty filter
matches everything. There are no operators, ranges or patterns: backends that
need them implement their own query language.

    >>> matches({"x": 1, "y": {"z": 2}}, {"y": {"z": 2}})
    True
    >>> matches({"x": 1, "y": {"z": 3}}, {"x": 1, "y": {"z": 2}})
    False
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .types import MISSING


def _strict_equal(left: Any, right: Any) -> bool:
    # bool is an int subclass; True must not equal 1 here, at any depth
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return (
            type(left) is type(right)
            and len(left) == len(right)
            and all(_strict_equal(a, b) for a, b in zip(left, right))
        )
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(_strict_equal(left[k], right[k]) for k in left)
    return left == right


def matches(record: Mapping[str, Any], query: Mapping[str, Any] | None) -> bool:
    """Return True when ``record`` satisfies every key of ``query``."""
    if not query:
        return True

    for key, expected in query.items():
        actual = record.get(key, MISSING)
        if isinstance(expected, Mapping) and isinstance(actual, Mapping):
            if not matches(actual, expected):
                return False
        elif actual is MISSING or not _strict_equal(actual, expected):
            return False

    return True


__all__ = [
    "matches",
]
