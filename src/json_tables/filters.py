"""Partial-record filters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def strict_equals(actual: Any, expected: Any) -> bool:
    """Compare two field values without type coercion.

    Booleans only equal booleans, so ``True`` does not match ``1``. Mappings
    and arrays are compared by identity, not by content.
    """
    if isinstance(expected, (dict, list)) or isinstance(actual, (dict, list)):
        return actual is expected
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and actual == expected
    return actual == expected


class Filter:
    """Predicate matching records whose fields equal every given criterion."""

    def __init__(self, criteria: Mapping[str, Any]) -> None:
        self.criteria = dict(criteria)

    def __call__(self, record: Any) -> bool:
        if not self.criteria:
            return True
        if not isinstance(record, Mapping):
            return False
        for field, expected in self.criteria.items():
            if field not in record or not strict_equals(record[field], expected):
                return False
        return True

    def __repr__(self) -> str:
        return f"Filter({self.criteria!r})"


def compile_filter(partial: Mapping[str, Any]) -> Filter:
    """Build a predicate from a partial record. ``{}`` matches everything."""
    return Filter(partial)
