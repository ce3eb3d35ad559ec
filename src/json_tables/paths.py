"""Addresses of tables and records inside the backing document."""

from __future__ import annotations

from json_tables.tables import Table, as_table


def root(table: Table | str) -> str:
    """Address of the table's whole array."""
    return f"/{as_table(table).value}"


def as_sequence(table: Table | str) -> str:
    """Address that appends to the table's array when pushed to."""
    return f"/{as_table(table).value}[]"


def at(table: Table | str, index: int) -> str:
    """Address of the element at ``index`` in the table's array."""
    return f"/{as_table(table).value}[{index}]"
