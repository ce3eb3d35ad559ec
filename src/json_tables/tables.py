"""The fixed set of tables held in a store."""

from __future__ import annotations

from enum import Enum


class Table(Enum):
    """Tables of a tournament store. Not extensible at runtime."""

    PARTICIPANT = "participant"
    STAGE = "stage"
    GROUP = "group"
    ROUND = "round"
    MATCH = "match"
    MATCH_GAME = "match_game"


# Mapping from table name strings to Table enum values
TABLE_NAMES: dict[str, Table] = {t.value: t for t in Table}


def as_table(table: Table | str) -> Table:
    """Coerce a table name to a Table.

    Raises:
        ValueError: If the name is not one of the known tables.
    """
    if isinstance(table, Table):
        return table
    return Table(table)
