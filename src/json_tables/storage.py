"""Table storage on top of a JSON document."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from json_tables import paths
from json_tables.config import StorageConfig
from json_tables.document import JsonDocument
from json_tables.errors import DataError, StorageError
from json_tables.filters import compile_filter
from json_tables.selectors import All, ByFilter, ById, Selector
from json_tables.tables import Table, as_table

logger = logging.getLogger(__name__)

# Faults of the document engine that public operations turn into False/None.
ENGINE_ERRORS = (StorageError, SyntaxError, OSError)


def _id_of(record: Any) -> Any:
    return record.get("id") if isinstance(record, Mapping) else None


def _with_id(record_id: int, value: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``value`` as a record carrying ``record_id`` as its first field."""
    record: dict[str, Any] = {"id": record_id}
    record.update((key, item) for key, item in value.items() if key != "id")
    return record


def _without_id(value: Mapping[str, Any]) -> dict[str, Any]:
    return {key: item for key, item in value.items() if key != "id"}


class JsonStorage:
    """Records in a fixed set of tables, kept in one JSON document.

    Every record carries an integer ``id`` unique within its table. Reads
    return None and writes return False when the document cannot serve them;
    engine exceptions never reach the caller.
    """

    def __init__(self, document: JsonDocument) -> None:
        """Initialize the storage and make sure every table exists.

        Args:
            document: Backing document. Owned by this storage from now on.
        """
        self.document = document
        self.initialize()

    def initialize(self) -> None:
        """Create every missing table as an empty array. Safe to call repeatedly."""
        for table in Table:
            path = paths.root(table)
            if not self.document.exists(path):
                self.document.push(path, [])

    def reset(self) -> None:
        """Empty the document and re-create every table."""
        self.document.reset_data({})
        self.initialize()

    def _read_table(self, table: Table) -> list[Any]:
        records = self.document.get_data(paths.root(table))
        if not isinstance(records, list):
            raise DataError(f"Table '{table.value}' is not an array")
        return records

    @staticmethod
    def _next_id(records: list[Any]) -> int:
        """Return the table length, or one past the highest id if that is larger."""
        next_id = len(records)
        for record in records:
            record_id = _id_of(record)
            if isinstance(record_id, int) and not isinstance(record_id, bool) and record_id >= next_id:
                next_id = record_id + 1
        return next_id

    @staticmethod
    def _position_of(records: list[Any], record_id: int) -> int | None:
        """Return the array position of the record carrying ``record_id``.

        Until a delete happens ids equal positions, so that slot is checked
        first.
        """
        if 0 <= record_id < len(records) and _id_of(records[record_id]) == record_id:
            return record_id
        for position, record in enumerate(records):
            if _id_of(record) == record_id:
                return position
        return None

    # -- insert --------------------------------------------------------------

    def insert(self, table: Table | str, value: Mapping[str, Any]) -> int | None:
        """Insert a record and return its id, or None if it could not be written."""
        table = as_table(table)
        try:
            record_id = self._next_id(self._read_table(table))
            self.document.push(paths.as_sequence(table), _with_id(record_id, value))
        except ENGINE_ERRORS as e:
            logger.debug("Insert into '%s' failed: %s", table.value, e)
            return None
        return record_id

    def insert_many(self, table: Table | str, values: Sequence[Mapping[str, Any]]) -> bool:
        """Insert records with consecutive ids in input order, in one write."""
        table = as_table(table)
        try:
            first_id = self._next_id(self._read_table(table))
            batch = [_with_id(first_id + offset, value) for offset, value in enumerate(values)]
            self.document.push(paths.root(table), batch, overwrite=False)
        except ENGINE_ERRORS as e:
            logger.debug("Batch insert into '%s' failed: %s", table.value, e)
            return False
        return True

    # -- select --------------------------------------------------------------

    def select_all(self, table: Table | str) -> list[dict[str, Any]] | None:
        """Return every record of the table, or None if it cannot be read."""
        table = as_table(table)
        try:
            return self._read_table(table)
        except ENGINE_ERRORS as e:
            logger.debug("Select from '%s' failed: %s", table.value, e)
            return None

    def select_by_id(self, table: Table | str, record_id: int) -> dict[str, Any] | None:
        """Return the record carrying ``record_id``, or None if there is none."""
        table = as_table(table)
        try:
            records = self._read_table(table)
        except ENGINE_ERRORS as e:
            logger.debug("Select from '%s' failed: %s", table.value, e)
            return None

        position = self._position_of(records, record_id)
        if position is None:
            logger.debug("No record %s in '%s'", record_id, table.value)
            return None
        return records[position]

    def select_where(self, table: Table | str, partial: Mapping[str, Any]) -> list[dict[str, Any]] | None:
        """Return the records matching ``partial``; None if the table cannot be read."""
        table = as_table(table)
        try:
            return self.document.filter(paths.root(table), compile_filter(partial))
        except ENGINE_ERRORS as e:
            logger.debug("Select from '%s' failed: %s", table.value, e)
            return None

    def select(self, table: Table | str, selector: Selector | None = None) -> Any:
        """Dispatch to the select operation matching ``selector``."""
        if selector is None or isinstance(selector, All):
            return self.select_all(table)
        if isinstance(selector, ById):
            return self.select_by_id(table, selector.id)
        if isinstance(selector, ByFilter):
            return self.select_where(table, selector.partial)
        raise TypeError(f"Unsupported selector: {selector!r}")

    # -- update --------------------------------------------------------------

    def update_by_id(self, table: Table | str, record_id: int, value: Mapping[str, Any]) -> bool:
        """Replace the record carrying ``record_id`` with ``value``.

        Fields missing from ``value`` are dropped; the record keeps its id.
        """
        table = as_table(table)
        try:
            position = self._position_of(self._read_table(table), record_id)
            if position is None:
                logger.debug("No record %s in '%s' to update", record_id, table.value)
                return False
            self.document.push(paths.at(table, position), _with_id(record_id, value))
        except ENGINE_ERRORS as e:
            logger.debug("Update of '%s' failed: %s", table.value, e)
            return False
        return True

    def update_where(
        self, table: Table | str, partial: Mapping[str, Any], value: Mapping[str, Any]
    ) -> bool:
        """Merge ``value`` into every record matching ``partial``.

        Fields not named in ``value`` survive. Matching nothing is a successful
        no-op; False means the table could not be read or written.
        """
        table = as_table(table)
        predicate = compile_filter(partial)
        changes = _without_id(value)
        try:
            records = self._read_table(table)
            for position, record in enumerate(records):
                if predicate(record):
                    self.document.push(paths.at(table, position), changes, overwrite=False)
        except ENGINE_ERRORS as e:
            logger.debug("Update of '%s' failed: %s", table.value, e)
            return False
        return True

    def update(self, table: Table | str, selector: Selector, value: Mapping[str, Any]) -> bool:
        """Dispatch to the update operation matching ``selector``.

        ``ById`` replaces the record; ``ByFilter`` and ``All`` merge into it.
        """
        if isinstance(selector, ById):
            return self.update_by_id(table, selector.id, value)
        if isinstance(selector, ByFilter):
            return self.update_where(table, selector.partial, value)
        if isinstance(selector, All):
            return self.update_where(table, {}, value)
        raise TypeError(f"Unsupported selector: {selector!r}")

    # -- delete --------------------------------------------------------------

    def delete_where(self, table: Table | str, partial: Mapping[str, Any]) -> bool:
        """Remove every record matching ``partial``.

        Surviving records keep their ids. Matching nothing is a successful
        no-op; False means the table could not be read or written.
        """
        table = as_table(table)
        predicate = compile_filter(partial)
        try:
            records = self._read_table(table)
            remaining = [record for record in records if not predicate(record)]
            self.document.push(paths.root(table), remaining)
        except ENGINE_ERRORS as e:
            logger.debug("Delete from '%s' failed: %s", table.value, e)
            return False
        return True

    def delete_by_id(self, table: Table | str, record_id: int) -> bool:
        """Remove the record carrying ``record_id``. A missing id is a no-op."""
        table = as_table(table)
        try:
            position = self._position_of(self._read_table(table), record_id)
            if position is not None:
                self.document.delete(paths.at(table, position))
        except ENGINE_ERRORS as e:
            logger.debug("Delete from '%s' failed: %s", table.value, e)
            return False
        return True

    def delete(self, table: Table | str, selector: Selector) -> bool:
        """Dispatch to the delete operation matching ``selector``."""
        if isinstance(selector, ById):
            return self.delete_by_id(table, selector.id)
        if isinstance(selector, ByFilter):
            return self.delete_where(table, selector.partial)
        if isinstance(selector, All):
            return self.delete_where(table, {})
        raise TypeError(f"Unsupported selector: {selector!r}")

    # -- lifecycle -----------------------------------------------------------

    def close(self) -> None:
        """Flush the document to disk."""
        self.document.save()

    def __enter__(self) -> JsonStorage:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def open_storage(config: StorageConfig | None = None) -> JsonStorage:
    """Open the store described by ``config`` (defaults to ``db.json``)."""
    if config is None:
        config = StorageConfig()
    document = JsonDocument(
        config.file_path,
        save_on_push=config.save_on_push,
        human_readable=config.human_readable,
    )
    return JsonStorage(document)
