"""Path-addressed JSON document persisted to a single file."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Callable

from json_tables.errors import DataError, DataPathError, DocumentError
from json_tables.parsing import (
    AppendSegment,
    DataPath,
    IndexSegment,
    KeySegment,
    PathParser,
    format_path,
)

logger = logging.getLogger(__name__)


def merge_values(existing: Any, value: Any) -> Any:
    """Merge ``value`` into ``existing``.

    Arrays concatenate and mappings merge recursively. Arrays nested inside
    merged mappings are replaced rather than concatenated. Anything else is
    replaced by ``value``.
    """
    if isinstance(existing, list) and isinstance(value, list):
        return existing + value
    if isinstance(existing, dict) and isinstance(value, dict):
        return _merge_mappings(existing, value)
    return value


def _merge_mappings(existing: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    merged = dict(existing)
    for key, item in update.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(item, dict):
            merged[key] = _merge_mappings(current, item)
        else:
            merged[key] = item
    return merged


class JsonDocument:
    """A tree of mappings and arrays stored as one JSON file."""

    def __init__(
        self,
        file_path: Path | str,
        save_on_push: bool = True,
        human_readable: bool = False,
    ) -> None:
        """Open (or start) a document.

        Args:
            file_path: JSON file backing the document. Created on first save.
            save_on_push: Write the file after every mutation.
            human_readable: Indent the JSON written to disk.
        """
        self.file_path = Path(file_path)
        self.save_on_push = save_on_push
        self.human_readable = human_readable
        self._parser = PathParser()
        self._data: Any = {}
        self.load()

    def load(self) -> None:
        """Read the file into memory. A missing or blank file is an empty document."""
        if not self.file_path.exists():
            self._data = {}
            return

        try:
            text = self.file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise DocumentError(f"Cannot read database file {self.file_path}: {e}") from e

        if not text.strip():
            self._data = {}
            return

        try:
            self._data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentError(f"Cannot parse database file {self.file_path}: {e}") from e
        logger.debug("Loaded %s", self.file_path)

    def reload(self) -> None:
        """Discard in-memory changes and read the file again."""
        self.load()

    def save(self) -> None:
        """Write the document to disk."""
        indent = 4 if self.human_readable else None
        try:
            text = json.dumps(self._data, indent=indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise DocumentError(f"Document is not JSON serializable: {e}") from e

        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.file_path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise DocumentError(f"Cannot write database file {self.file_path}: {e}") from e
        logger.debug("Saved %s", self.file_path)

    def _check_serializable(self, value: Any) -> None:
        """Reject values that could never be written, before they reach the tree."""
        try:
            json.dumps(value)
        except (TypeError, ValueError) as e:
            raise DocumentError(f"Value is not JSON serializable: {e}") from e

    def _autosave(self) -> None:
        if self.save_on_push:
            self.save()

    # -- reads ---------------------------------------------------------------

    def exists(self, path: str) -> bool:
        """Return True if ``path`` resolves to a value."""
        try:
            self._resolve(self._parser.parse(path))
        except DataPathError:
            return False
        return True

    def get_data(self, path: str) -> Any:
        """Return a copy of the value at ``path``.

        Raises:
            DataPathError: If the path does not resolve.
        """
        return copy.deepcopy(self._resolve(self._parser.parse(path)))

    def count(self, path: str) -> int:
        """Return the number of entries in the array or mapping at ``path``."""
        value = self._resolve(self._parser.parse(path))
        if not isinstance(value, (list, dict)):
            raise DataError(f"The entry at the path ({path}) needs to be either an Object or an Array")
        return len(value)

    def filter(self, path: str, predicate: Callable[[Any], bool]) -> list[Any]:
        """Return the entries of the array or mapping at ``path`` matching ``predicate``."""
        value = self.get_data(path)
        if isinstance(value, list):
            return [entry for entry in value if predicate(entry)]
        if isinstance(value, dict):
            return [entry for entry in value.values() if predicate(entry)]
        raise DataError(f"The entry at the path ({path}) needs to be either an Object or an Array")

    def find(self, path: str, predicate: Callable[[Any], bool]) -> Any | None:
        """Return the first entry at ``path`` matching ``predicate``, or None."""
        for entry in self.filter(path, predicate):
            return entry
        return None

    # -- writes --------------------------------------------------------------

    def push(self, path: str, value: Any, overwrite: bool = True) -> None:
        """Store ``value`` at ``path``.

        Missing intermediate mappings and arrays are created. With
        ``overwrite=False`` the value is merged into what is already there
        (see :func:`merge_values`). A trailing ``[]`` appends to the array.
        """
        segments = self._parser.parse(path)
        self._check_serializable(value)
        value = copy.deepcopy(value)

        if not segments:
            self._data = value if overwrite else merge_values(self._data, value)
        else:
            container = self._container_for(segments)
            self._assign(container, segments, value, overwrite)

        self._autosave()

    def delete(self, path: str) -> None:
        """Remove the key or array element at ``path``."""
        segments = self._parser.parse(path)
        if not segments:
            raise DataPathError("Cannot delete the document root; use reset_data")

        container = self._resolve(segments[:-1])
        last = segments[-1]
        if isinstance(last, KeySegment):
            if not isinstance(container, dict) or last.name not in container:
                raise DataPathError(f"Can't find dataPath: {format_path(segments)}")
            del container[last.name]
        elif isinstance(last, IndexSegment):
            if not isinstance(container, list):
                raise DataError(f"The entry at {format_path(segments[:-1])} is not an array")
            del container[self._normalize_index(container, last.index, segments)]
        else:
            raise DataPathError(f"Cannot delete an append slot: {format_path(segments)}")

        self._autosave()

    def reset_data(self, value: Any) -> None:
        """Replace the whole document with ``value``."""
        self._check_serializable(value)
        self._data = copy.deepcopy(value)
        self._autosave()

    # -- traversal -----------------------------------------------------------

    def _resolve(self, segments: DataPath) -> Any:
        node = self._data
        for position, segment in enumerate(segments):
            walked = segments[: position + 1]
            if isinstance(segment, KeySegment):
                if not isinstance(node, dict) or segment.name not in node:
                    raise DataPathError(f"Can't find dataPath: {format_path(walked)}")
                node = node[segment.name]
            elif isinstance(segment, IndexSegment):
                if not isinstance(node, list):
                    raise DataPathError(f"Can't find dataPath: {format_path(walked)} (not an array)")
                node = node[self._normalize_index(node, segment.index, walked)]
            else:
                raise DataPathError(f"Cannot read an append slot: {format_path(walked)}")
        return node

    def _normalize_index(self, array: list[Any], index: int, segments: DataPath) -> int:
        resolved = index + len(array) if index < 0 else index
        if resolved < 0 or resolved >= len(array):
            raise DataPathError(
                f"Can't find dataPath: {format_path(segments)} "
                f"(index {index} out of range [0, {len(array)}))"
            )
        return resolved

    def _container_for(self, segments: DataPath) -> Any:
        """Walk to the parent of the last segment, creating missing nodes."""
        node = self._data
        for position, segment in enumerate(segments[:-1]):
            following = segments[position + 1]
            empty: Any = {} if isinstance(following, KeySegment) else []
            walked = segments[: position + 1]

            if isinstance(segment, KeySegment):
                if not isinstance(node, dict):
                    raise DataError(f"The entry at {format_path(segments[:position])} is not an object")
                if segment.name not in node:
                    node[segment.name] = empty
                node = node[segment.name]
            elif isinstance(segment, IndexSegment):
                if not isinstance(node, list):
                    raise DataError(f"The entry at {format_path(segments[:position])} is not an array")
                node = node[self._normalize_index(node, segment.index, walked)]
            else:
                if not isinstance(node, list):
                    raise DataError(f"The entry at {format_path(segments[:position])} is not an array")
                node.append(empty)
                node = node[-1]
        return node

    def _assign(self, container: Any, segments: DataPath, value: Any, overwrite: bool) -> None:
        last = segments[-1]
        parent = format_path(segments[:-1])

        if isinstance(last, KeySegment):
            if not isinstance(container, dict):
                raise DataError(f"The entry at {parent} is not an object")
            if overwrite or last.name not in container:
                container[last.name] = value
            else:
                container[last.name] = merge_values(container[last.name], value)
            return

        if not isinstance(container, list):
            raise DataError(f"The entry at {parent} is not an array")

        if isinstance(last, AppendSegment) or last.index == len(container):
            container.append(value)
            return

        index = self._normalize_index(container, last.index, segments)
        if overwrite:
            container[index] = value
        else:
            container[index] = merge_values(container[index], value)
