"""JSON Tables - Tournament tables stored in a single JSON document."""

from json_tables.config import StorageConfig
from json_tables.document import JsonDocument
from json_tables.errors import DataError, DataPathError, DocumentError, StorageError
from json_tables.filters import Filter, compile_filter
from json_tables.selectors import All, ByFilter, ById, Selector
from json_tables.storage import JsonStorage, open_storage
from json_tables.tables import Table

__all__ = [
    # Main API
    "JsonStorage",
    "open_storage",
    "StorageConfig",
    "Table",
    # Selectors
    "All",
    "ById",
    "ByFilter",
    "Selector",
    "Filter",
    "compile_filter",
    # Document engine
    "JsonDocument",
    # Errors
    "StorageError",
    "DocumentError",
    "DataError",
    "DataPathError",
]

__version__ = "0.1.0"
