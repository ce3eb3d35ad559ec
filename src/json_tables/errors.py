"""Exceptions raised by the document engine."""


class StorageError(Exception):
    """Base class for every error raised by json_tables."""


class DocumentError(StorageError):
    """The database file could not be read, decoded or written."""


class DataError(StorageError):
    """The value found at a path does not have the expected shape."""


class DataPathError(DataError, LookupError):
    """A path does not resolve to a value in the document."""
