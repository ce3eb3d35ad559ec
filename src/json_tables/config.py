"""Settings for opening a store."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DB_FILE = "db.json"


@dataclass
class StorageConfig:
    """Where the store lives and how it is written."""

    file_path: Path = field(default_factory=lambda: Path(DEFAULT_DB_FILE))
    save_on_push: bool = True
    human_readable: bool = True
