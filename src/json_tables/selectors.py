"""Ways of choosing records in a table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class All:
    """Every record in the table."""


@dataclass(frozen=True)
class ById:
    """The record carrying this id."""

    id: int


@dataclass(frozen=True)
class ByFilter:
    """Records whose fields equal every entry of ``partial``."""

    partial: dict[str, Any] = field(default_factory=dict)


Selector = Union[All, ById, ByFilter]
