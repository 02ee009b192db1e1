"""Mapper protocol.

All mappers implement this interface. SQLQuery calls map_many on fetched
rows; rows are SQLAlchemy ``Row`` objects (or anything row-like).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_one(self, row: Any) -> T:
        """Map a single row to a target object."""
        ...

    def map_many(self, rows: Sequence[Any]) -> list[T]:
        """Map multiple rows to a list of target objects."""
        ...
