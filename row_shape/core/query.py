"""Query execution handle.

SQLQuery wraps a SQLAlchemy ``Select`` together with the Session or
Connection that executes it, and optionally applies a mapper to results.
It is single-use: limit/offset mutate the handle in place.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select

from row_shape.core.exceptions import ArgumentMissingError, MultipleRowsError
from row_shape.mapping.protocol import Mapper

T = TypeVar("T")


class SQLQuery(Generic[T]):
    """Synchronous query handle over a Session or Connection.

    Args:
        executor: Anything with ``execute(statement)`` returning a
            SQLAlchemy ``Result`` (``Session`` or ``Connection``).
        statement: The select statement to run.
        mapper: Optional mapper applied to fetched rows.
        scalars: Return the first column of each row instead of rows.
            Cannot be combined with *mapper*.
    """

    def __init__(
        self,
        executor: Any,
        statement: Select[Any],
        *,
        mapper: Mapper[T] | None = None,
        scalars: bool = False,
    ) -> None:
        if executor is None:
            raise ArgumentMissingError("executor")
        if statement is None:
            raise ArgumentMissingError("statement")
        if scalars and mapper is not None:
            raise ValueError("A mapper cannot be combined with scalars=True")
        self._executor = executor
        self._statement = statement
        self._mapper = mapper
        self._scalars = scalars

    @property
    def statement(self) -> Select[Any]:
        return self._statement

    def limit(self, limit: int) -> SQLQuery[T]:
        self._statement = self._statement.limit(limit)
        return self

    def offset(self, offset: int) -> SQLQuery[T]:
        self._statement = self._statement.offset(offset)
        return self

    def fetch(self) -> list[Any]:
        """Fetch all rows, mapped when a mapper is set."""
        result = self._executor.execute(self._statement)
        if self._scalars:
            return list(result.scalars().all())
        rows = list(result.all())
        if self._mapper is not None:
            return self._mapper.map_many(rows)
        return rows

    def fetch_one(self) -> Any:
        """Fetch a single row.

        Returns None if zero rows match.
        Raises MultipleRowsError if more than one row matches.
        """
        rows = self.fetch()
        if len(rows) == 0:
            return None
        if len(rows) > 1:
            raise MultipleRowsError(len(rows))
        return rows[0]

    def fetch_count(self) -> int:
        """Count the rows the statement would return, ignoring limit and offset."""
        counted = self._statement.order_by(None).limit(None).offset(None).subquery()
        total = self._executor.execute(select(func.count()).select_from(counted)).scalar_one()
        return int(total)
