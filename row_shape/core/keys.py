"""Primary-key equality predicates.

Builds ``column == value`` predicates for single-column keys and
``a == x AND b == y`` predicates for composite keys, reading composite key
values from a key-bearing object through its accessor table.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, and_
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.sql.expression import FromClause
from sqlalchemy.sql.schema import Column

from row_shape.core.config import ShapeConfig
from row_shape.core.exceptions import ArgumentMissingError, MissingKeyError
from row_shape.core.introspection import get_property


def _relation_name(relation: Any) -> str:
    return getattr(relation, "name", None) or getattr(relation, "__name__", None) or repr(relation)


def _as_from_clause(relation: Any) -> FromClause:
    """Resolve a Table, alias or ORM mapped class to its FromClause."""
    if relation is None:
        raise ArgumentMissingError("relation")
    if isinstance(relation, FromClause):
        return relation
    mapper = sa_inspect(relation, raiseerr=False)
    selectable = getattr(mapper, "selectable", None)
    if isinstance(selectable, FromClause):
        return selectable
    raise TypeError(f"Cannot resolve a relation from {relation!r}")


def key_columns(relation: Any) -> list[Column[Any]]:
    """Return the primary key columns of *relation* in declared order."""
    from_clause = _as_from_clause(relation)
    columns = list(from_clause.primary_key.columns)
    if not columns:
        raise MissingKeyError(_relation_name(from_clause))
    return columns


def key_equals(relation: Any, key: Any, config: ShapeConfig | None = None) -> ColumnElement[bool]:
    """Build a predicate matching the record of *relation* identified by *key*.

    A single-column key compares against *key* directly. A composite key
    reads one value per key column from *key* (see ``bean_key_equals``).
    """
    columns = _key_attributes(relation, key_columns(relation))
    if len(columns) == 1:
        return columns[0] == key
    return bean_key_equals(columns, key, config)


def _key_attributes(relation: Any, columns: list[Column[Any]]) -> list[Any]:
    """Swap key columns of an ORM entity for its mapped attributes.

    Composite key values are then read under attribute names, which may
    differ from the database column names.
    """
    if isinstance(relation, FromClause):
        return list(columns)
    insp = sa_inspect(relation, raiseerr=False)
    mapper = getattr(insp, "mapper", None)
    if mapper is None:
        return list(columns)
    return [
        getattr(insp.entity, mapper.get_property_by_column(column).key)
        for column in mapper.primary_key
    ]


def bean_key_equals(
    columns: Sequence[ColumnElement[Any]],
    bean: Any,
    config: ShapeConfig | None = None,
) -> ColumnElement[bool]:
    """AND together ``column == bean.<column key>`` for each column, in order.

    *columns* may also be ORM mapped attributes, whose key is the
    attribute name.
    """
    if bean is None:
        raise ArgumentMissingError("bean")
    if not columns:
        raise ArgumentMissingError("columns")

    first, *rest = [column == get_property(bean, column.key, config) for column in columns]
    return and_(first, *rest)
