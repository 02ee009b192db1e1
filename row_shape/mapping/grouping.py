"""One-to-many reconstruction from joined rows.

Single-pass O(n) grouping using an identity map keyed by the one-side key.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from row_shape.core.exceptions import ArgumentMissingError
from row_shape.mapping.plan import OneToManyPlan

logger = logging.getLogger(__name__)

ONE = TypeVar("ONE")
MANY = TypeVar("MANY")

# Positional index, row key (entity, column, label or name) or extractor
RowPart = Any


def extract(row: Any, part: RowPart) -> Any:
    """Read one logical column of a joined row."""
    if callable(part) and not isinstance(part, type):
        return part(row)
    if isinstance(part, int):
        return row[part]
    mapping = getattr(row, "_mapping", None)
    if mapping is not None:
        return mapping[part]
    if isinstance(row, Mapping):
        return row[part]
    raise TypeError(f"Cannot read {part!r} from row of type {type(row).__name__}")


def group_one_to_many(
    rows: Iterable[Any] | None,
    one_key_of: Callable[[ONE], Any],
    many_key_of: Callable[[MANY], Any],
    many_list_of: Callable[[ONE], list[MANY] | None],
    set_many_list: Callable[[ONE, list[MANY]], None],
    *,
    one: RowPart = 0,
    many: RowPart = 1,
) -> list[ONE] | None:
    """Collapse joined ``(one, many)`` rows into one-side objects holding their many-side lists.

    The first one-side object seen for a key is canonical; later objects
    with an equal key are discarded. Rows without a one-side object or key
    are skipped. Many-side objects without a key are not appended. Output
    keeps first-seen order, and each many-list keeps row order.

    Returns None when *rows* is None.
    """
    if rows is None:
        return None
    for argument, value in (
        ("one_key_of", one_key_of),
        ("many_key_of", many_key_of),
        ("many_list_of", many_list_of),
        ("set_many_list", set_many_list),
        ("one", one),
        ("many", many),
    ):
        if value is None:
            raise ArgumentMissingError(argument)

    identity: dict[Any, ONE] = {}
    skipped = 0

    for row in rows:
        one_obj = extract(row, one)
        if one_obj is None:
            skipped += 1
            continue
        one_key = one_key_of(one_obj)
        if one_key is None:
            skipped += 1
            continue

        canonical = identity.setdefault(one_key, one_obj)

        many_obj = extract(row, many)
        if many_obj is None or many_key_of(many_obj) is None:
            continue

        items = many_list_of(canonical)
        if items is None:
            set_many_list(canonical, [])
            items = many_list_of(canonical)
        items.append(many_obj)

    logger.debug("Grouped rows into %d one-side objects (%d rows skipped)", len(identity), skipped)
    return list(identity.values())


class OneToManyMapper(Generic[ONE]):
    """Mapper that groups joined rows according to a OneToManyPlan."""

    def __init__(self, plan: OneToManyPlan) -> None:
        self._plan = plan

    @property
    def plan(self) -> OneToManyPlan:
        return self._plan

    def map_one(self, row: Any) -> ONE:
        """Not supported for one-to-many grouping."""
        raise NotImplementedError(
            "OneToManyMapper.map_one is not supported. Use map_many for "
            "grouping joined result sets."
        )

    def map_many(self, rows: Sequence[Any]) -> list[ONE]:
        """Group rows into one-side objects."""
        plan = self._plan
        result = group_one_to_many(
            rows,
            plan.one_key_of,
            plan.many_key_of,
            plan.many_list_of,
            plan.set_many_list,
            one=plan.one,
            many=plan.many,
        )
        return result if result is not None else []
