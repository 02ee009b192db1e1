"""Match query expressions to the writable properties of a target class.

Expressions are classified into a closed set of kinds:

* ``RELATION`` - a table (or other FromClause) or ORM mapped class,
  expanded into its columns.
* ``COLUMN`` - a column reference, bound under its key.
* ``ALIAS`` - a labelled expression (``expr.label("name")``) or a named
  ``Bundle``, bound under its label.
* ``UNSUPPORTED`` - anything else; binding fails immediately.

Sources are folded left into one name-to-expression map: a later source
overwrites a name bound by an earlier one. Within a single expanded
relation only the first column matching a name binds it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Bundle, QueryableAttribute
from sqlalchemy.sql.elements import (
    ColumnClause,
    FunctionFilter,
    Grouping,
    Label,
    Over,
    Tuple,
    WithinGroup,
)
from sqlalchemy.sql.expression import FromClause
from sqlalchemy.sql.functions import FunctionElement

from row_shape.core.config import ShapeConfig
from row_shape.core.exceptions import UnsupportedExpressionError
from row_shape.core.introspection import Accessor, writable_properties

logger = logging.getLogger(__name__)

# Constructions that populate a property directly when labelled
_COMPOSITE_TYPES: tuple[type, ...] = (
    FunctionElement,
    Over,
    WithinGroup,
    FunctionFilter,
    Tuple,
    Bundle,
)


class ExpressionKind(Enum):
    """Shapes of expression understood by the binding matcher."""

    RELATION = "relation"
    COLUMN = "column"
    ALIAS = "alias"
    UNSUPPORTED = "unsupported"


def _is_mapped_class(expression: Any) -> bool:
    return isinstance(expression, type) and sa_inspect(expression, raiseerr=False) is not None


def expression_kind(expression: Any) -> ExpressionKind:
    """Classify *expression* into one of the supported kinds."""
    if isinstance(expression, FromClause) or _is_mapped_class(expression):
        return ExpressionKind.RELATION
    if isinstance(expression, (Label, Bundle)):
        return ExpressionKind.ALIAS
    if isinstance(expression, (ColumnClause, QueryableAttribute)):
        return ExpressionKind.COLUMN
    return ExpressionKind.UNSUPPORTED


def _relation_columns(relation: Any) -> list[Any]:
    if isinstance(relation, FromClause):
        return list(relation.columns)
    mapper = sa_inspect(relation)
    return [getattr(relation, prop.key) for prop in mapper.column_attrs]


def _is_composite(expression: Any) -> bool:
    if isinstance(expression, Grouping):
        expression = expression.element
    return isinstance(expression, _COMPOSITE_TYPES)


def match_binding(
    properties: Mapping[str, Accessor],
    expression: Any,
) -> tuple[str, Any] | None:
    """Return ``(property_name, bound_expression)`` for *expression*, or None.

    Raises UnsupportedExpressionError for relations and unsupported shapes.
    """
    kind = expression_kind(expression)

    if kind is ExpressionKind.COLUMN:
        name = expression.key
        if name in properties:
            return name, expression
        return None

    if kind is ExpressionKind.ALIAS:
        name = expression.name
        if name not in properties:
            return None
        if isinstance(expression, Bundle):
            return name, expression
        inner = expression.element
        if _is_composite(inner):
            return name, inner
        return name, expression

    raise UnsupportedExpressionError(expression)


def bind_properties(
    target_type: type,
    *expressions: Any,
    config: ShapeConfig | None = None,
) -> dict[str, Any]:
    """Build a property-name to expression map for *target_type*.

    Pass sources in priority order, lowest first: a later expression that
    matches an already bound property replaces the earlier binding.
    """
    properties = writable_properties(target_type, config)
    bindings: dict[str, Any] = {}

    def _bind(name: str, bound: Any) -> None:
        if name in bindings:
            logger.debug("Rebinding %s.%s", target_type.__name__, name)
        bindings[name] = bound

    for expression in expressions:
        if expression_kind(expression) is ExpressionKind.RELATION:
            seen: set[str] = set()
            for column in _relation_columns(expression):
                match = match_binding(properties, column)
                if match is None or match[0] in seen:
                    continue
                seen.add(match[0])
                _bind(*match)
        else:
            match = match_binding(properties, expression)
            if match is not None:
                _bind(*match)

    logger.debug(
        "Bound %d of %d properties on %s",
        len(bindings),
        len(properties),
        target_type.__name__,
    )
    return bindings
