"""Bean projection over a binding map.

Turns a property-name to expression map into a select list whose columns
are labelled by property name, and maps result rows back into instances of
the target class. Supports dataclasses, Pydantic models, and plain classes.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, select
from sqlalchemy.orm import Bundle
from sqlalchemy.sql.elements import Label

from row_shape.core.config import ShapeConfig
from row_shape.core.exceptions import AccessorError, ColumnMismatchError
from row_shape.core.introspection import set_property
from row_shape.mapping.binding import bind_properties

T = TypeVar("T")


def _row_mapping(row: Any) -> Mapping[str, Any]:
    mapping = getattr(row, "_mapping", None)
    if mapping is not None:
        return mapping
    return row


def _constructor_names(target_class: type) -> frozenset[str] | None:
    """Keyword names the constructor accepts, or None when it takes any."""
    try:
        sig = inspect.signature(target_class)
    except (ValueError, TypeError):
        return None
    names: set[str] = set()
    for name, param in sig.parameters.items():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            return None
        if param.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY):
            names.add(name)
    return frozenset(names)


class BeanProjection(Generic[T]):
    """Projection of bound expressions onto *target_class*.

    Construction order:
    1. Pydantic BaseModel -> model_validate(values)
    2. dataclass or plain class -> target_class(**init_values), then each
       remaining value through its setter (``set_<name>``, property setter)

    Args:
        target_class: The class to construct from row data.
        bindings: Property name to bound expression.
        config: Accessor naming used for setter lookup.
    """

    def __init__(
        self,
        target_class: type[T],
        bindings: Mapping[str, Any],
        config: ShapeConfig | None = None,
    ) -> None:
        self._target_class = target_class
        self._bindings = dict(bindings)
        self._config = config
        self._is_pydantic = issubclass(target_class, BaseModel)
        self._init_names = None if self._is_pydantic else _constructor_names(target_class)

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    @property
    def bindings(self) -> dict[str, Any]:
        return dict(self._bindings)

    @property
    def columns(self) -> list[Any]:
        """Bound expressions, each labelled with its property name."""
        columns: list[Any] = []
        for name, expression in self._bindings.items():
            if isinstance(expression, Bundle):
                columns.append(expression if expression.name == name else expression.label(name))
            elif isinstance(expression, Label) and expression.name == name:
                columns.append(expression)
            else:
                columns.append(expression.label(name))
        return columns

    def select(self) -> Select[Any]:
        """Start a select statement over the projected columns."""
        return select(*self.columns)

    def map_one(self, row: Any) -> T:
        """Map a single row to a target_class instance."""
        mapping = _row_mapping(row)
        values = {name: mapping[name] for name in self._bindings if name in mapping}

        if self._is_pydantic:
            try:
                return self._target_class.model_validate(values)  # type: ignore[attr-defined, no-any-return]
            except Exception as e:
                raise ColumnMismatchError(self._target_class.__name__, [str(e)]) from e

        if self._init_names is None:
            init_values, set_values = values, {}
        else:
            init_values = {k: v for k, v in values.items() if k in self._init_names}
            set_values = {k: v for k, v in values.items() if k not in self._init_names}

        try:
            obj = self._target_class(**init_values)
        except TypeError as e:
            raise ColumnMismatchError(self._target_class.__name__, [str(e)]) from e

        for name, value in set_values.items():
            try:
                set_property(obj, name, value, self._config)
            except AccessorError as e:
                raise ColumnMismatchError(self._target_class.__name__, [str(e)]) from e
        return obj

    def map_many(self, rows: Sequence[Any]) -> list[T]:
        """Map all rows via map_one."""
        return [self.map_one(row) for row in rows]


def fit_bean(
    target_class: type[T],
    *expressions: Any,
    config: ShapeConfig | None = None,
) -> BeanProjection[T]:
    """Project the *expressions* matching writable properties of *target_class*."""
    return BeanProjection(
        target_class, bind_properties(target_class, *expressions, config=config), config
    )
