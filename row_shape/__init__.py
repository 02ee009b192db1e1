"""RowShape - shape SQLAlchemy query inputs and results.

Pagination, primary-key predicates, property projections and
one-to-many grouping of joined rows.
"""

from __future__ import annotations

from row_shape.core.config import DEFAULT_CONFIG, ShapeConfig
from row_shape.core.exceptions import (
    AccessorError,
    AccessorInvocationError,
    ArgumentMissingError,
    ColumnMismatchError,
    KeyResolutionError,
    MappingError,
    MissingAccessorError,
    MissingKeyError,
    MultipleRowsError,
    PagingError,
    PlanCompilationError,
    RowShapeError,
    UnsupportedExpressionError,
)
from row_shape.core.introspection import (
    Accessor,
    accessor_table,
    find_getter,
    find_setter,
    get_property,
    set_property,
    writable_properties,
)
from row_shape.core.keys import bean_key_equals, key_columns, key_equals
from row_shape.core.query import SQLQuery
from row_shape.mapping import (
    BeanProjection,
    ExpressionKind,
    OneToManyBuilder,
    OneToManyMapper,
    OneToManyPlan,
    bind_properties,
    expression_kind,
    fit_bean,
    group_one_to_many,
    one_to_many,
)
from row_shape.paging import Page, Pager, paginate
from row_shape.repository import Repository

__all__ = [
    # Config
    "ShapeConfig",
    "DEFAULT_CONFIG",
    # Query
    "SQLQuery",
    # Paging
    "Pager",
    "Page",
    "paginate",
    # Keys
    "key_columns",
    "key_equals",
    "bean_key_equals",
    # Introspection
    "Accessor",
    "accessor_table",
    "writable_properties",
    "find_getter",
    "find_setter",
    "get_property",
    "set_property",
    # Mapping
    "bind_properties",
    "expression_kind",
    "ExpressionKind",
    "BeanProjection",
    "fit_bean",
    "group_one_to_many",
    "OneToManyMapper",
    "OneToManyPlan",
    "OneToManyBuilder",
    "one_to_many",
    # Repository
    "Repository",
    # Exceptions
    "RowShapeError",
    "ArgumentMissingError",
    "PagingError",
    "KeyResolutionError",
    "MissingKeyError",
    "AccessorError",
    "MissingAccessorError",
    "AccessorInvocationError",
    "MappingError",
    "UnsupportedExpressionError",
    "ColumnMismatchError",
    "PlanCompilationError",
    "MultipleRowsError",
]
