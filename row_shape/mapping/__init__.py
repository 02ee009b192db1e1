"""Mapping layer - bind expressions to properties and shape result rows."""

from __future__ import annotations

from row_shape.mapping.binding import ExpressionKind, bind_properties, expression_kind
from row_shape.mapping.builder import OneToManyBuilder, one_to_many
from row_shape.mapping.grouping import OneToManyMapper, group_one_to_many
from row_shape.mapping.plan import OneToManyPlan
from row_shape.mapping.projection import BeanProjection, fit_bean

__all__ = [
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
]
