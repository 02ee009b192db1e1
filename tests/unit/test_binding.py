"""Unit tests for the property-binding matcher."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from sqlalchemy import Integer, String, Table, func, literal, tuple_
from sqlalchemy.orm import Bundle, DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.elements import Label

from row_shape.core.exceptions import UnsupportedExpressionError
from row_shape.mapping.binding import ExpressionKind, bind_properties, expression_kind


class Base(DeclarativeBase):
    pass


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    bio: Mapped[str] = mapped_column(String(200))


@dataclass
class UserSummary:
    id: int | None = None
    name: str | None = None
    total: float | None = None
    contact: object | None = None


class ReadOnlyName:
    @property
    def name(self) -> str:
        return "fixed"


class TestExpressionKind:
    def test_table_is_relation(self, users: Table) -> None:
        assert expression_kind(users) is ExpressionKind.RELATION

    def test_mapped_class_is_relation(self) -> None:
        assert expression_kind(Profile) is ExpressionKind.RELATION

    def test_column(self, users: Table) -> None:
        assert expression_kind(users.c.name) is ExpressionKind.COLUMN
        assert expression_kind(Profile.name) is ExpressionKind.COLUMN

    def test_label_and_bundle(self, users: Table) -> None:
        assert expression_kind(users.c.name.label("n")) is ExpressionKind.ALIAS
        assert expression_kind(Bundle("b", users.c.id)) is ExpressionKind.ALIAS

    def test_unsupported(self, users: Table) -> None:
        assert expression_kind(users.c.id + 1) is ExpressionKind.UNSUPPORTED
        assert expression_kind(literal(1)) is ExpressionKind.UNSUPPORTED
        assert expression_kind(UserSummary) is ExpressionKind.UNSUPPORTED


class TestBindColumns:
    def test_column_binds_by_name(self, users: Table) -> None:
        bindings = bind_properties(UserSummary, users.c.name)
        assert list(bindings) == ["name"]
        assert bindings["name"] is users.c.name

    def test_unmatched_column_ignored(self, users: Table) -> None:
        assert bind_properties(UserSummary, users.c.email) == {}

    def test_read_only_property_not_bound(self, users: Table) -> None:
        assert bind_properties(ReadOnlyName, users.c.name) == {}

    def test_orm_attribute(self) -> None:
        bindings = bind_properties(UserSummary, Profile.name)
        assert bindings["name"] is Profile.name


class TestBindAliases:
    def test_aggregate_label_unwrapped(self, orders: Table) -> None:
        labelled = func.sum(orders.c.amount).label("total")
        bindings = bind_properties(UserSummary, labelled)
        assert bindings["total"] is labelled.element
        assert not isinstance(bindings["total"], Label)

    def test_plain_label_kept(self, users: Table) -> None:
        labelled = users.c.email.label("contact")
        bindings = bind_properties(UserSummary, labelled)
        assert bindings["contact"] is labelled

    def test_tuple_label_unwrapped(self, users: Table) -> None:
        labelled = tuple_(users.c.name, users.c.email).label("contact")
        bindings = bind_properties(UserSummary, labelled)
        assert bindings["contact"] is labelled.element

    def test_label_without_property_ignored(self, orders: Table) -> None:
        assert bind_properties(UserSummary, func.max(orders.c.amount).label("peak")) == {}

    def test_bundle_bound_directly(self, users: Table) -> None:
        bundle = Bundle("contact", users.c.name, users.c.email)
        bindings = bind_properties(UserSummary, bundle)
        assert bindings["contact"] is bundle


class TestBindRelations:
    def test_table_expanded(self, users: Table) -> None:
        bindings = bind_properties(UserSummary, users)
        assert list(bindings) == ["id", "name"]
        assert bindings["id"] is users.c.id
        assert bindings["name"] is users.c.name

    def test_mapped_class_expanded(self) -> None:
        bindings = bind_properties(UserSummary, Profile)
        assert set(bindings) == {"id", "name"}
        assert bindings["name"] is Profile.name

    def test_later_source_wins(self, users: Table, orders: Table) -> None:
        bindings = bind_properties(UserSummary, users, orders)
        assert bindings["id"] is orders.c.id
        assert bindings["name"] is users.c.name

    def test_later_single_expression_overwrites(self, users: Table) -> None:
        override = users.c.email.label("name")
        bindings = bind_properties(UserSummary, users, override)
        assert bindings["name"] is override

    def test_first_match_within_one_source(self, users: Table, orders: Table) -> None:
        joined = users.join(orders, users.c.id == orders.c.user_id)
        bindings = bind_properties(UserSummary, joined)
        assert bindings["id"] is users.c.id

    def test_mixed_sources(self, users: Table, orders: Table) -> None:
        total = func.sum(orders.c.amount).label("total")
        bindings = bind_properties(UserSummary, users, total)
        assert set(bindings) == {"id", "name", "total"}


class TestUnsupported:
    def test_arithmetic_expression_rejected(self, users: Table) -> None:
        expression = users.c.id + 1
        with pytest.raises(UnsupportedExpressionError) as exc_info:
            bind_properties(UserSummary, expression)
        assert exc_info.value.expression is expression

    def test_no_partial_result(self, users: Table) -> None:
        with pytest.raises(UnsupportedExpressionError):
            bind_properties(UserSummary, users.c.name, literal("x"), users.c.id)

    def test_plain_value_rejected(self) -> None:
        with pytest.raises(UnsupportedExpressionError):
            bind_properties(UserSummary, "name")
