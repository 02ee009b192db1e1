"""Unit tests for BeanProjection and fit_bean."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import BaseModel
from sqlalchemy import Table, func
from sqlalchemy.orm import Bundle

from row_shape.core.exceptions import ColumnMismatchError
from row_shape.mapping.projection import BeanProjection, fit_bean


@dataclass
class UserTotal:
    id: int
    name: str
    total: float | None = None


class UserModel(BaseModel):
    id: int
    name: str


class UserBean:
    """Writable only through setter methods."""

    def __init__(self) -> None:
        self._id: int | None = None
        self._name: str | None = None

    def get_id(self) -> int | None:
        return self._id

    def set_id(self, value: int) -> None:
        self._id = value

    def get_name(self) -> str | None:
        return self._name

    def set_name(self, value: str) -> None:
        self._name = value


class UserDto:
    def __init__(self, id: int, name: str) -> None:
        self.id = id
        self.name = name


class ContactCard:
    """Constructor argument plus a property setter."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._email = ""

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        if value is None:
            raise ValueError("email required")
        self._email = value


class TestBeanProjection:
    def test_columns_labelled_by_property(self, users: Table, orders: Table) -> None:
        projection = fit_bean(UserTotal, users, func.sum(orders.c.amount).label("total"))
        assert [c.name for c in projection.columns] == ["id", "name", "total"]

    def test_existing_label_reused(self, users: Table) -> None:
        labelled = users.c.email.label("name")
        projection = BeanProjection(UserTotal, {"name": labelled})
        assert len(projection.columns) == 1
        assert projection.columns[0] is labelled

    def test_bundle_relabelled(self, users: Table) -> None:
        bundle = Bundle("contact", users.c.email)
        projection = BeanProjection(UserTotal, {"name": bundle})
        assert projection.columns[0].name == "name"

    def test_select_uses_columns(self, users: Table) -> None:
        projection = fit_bean(UserTotal, users)
        statement = projection.select()
        assert [c.name for c in statement.selected_columns] == ["id", "name"]

    def test_bindings_copied(self, users: Table) -> None:
        projection = fit_bean(UserTotal, users)
        projection.bindings.clear()
        assert set(projection.bindings) == {"id", "name"}

    def test_map_one_dataclass(self, users: Table) -> None:
        projection = fit_bean(UserTotal, users)
        user = projection.map_one({"id": 1, "name": "Alice", "extra": "ignored"})
        assert user == UserTotal(id=1, name="Alice")

    def test_map_one_pydantic(self, users: Table) -> None:
        projection = fit_bean(UserModel, users)
        user = projection.map_one({"id": "2", "name": "Bob"})
        assert isinstance(user, UserModel)
        assert user.id == 2

    def test_map_one_missing_field(self, users: Table) -> None:
        projection = fit_bean(UserTotal, users)
        with pytest.raises(ColumnMismatchError) as exc_info:
            projection.map_one({"id": 1})
        assert exc_info.value.target_class == "UserTotal"

    def test_map_one_pydantic_invalid(self, users: Table) -> None:
        projection = fit_bean(UserModel, users)
        with pytest.raises(ColumnMismatchError):
            projection.map_one({"id": "not-a-number", "name": "Bob"})

    def test_map_many(self, users: Table) -> None:
        projection = fit_bean(UserTotal, users)
        rows = [{"id": 1, "name": "A"}, {"id": 2, "name": "B"}]
        assert [u.id for u in projection.map_many(rows)] == [1, 2]


class TestSetterConstruction:
    def test_setter_only_bean(self, users: Table) -> None:
        projection = fit_bean(UserBean, users)
        assert set(projection.bindings) == {"id", "name"}

        bean = projection.map_one({"id": 1, "name": "Alice"})

        assert isinstance(bean, UserBean)
        assert (bean.get_id(), bean.get_name()) == (1, "Alice")

    def test_plain_class_bound_through_constructor(self, users: Table) -> None:
        projection = fit_bean(UserDto, users)
        assert set(projection.bindings) == {"id", "name"}
        assert [c.name for c in projection.select().selected_columns] == ["id", "name"]

        dto = projection.map_one({"id": 2, "name": "Bob"})
        assert (dto.id, dto.name) == (2, "Bob")

    def test_constructor_then_setter(self, users: Table) -> None:
        projection = fit_bean(ContactCard, users)
        assert set(projection.bindings) == {"name", "email"}

        card = projection.map_one({"name": "Alice", "email": "a@example.com"})
        assert (card.name, card.email) == ("Alice", "a@example.com")

    def test_setter_failure_is_column_mismatch(self, users: Table) -> None:
        projection = fit_bean(ContactCard, users)
        with pytest.raises(ColumnMismatchError) as exc_info:
            projection.map_one({"name": "Carol", "email": None})
        assert exc_info.value.target_class == "ContactCard"
