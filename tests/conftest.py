"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import (
    Column,
    Connection,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
)


@pytest.fixture
def metadata() -> MetaData:
    return MetaData()


@pytest.fixture
def users(metadata: MetaData) -> Table:
    return Table(
        "users",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("name", String(50), nullable=False),
        Column("email", String(100)),
    )


@pytest.fixture
def orders(metadata: MetaData, users: Table) -> Table:
    return Table(
        "orders",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("user_id", ForeignKey("users.id"), nullable=False),
        Column("amount", Float, nullable=False),
    )


@pytest.fixture
def order_items(metadata: MetaData, orders: Table) -> Table:
    """Table with a composite (order_id, line_no) primary key."""
    return Table(
        "order_items",
        metadata,
        Column("order_id", ForeignKey("orders.id"), primary_key=True),
        Column("line_no", Integer, primary_key=True),
        Column("product", String(50), nullable=False),
    )


@pytest.fixture
def audit_log(metadata: MetaData) -> Table:
    """Table without a primary key."""
    return Table("audit_log", metadata, Column("message", String(200)))


@pytest.fixture
def connection(
    metadata: MetaData, users: Table, orders: Table, order_items: Table
) -> Iterator[Connection]:
    """SQLite in-memory connection with users, orders and order items."""
    engine = create_engine("sqlite://")
    metadata.create_all(engine)
    with engine.connect() as conn:
        conn.execute(
            users.insert(),
            [
                {"id": 1, "name": "Alice", "email": "alice@example.com"},
                {"id": 2, "name": "Bob", "email": "bob@example.com"},
                {"id": 3, "name": "Carol", "email": None},
            ],
        )
        conn.execute(
            orders.insert(),
            [
                {"id": 10, "user_id": 1, "amount": 99.5},
                {"id": 11, "user_id": 1, "amount": 0.5},
                {"id": 12, "user_id": 2, "amount": 20.0},
            ],
        )
        conn.execute(
            order_items.insert(),
            [
                {"order_id": 10, "line_no": 1, "product": "Keyboard"},
                {"order_id": 10, "line_no": 2, "product": "Mouse"},
            ],
        )
        yield conn
    engine.dispose()
