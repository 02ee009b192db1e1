"""
Example 02: Bean Projection

This example demonstrates projecting tables and labelled aggregates onto the
writable properties of a dataclass.
"""

from dataclasses import dataclass

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    func,
)

from row_shape import SQLQuery, fit_bean

metadata = MetaData()
users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(50), nullable=False),
    Column("email", String(100), nullable=False),
)
orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", ForeignKey("users.id"), nullable=False),
    Column("total", Float, nullable=False),
)


@dataclass
class UserSpending:
    """Spending summary per user"""
    id: int
    name: str
    order_count: int = 0
    spent: float | None = None


def main():
    engine = create_engine("sqlite://")
    metadata.create_all(engine)

    with engine.connect() as conn:
        conn.execute(
            users.insert(),
            [
                {"id": 1, "name": "Alice", "email": "alice@example.com"},
                {"id": 2, "name": "Bob", "email": "bob@example.com"},
            ],
        )
        conn.execute(
            orders.insert(),
            [
                {"user_id": 1, "total": 100.50},
                {"user_id": 1, "total": 50.25},
                {"user_id": 2, "total": 200.00},
            ],
        )

        # users.email has no matching property and is left out;
        # the labelled aggregates bind to order_count and spent.
        projection = fit_bean(
            UserSpending,
            users,
            func.count(orders.c.id).label("order_count"),
            func.sum(orders.c.total).label("spent"),
        )
        print("=== Bean Projection ===\n")
        print(f"Bound properties: {sorted(projection.bindings)}\n")

        statement = (
            projection.select()
            .outerjoin(orders, orders.c.user_id == users.c.id)
            .group_by(users.c.id, users.c.name)
            .order_by(users.c.id)
        )
        for summary in SQLQuery(conn, statement, mapper=projection).fetch():
            print(f"   {summary.name}: {summary.order_count} orders, {summary.spent:.2f} spent")

    engine.dispose()


if __name__ == "__main__":
    main()
