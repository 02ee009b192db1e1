"""
Example 03: One-to-Many Grouping

This example demonstrates collapsing joined (user, order) rows into users
holding their orders.
"""

from sqlalchemy import ForeignKey, String, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from row_shape import group_one_to_many


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))

    # Filled in by grouping
    order_list = None


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    status: Mapped[str] = mapped_column(String(20))


def set_orders(user, orders):
    user.order_list = orders


def main():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        session.add_all(
            [
                User(id=1, name="Alice"),
                User(id=2, name="Bob"),
                Order(id=10, user_id=1, status="completed"),
                Order(id=11, user_id=1, status="pending"),
            ]
        )
        session.commit()

        rows = session.execute(
            select(User, Order).outerjoin(Order, Order.user_id == User.id).order_by(User.id, Order.id)
        ).all()
        print(f"=== One-to-Many Grouping ===\n\nJoined rows: {len(rows)}\n")

        users = group_one_to_many(
            rows,
            lambda user: user.id,
            lambda order: order.id,
            lambda user: user.order_list,
            set_orders,
        )
        for user in users:
            statuses = [order.status for order in user.order_list or []]
            print(f"   {user.name}: {statuses}")

    engine.dispose()


if __name__ == "__main__":
    main()
