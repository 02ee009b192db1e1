"""
Example 04: Repository Pattern

This example demonstrates a user repository that pages users with their
roles and looks up role assignments by composite key.
"""

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import ForeignKey, String, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from row_shape import Page, Pager, Repository, fit_bean, one_to_many


class Base(DeclarativeBase):
    pass


class UserRecord(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True)


class RoleRecord(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))


class UserRole(Base):
    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), primary_key=True)
    role_id: Mapped[int] = mapped_column(ForeignKey("roles.id"), primary_key=True)


@dataclass
class Role:
    """Role value"""
    id: int
    name: str


@dataclass
class User:
    """User with its roles"""
    id: int
    username: str
    roles: list[Role] = field(default_factory=list)


def _user_of(row) -> User:
    return User(id=row.user_id, username=row.username)


def _role_of(row) -> Optional[Role]:
    return Role(id=row.role_id, name=row.role_name) if row.role_id is not None else None


class UserRepository(Repository[User]):
    """Repository for users and their roles"""

    def __init__(self, session: Session):
        plan = (
            one_to_many(User, Role, one=_user_of, many=_role_of)
            .key("id")
            .many_key("id")
            .collection("roles")
            .build()
        )
        super().__init__(session, mapping=plan)

    def find_users(self, pager: Pager, username: Optional[str] = None) -> Page[User]:
        """Page users (one row per role) filtered by username prefix"""
        statement = (
            select(
                UserRecord.id.label("user_id"),
                UserRecord.username,
                RoleRecord.id.label("role_id"),
                RoleRecord.name.label("role_name"),
            )
            .outerjoin(UserRole, UserRole.user_id == UserRecord.id)
            .outerjoin(RoleRecord, RoleRecord.id == UserRole.role_id)
            .order_by(UserRecord.id, RoleRecord.id)
        )
        if username:
            statement = statement.where(UserRecord.username.startswith(username))
        return self.find_page(pager, statement)

    def has_role(self, user_id: int, role_id: int) -> bool:
        """Check a role assignment by its composite key"""
        return self.exists_by_key(UserRole, UserRole(user_id=user_id, role_id=role_id))

    def list_roles(self) -> list[Role]:
        projection = fit_bean(Role, RoleRecord)
        return self.query(projection.select().order_by(RoleRecord.id), mapper=projection).fetch()


def main():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        session.add_all(
            [
                UserRecord(id=1, username="alice"),
                UserRecord(id=2, username="albert"),
                UserRecord(id=3, username="bob"),
                RoleRecord(id=1, name="admin"),
                RoleRecord(id=2, name="editor"),
                UserRole(user_id=1, role_id=1),
                UserRole(user_id=1, role_id=2),
                UserRole(user_id=2, role_id=2),
            ]
        )
        session.commit()

        repo = UserRepository(session)

        print("=== Repository Pattern ===\n")

        print("1. Roles:")
        for role in repo.list_roles():
            print(f"   - {role.name}")
        print()

        print("2. Users starting with 'al':")
        page = repo.find_users(Pager(page_index=0, page_size=10), username="al")
        print(f"   Joined rows counted: {page.total}")
        for user in page.rows:
            print(f"   - {user.username}: {[r.name for r in user.roles]}")
        print()

        print("3. Role checks:")
        print(f"   alice is admin: {repo.has_role(1, 1)}")
        print(f"   albert is admin: {repo.has_role(2, 1)}")

    engine.dispose()


if __name__ == "__main__":
    main()
