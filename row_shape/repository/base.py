"""Repository base class.

Thin wrapper over a Session (or Connection) plus an optional mapper for
DDD-oriented usage: query handles, paging, key lookups and projections.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, exists, select

from row_shape.core.config import ShapeConfig
from row_shape.core.exceptions import ArgumentMissingError
from row_shape.core.keys import key_equals
from row_shape.core.query import SQLQuery
from row_shape.mapping.grouping import OneToManyMapper
from row_shape.mapping.plan import OneToManyPlan
from row_shape.mapping.projection import BeanProjection, fit_bean
from row_shape.mapping.protocol import Mapper
from row_shape.paging.model import Page, Pager
from row_shape.paging.paginate import paginate

T = TypeVar("T")


class Repository(Generic[T]):
    """Base repository class.

    Subclasses define concrete data access methods that build statements
    and delegate to ``query``/``find_page``.
    """

    def __init__(
        self,
        session: Any,
        mapping: OneToManyPlan | None = None,
        mapper: Mapper[T] | None = None,
        config: ShapeConfig | None = None,
    ) -> None:
        if session is None:
            raise ArgumentMissingError("session")
        self.session = session
        self.config = config
        # Accept either a plan (to build OneToManyMapper) or a mapper directly
        if mapper is not None:
            self.mapper: Mapper[T] | None = mapper
        elif mapping is not None:
            self.mapper = OneToManyMapper(mapping)
        else:
            self.mapper = None

    def query(
        self,
        statement: Select[Any],
        *,
        mapper: Mapper[Any] | None = None,
        scalars: bool = False,
    ) -> SQLQuery[Any]:
        """Create a single-use query handle; defaults to the repository mapper."""
        if mapper is None and not scalars:
            mapper = self.mapper
        return SQLQuery(self.session, statement, mapper=mapper, scalars=scalars)

    def find_page(
        self,
        pager: Pager,
        statement: Select[Any],
        *,
        mapper: Mapper[Any] | None = None,
        scalars: bool = False,
    ) -> Page[Any]:
        """Fetch one page of *statement*."""
        return paginate(pager, self.query(statement, mapper=mapper, scalars=scalars))

    def find_by_key(
        self,
        relation: Any,
        key: Any,
        *,
        statement: Select[Any] | None = None,
        scalars: bool = False,
    ) -> Any:
        """Fetch the record of *relation* identified by *key*, or None.

        *statement* defaults to selecting *relation* itself.
        """
        if key is None:
            raise ArgumentMissingError("key")
        base = select(relation) if statement is None else statement
        return self.query(
            base.where(key_equals(relation, key, self.config)), scalars=scalars
        ).fetch_one()

    def exists_by_key(self, relation: Any, key: Any) -> bool:
        """Return True if a record of *relation* with *key* exists."""
        if key is None:
            raise ArgumentMissingError("key")
        predicate = key_equals(relation, key, self.config)
        return bool(self.session.execute(select(exists().where(predicate))).scalar())

    def fit(self, target_class: type[Any], *expressions: Any) -> BeanProjection[Any]:
        """Project *expressions* onto the writable properties of *target_class*."""
        return fit_bean(target_class, *expressions, config=self.config)
