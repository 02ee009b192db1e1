"""Page request and page result value types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from row_shape.core.config import ShapeConfig, resolve_config
from row_shape.core.exceptions import PagingError

T = TypeVar("T")


@dataclass(frozen=True)
class Pager:
    """A page request.

    ``page_index`` is zero-based; ``count`` asks for the total row count.
    """

    page_index: int = 0
    page_size: int = 20
    count: bool = True

    def __post_init__(self) -> None:
        if self.page_index < 0:
            raise PagingError(f"page_index must be >= 0, got {self.page_index}")
        if self.page_size < 1:
            raise PagingError(f"page_size must be >= 1, got {self.page_size}")

    @property
    def offset(self) -> int:
        return self.page_index * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    @classmethod
    def of(
        cls,
        page_index: int | None = None,
        page_size: int | None = None,
        count: bool | None = None,
        config: ShapeConfig | None = None,
    ) -> Pager:
        """Build a Pager from optional request values, filling in config defaults."""
        cfg = resolve_config(config)
        size = cfg.default_page_size if page_size is None else page_size
        if size > cfg.max_page_size:
            raise PagingError(f"page_size {size} exceeds maximum of {cfg.max_page_size}")
        return cls(
            page_index=0 if page_index is None else page_index,
            page_size=size,
            count=cfg.count_by_default if count is None else count,
        )


@dataclass
class Page(Generic[T]):
    """One page of rows, with the total row count when it was requested."""

    rows: list[T] = field(default_factory=list)
    total: int | None = None

    @classmethod
    def empty(cls, total: int | None = None) -> Page[T]:
        return cls(rows=[], total=total)

    @property
    def has_total(self) -> bool:
        return self.total is not None

    def pages(self, page_size: int) -> int | None:
        """Number of pages of *page_size* rows, or None without a total."""
        if self.total is None:
            return None
        return math.ceil(self.total / page_size) if page_size > 0 else 0

    def __len__(self) -> int:
        return len(self.rows)
