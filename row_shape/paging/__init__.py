"""Paging layer - page requests, page results and paginated fetch."""

from __future__ import annotations

from row_shape.paging.model import Page, Pager
from row_shape.paging.paginate import paginate

__all__ = [
    "Pager",
    "Page",
    "paginate",
]
