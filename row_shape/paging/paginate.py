"""Paginated fetch over a query handle."""

from __future__ import annotations

import logging
from typing import Any

from row_shape.paging.model import Page, Pager

logger = logging.getLogger(__name__)


def paginate(pager: Pager, query: Any) -> Page[Any]:
    """Fetch one page of *query* as described by *pager*.

    *query* exposes ``limit``, ``offset``, ``fetch`` and ``fetch_count``
    (see ``SQLQuery``). When a total is requested it is counted first, and
    the row fetch is skipped if the count proves the page is empty.
    """
    if pager.count:
        total = query.fetch_count()
        if total < 1 or total < pager.offset:
            logger.debug(
                "Skipping fetch: total=%d, offset=%d", total, pager.offset
            )
            return Page.empty(total)
        query.limit(pager.limit).offset(pager.offset)
        return Page(rows=query.fetch(), total=total)

    query.limit(pager.limit).offset(pager.offset)
    return Page(rows=query.fetch())
