"""Unit tests for Pager, Page and ShapeConfig defaults."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from row_shape.core.config import DEFAULT_CONFIG, ShapeConfig, resolve_config
from row_shape.core.exceptions import PagingError
from row_shape.paging.model import Page, Pager


class TestPager:
    def test_offset_and_limit_derived(self) -> None:
        pager = Pager(page_index=3, page_size=25)
        assert pager.offset == 75
        assert pager.limit == 25

    def test_first_page_offset_zero(self) -> None:
        assert Pager(page_index=0, page_size=10).offset == 0

    def test_count_defaults_true(self) -> None:
        assert Pager().count is True

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(PagingError):
            Pager(page_index=-1, page_size=10)

    def test_zero_size_rejected(self) -> None:
        with pytest.raises(PagingError):
            Pager(page_index=0, page_size=0)

    def test_frozen(self) -> None:
        pager = Pager()
        with pytest.raises(AttributeError):
            pager.page_size = 5  # type: ignore[misc]

    def test_of_applies_config_defaults(self) -> None:
        config = ShapeConfig(default_page_size=15, count_by_default=False)
        pager = Pager.of(config=config)
        assert pager.page_index == 0
        assert pager.page_size == 15
        assert pager.count is False

    def test_of_keeps_explicit_values(self) -> None:
        pager = Pager.of(2, 5, count=True)
        assert (pager.page_index, pager.page_size, pager.count) == (2, 5, True)

    def test_of_rejects_size_over_maximum(self) -> None:
        config = ShapeConfig(default_page_size=10, max_page_size=50)
        with pytest.raises(PagingError, match="exceeds maximum"):
            Pager.of(0, 51, config=config)


class TestPage:
    def test_empty_page(self) -> None:
        page: Page[int] = Page.empty(0)
        assert page.rows == []
        assert page.total == 0
        assert page.has_total
        assert len(page) == 0

    def test_no_total(self) -> None:
        page = Page(rows=[1, 2])
        assert not page.has_total
        assert page.pages(10) is None

    def test_pages_rounds_up(self) -> None:
        assert Page(rows=[], total=21).pages(10) == 3
        assert Page(rows=[], total=20).pages(10) == 2


class TestShapeConfig:
    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG.default_page_size == 20
        assert DEFAULT_CONFIG.max_page_size == 1000
        assert DEFAULT_CONFIG.getter_prefix == "get_"
        assert DEFAULT_CONFIG.setter_prefix == "set_"

    def test_resolve_config(self) -> None:
        custom = ShapeConfig(getter_prefix="read_")
        assert resolve_config(None) is DEFAULT_CONFIG
        assert resolve_config(custom) is custom

    def test_default_over_max_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ShapeConfig(default_page_size=100, max_page_size=10)

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            DEFAULT_CONFIG.default_page_size = 5  # type: ignore[misc]
