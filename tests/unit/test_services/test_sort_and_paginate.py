# tests/unit/test_services/test_sort_and_paginate.py

"""Tests for the sort and pagination stages."""

from __future__ import annotations

from decimal import Decimal

import pytest

from storecollections.core.product import Product
from storecollections.services.collections.models import SortOrder
from storecollections.services.collections.pagination import Page, paginate
from storecollections.services.collections.sorting import parse_sort_order, sort_products


def _ids(products: list[Product]) -> list[str]:
    return [p.product_id for p in products]


@pytest.fixture
def products() -> list[Product]:
    """Four products with a price tie and a title differing only by case."""
    return [
        Product(product_id="a", title="banana", price=Decimal("5"), created_at=300, units_sold=2),
        Product(product_id="b", title="Apple", price=Decimal("9"), created_at=100, units_sold=8),
        Product(product_id="c", title="cherry", price=Decimal("5"), created_at=400, units_sold=2),
        Product(product_id="d", title="apricot", price=Decimal("1"), created_at=200, units_sold=0),
    ]


# ========================================================================
# SORTING
# ========================================================================


class TestSortProducts:
    """Tests for sort_products()."""

    def test_manual_keeps_order(self, products: list[Product]) -> None:
        result = sort_products(products, SortOrder.MANUAL)
        assert _ids(result) == ["a", "b", "c", "d"]
        assert result is not products

    def test_price_asc_is_stable(self, products: list[Product]) -> None:
        assert _ids(sort_products(products, SortOrder.PRICE_ASC)) == ["d", "a", "c", "b"]

    def test_price_desc_is_stable(self, products: list[Product]) -> None:
        assert _ids(sort_products(products, SortOrder.PRICE_DESC)) == ["b", "a", "c", "d"]

    def test_name_is_case_insensitive(self, products: list[Product]) -> None:
        assert _ids(sort_products(products, SortOrder.NAME_ASC)) == ["b", "d", "a", "c"]
        assert _ids(sort_products(products, SortOrder.NAME_DESC)) == ["c", "a", "d", "b"]

    def test_newest_and_oldest(self, products: list[Product]) -> None:
        assert _ids(sort_products(products, SortOrder.NEWEST)) == ["c", "a", "d", "b"]
        assert _ids(sort_products(products, SortOrder.OLDEST)) == ["b", "d", "a", "c"]

    def test_best_selling_uses_units_sold(self, products: list[Product]) -> None:
        assert _ids(sort_products(products, SortOrder.BEST_SELLING)) == ["b", "a", "c", "d"]

    def test_best_selling_prefers_sales_mapping(self, products: list[Product]) -> None:
        result = sort_products(products, SortOrder.BEST_SELLING, sales={"d": 50, "b": 1})
        assert _ids(result) == ["d", "a", "c", "b"]

    def test_accepts_string(self, products: list[Product]) -> None:
        assert _ids(sort_products(products, "price_asc")) == ["d", "a", "c", "b"]

    def test_input_not_mutated(self, products: list[Product]) -> None:
        sort_products(products, SortOrder.PRICE_DESC)
        assert _ids(products) == ["a", "b", "c", "d"]


class TestParseSortOrder:
    """Tests for parse_sort_order()."""

    def test_none_and_empty_use_default(self) -> None:
        assert parse_sort_order(None) == SortOrder.MANUAL
        assert parse_sort_order("", default=SortOrder.NEWEST) == SortOrder.NEWEST

    def test_enum_passes_through(self) -> None:
        assert parse_sort_order(SortOrder.OLDEST) is SortOrder.OLDEST

    def test_unknown_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_sort_order("random")


# ========================================================================
# PAGINATION
# ========================================================================


class TestPaginate:
    """Tests for paginate()."""

    def test_first_page(self, products: list[Product]) -> None:
        page = paginate(products, 1, 3)
        assert isinstance(page, Page)
        assert _ids(page.items) == ["a", "b", "c"]
        assert page.total_pages == 2
        assert page.total_items == 4
        assert page.has_next
        assert not page.has_previous

    def test_last_partial_page(self, products: list[Product]) -> None:
        page = paginate(products, 2, 3)
        assert _ids(page.items) == ["d"]
        assert not page.has_next
        assert page.has_previous

    def test_exact_fit(self, products: list[Product]) -> None:
        assert paginate(products, 2, 2).total_pages == 2

    def test_out_of_range_is_empty(self, products: list[Product]) -> None:
        page = paginate(products, 5, 2)
        assert page.items == []
        assert page.total_pages == 2
        assert page.page == 5

    def test_empty_list_has_one_page(self) -> None:
        page = paginate([], 1, 20)
        assert page.items == []
        assert page.total_pages == 1

    def test_pages_cover_list_once(self, products: list[Product]) -> None:
        seen = []
        for number in range(1, paginate(products, 1, 3).total_pages + 1):
            seen.extend(paginate(products, number, 3).items)
        assert seen == products

    @pytest.mark.parametrize(("page", "size"), [(0, 5), (-1, 5), (1, 0)])
    def test_invalid_arguments(self, products: list[Product], page: int, size: int) -> None:
        with pytest.raises(ValueError):
            paginate(products, page, size)
