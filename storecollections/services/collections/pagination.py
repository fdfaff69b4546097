# storecollections/services/collections/pagination.py

"""Pagination stage: 1-indexed pages over a sorted product list."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storecollections.core.product import Product

__all__ = ["DEFAULT_PAGE_SIZE", "Page", "paginate"]

DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class Page:
    """One page of products.

    Attributes:
        items: Products on this page (empty when the page is out of range).
        total_pages: Number of pages, at least 1 even for an empty list.
        page: The requested 1-indexed page number.
        page_size: Products per page.
        total_items: Size of the full list.
    """

    items: list[Product]
    total_pages: int
    page: int
    page_size: int
    total_items: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def paginate(products: list[Product], page: int, page_size: int) -> Page:
    """Slices one page out of a product list.

    Out-of-range pages are not clamped; they yield an empty ``items``.

    Args:
        products: The sorted product list.
        page: 1-indexed page number.
        page_size: Number of products per page.

    Returns:
        The requested Page.

    Raises:
        ValueError: If page or page_size is smaller than 1.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    total = len(products)
    total_pages = max(1, math.ceil(total / page_size))
    start = (page - 1) * page_size
    return Page(
        items=list(products[start : start + page_size]),
        total_pages=total_pages,
        page=page,
        page_size=page_size,
        total_items=total,
    )
