# storecollections/services/collections/sorting.py

"""Sort stage for resolved collection membership.

All orders are stable: products with equal keys keep their relative input
order, including for the descending orders.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from storecollections.services.collections.models import SortOrder

if TYPE_CHECKING:
    from storecollections.core.product import Product

__all__ = ["parse_sort_order", "sort_products"]

logger = logging.getLogger("storecoll.collections.sorting")


def parse_sort_order(value: SortOrder | str | None, default: SortOrder = SortOrder.MANUAL) -> SortOrder:
    """Converts a sort order string into a SortOrder.

    Args:
        value: Enum member, its string value, or None for the default.
        default: Returned when value is None or empty.

    Returns:
        The SortOrder.

    Raises:
        ValueError: If the string is not a known sort order.
    """
    if value is None or value == "":
        return default
    if isinstance(value, SortOrder):
        return value
    return SortOrder(value)


def sort_products(
    products: list[Product],
    order: SortOrder | str,
    sales: Mapping[str, int] | None = None,
) -> list[Product]:
    """Returns a new list of products in the requested order.

    Args:
        products: The resolved membership list.
        order: The sort order (enum or its string value).
        sales: Units sold per product_id for BEST_SELLING. Products missing
            from the mapping fall back to their own ``units_sold``.

    Returns:
        A sorted copy. MANUAL returns the input order unchanged.
    """
    order = parse_sort_order(order)

    if order == SortOrder.PRICE_ASC:
        return sorted(products, key=lambda p: p.price)
    if order == SortOrder.PRICE_DESC:
        return sorted(products, key=lambda p: p.price, reverse=True)
    if order == SortOrder.NAME_ASC:
        return sorted(products, key=lambda p: p.title.casefold())
    if order == SortOrder.NAME_DESC:
        return sorted(products, key=lambda p: p.title.casefold(), reverse=True)
    if order == SortOrder.NEWEST:
        return sorted(products, key=lambda p: p.created_at, reverse=True)
    if order == SortOrder.OLDEST:
        return sorted(products, key=lambda p: p.created_at)
    if order == SortOrder.BEST_SELLING:
        metric = sales or {}
        return sorted(products, key=lambda p: metric.get(p.product_id, p.units_sold), reverse=True)

    # MANUAL
    return list(products)
