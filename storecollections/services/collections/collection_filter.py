# storecollections/services/collections/collection_filter.py

"""Filtering and ordering of a seller's collection list.

Provides CollectionListFilter (frozen dataclass) and apply_list_filter,
which narrows a collection list by search term, status, type, featured
flag, product count bucket and creation age, then orders it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from storecollections.services.collections.models import Collection, CollectionType

__all__ = [
    "CollectionListFilter",
    "CollectionListSort",
    "COUNT_BUCKETS",
    "DATE_RANGES",
    "apply_list_filter",
]

logger = logging.getLogger("storecoll.collections.filter")

_SECONDS_PER_DAY = 86400

# Inclusive product count bounds; None means unbounded
COUNT_BUCKETS: dict[str, tuple[int, int | None]] = {
    "0-10": (0, 10),
    "11-50": (11, 50),
    "51-100": (51, 100),
    "100+": (100, None),
}

# Maximum collection age in days
DATE_RANGES: dict[str, int] = {
    "today": 1,
    "week": 7,
    "month": 30,
    "year": 365,
}


class CollectionListSort(Enum):
    """Orderings of the collection list."""

    A_Z = "a-z"
    Z_A = "z-a"
    MOST_PRODUCTS = "most_products"
    LEAST_PRODUCTS = "least_products"
    RECENTLY_UPDATED = "recently_updated"
    OLDEST = "oldest"


@dataclass(frozen=True)
class CollectionListFilter:
    """Immutable snapshot of the collection list filters.

    Attributes:
        search: Case-insensitive substring of name or description.
        status: all, active, inactive or draft.
        collection_type: all, smart or manual.
        featured: all, featured or not_featured.
        product_count: all or a COUNT_BUCKETS key.
        date_range: all or a DATE_RANGES key.
        sort: The list ordering.
    """

    search: str = ""
    status: str = "all"
    collection_type: str = "all"
    featured: str = "all"
    product_count: str = "all"
    date_range: str = "all"
    sort: CollectionListSort = CollectionListSort.RECENTLY_UPDATED

    def __post_init__(self) -> None:
        if self.status not in ("all", "active", "inactive", "draft"):
            raise ValueError(f"Unknown status filter: {self.status}")
        if self.collection_type not in ("all", "smart", "manual"):
            raise ValueError(f"Unknown type filter: {self.collection_type}")
        if self.featured not in ("all", "featured", "not_featured"):
            raise ValueError(f"Unknown featured filter: {self.featured}")
        if self.product_count != "all" and self.product_count not in COUNT_BUCKETS:
            raise ValueError(f"Unknown product count bucket: {self.product_count}")
        if self.date_range != "all" and self.date_range not in DATE_RANGES:
            raise ValueError(f"Unknown date range: {self.date_range}")
        if not isinstance(self.sort, CollectionListSort):
            object.__setattr__(self, "sort", CollectionListSort(self.sort))


def _matches(collection: Collection, flt: CollectionListFilter, now: int) -> bool:
    if flt.search:
        needle = flt.search.casefold()
        if needle not in collection.name.casefold() and needle not in collection.description.casefold():
            return False

    if flt.status == "active" and not collection.is_active:
        return False
    if flt.status == "inactive" and collection.is_active:
        return False
    if flt.status == "draft" and not collection.is_draft:
        return False

    if flt.collection_type != "all" and collection.collection_type != CollectionType(flt.collection_type):
        return False

    if flt.featured == "featured" and not collection.is_featured:
        return False
    if flt.featured == "not_featured" and collection.is_featured:
        return False

    if flt.product_count != "all":
        low, high = COUNT_BUCKETS[flt.product_count]
        if collection.product_count < low or (high is not None and collection.product_count > high):
            return False

    if flt.date_range != "all":
        age_days = (now - collection.created_at) / _SECONDS_PER_DAY
        if age_days > DATE_RANGES[flt.date_range]:
            return False

    return True


def apply_list_filter(
    collections: Iterable[Collection],
    flt: CollectionListFilter | None = None,
    now: int | None = None,
) -> list[Collection]:
    """Returns the filtered and ordered collection list.

    Args:
        collections: The seller's collections.
        flt: Filters to apply; defaults to no filtering, recently updated first.
        now: Reference Unix timestamp for the date range filter.

    Returns:
        A new list; ties keep their input order.
    """
    flt = flt or CollectionListFilter()
    now = int(time.time()) if now is None else now
    result = [c for c in collections if _matches(c, flt, now)]

    if flt.sort == CollectionListSort.A_Z:
        result.sort(key=lambda c: c.name.casefold())
    elif flt.sort == CollectionListSort.Z_A:
        result.sort(key=lambda c: c.name.casefold(), reverse=True)
    elif flt.sort == CollectionListSort.MOST_PRODUCTS:
        result.sort(key=lambda c: c.product_count, reverse=True)
    elif flt.sort == CollectionListSort.LEAST_PRODUCTS:
        result.sort(key=lambda c: c.product_count)
    elif flt.sort == CollectionListSort.RECENTLY_UPDATED:
        result.sort(key=lambda c: c.updated_at or c.created_at, reverse=True)
    elif flt.sort == CollectionListSort.OLDEST:
        result.sort(key=lambda c: c.created_at)

    logger.debug("Collection list filter kept %d collections", len(result))
    return result
