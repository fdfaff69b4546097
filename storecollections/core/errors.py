# storecollections/core/errors.py

"""Exception types raised by the collection engine.

Every error renders as a single human-readable message via ``str()`` so the
calling layer can show it to the seller unchanged.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "CatalogUnavailableError",
    "CollectionError",
    "CollectionNotFoundError",
    "DuplicateSlugError",
    "InvalidConditionError",
    "ProductNotFoundError",
]


class CollectionError(Exception):
    """Base class for all collection engine errors."""


class InvalidConditionError(CollectionError, ValueError):
    """A smart collection condition has an invalid shape or operator.

    Attributes:
        index: Position of the offending condition in its list, if known.
        condition: The raw condition data that failed validation.
        reason: The message without the position prefix.
    """

    def __init__(self, message: str, index: int | None = None, condition: Any = None) -> None:
        self.reason = message
        self.index = index
        self.condition = condition
        if index is not None:
            message = f"Condition #{index + 1}: {message}"
        super().__init__(message)


class CollectionNotFoundError(CollectionError, LookupError):
    """No collection exists with the given identifier."""

    def __init__(self, collection_id: int) -> None:
        self.collection_id = collection_id
        super().__init__(f"Collection {collection_id} not found")


class ProductNotFoundError(CollectionError, LookupError):
    """A manual link references a product that is not in the catalog."""

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class DuplicateSlugError(CollectionError):
    """Another collection of the same seller already uses this slug."""

    def __init__(self, slug: str, seller_id: str) -> None:
        self.slug = slug
        self.seller_id = seller_id
        super().__init__(f"A collection with slug '{slug}' already exists")


class CatalogUnavailableError(CollectionError):
    """The marketplace catalog could not be fetched or parsed."""
