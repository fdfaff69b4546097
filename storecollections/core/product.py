# storecollections/core/product.py

"""Product dataclass and catalog helpers.

The Product is the read-only catalog entity that smart collection rules are
evaluated against. Products are owned by the marketplace catalog; this
package only ever reads them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

__all__ = [
    "PRODUCT_STATUSES",
    "Product",
    "parse_price",
    "parse_timestamp",
    "product_from_dict",
]

logger = logging.getLogger("storecoll.product")

PRODUCT_STATUSES: frozenset[str] = frozenset({"active", "draft", "archived"})

# Inventory states of the raw product document; such products are live
_INVENTORY_STATUSES: frozenset[str] = frozenset({"in_stock", "low_stock", "out_of_stock"})


@dataclass(frozen=True)
class Product:
    """A single catalog product of one seller.

    Attributes:
        product_id: Marketplace identifier of the product.
        seller_id: Identifier of the owning seller.
        title: Display title.
        price: Current price.
        stock_quantity: Units on hand, never negative.
        category_id: Identifier of the product's category ('' if none).
        tags: Seller-assigned tags.
        status: Catalog status ('active', 'draft' or 'archived').
        created_at: Unix timestamp of creation.
        units_sold: Sales metric supplied by the marketplace (best_selling sort).
    """

    product_id: str
    seller_id: str = ""
    title: str = ""
    price: Decimal = Decimal("0")
    stock_quantity: int = 0
    category_id: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)
    status: str = "active"
    created_at: int = 0
    units_sold: int = 0

    def __post_init__(self) -> None:
        # Normalize loosely typed input; frozen, so go through object.__setattr__
        if not isinstance(self.price, Decimal):
            object.__setattr__(self, "price", parse_price(self.price))
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags or ()))
        if self.stock_quantity < 0:
            raise ValueError(f"stock_quantity must be >= 0, got {self.stock_quantity}")

    @property
    def is_active(self) -> bool:
        """True if the product is part of the seller's live catalog."""
        return self.status == "active"

    @property
    def in_stock(self) -> bool:
        """True if at least one unit is available."""
        return self.stock_quantity > 0


def parse_price(value: Any) -> Decimal:
    """Converts a price from API or DB representation to Decimal.

    Args:
        value: int, float, str or Decimal price.

    Returns:
        The price as Decimal.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() first so floats like 19.99 do not carry binary noise
            result = Decimal(str(value).strip())
        except (InvalidOperation, TypeError) as exc:
            raise ValueError(f"Invalid price: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid price: {value!r}")
    return result


def parse_timestamp(value: Any) -> int:
    """Converts an ISO-8601 string, datetime or number to a Unix timestamp.

    Args:
        value: The timestamp in any of the supported representations.

    Returns:
        Seconds since epoch, 0 for empty or unparseable values.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparseable timestamp: %r", value)
            return 0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def product_from_dict(data: dict[str, Any]) -> Product:
    """Builds a Product from a marketplace API payload.

    Accepts both the storefront shape (``id``, ``title``, ``stock_quantity``,
    ``category_id``) and the raw document shape (``_id``, ``name``,
    ``stock``, ``category``, ``createdAt``).

    Args:
        data: The product payload.

    Returns:
        A Product instance.

    Raises:
        KeyError: If the payload has no identifier.
        ValueError: If price or stock are not numeric.
    """
    product_id = data.get("id") or data.get("_id") or data.get("product_id")
    if not product_id:
        raise KeyError("id")

    stock = data.get("stock_quantity", data.get("stock", 0)) or 0
    tags = data.get("tags") or []
    if isinstance(tags, str):
        tags = [tag.strip() for tag in tags.split(",") if tag.strip()]

    status = str(data.get("status") or "active")
    if status in _INVENTORY_STATUSES:
        status = "active"
    elif status not in PRODUCT_STATUSES:
        logger.debug("Unknown product status %r, treating as draft", status)
        status = "draft"

    return Product(
        product_id=str(product_id),
        seller_id=str(data.get("seller_id") or data.get("sellerId") or ""),
        title=str(data.get("title") or data.get("name") or ""),
        price=parse_price(data.get("price", 0) or 0),
        stock_quantity=max(0, int(stock)),
        category_id=str(data.get("category_id") or data.get("category") or ""),
        tags=tuple(str(tag) for tag in tags),
        status=status,
        created_at=parse_timestamp(data.get("created_at", data.get("createdAt"))),
        units_sold=int(data.get("units_sold", data.get("unitsSold", 0)) or 0),
    )
