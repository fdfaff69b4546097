"""Collection membership database operations.

Handles the explicit product links of collections: the whole membership of
a manual collection, or the pinned products of a smart one.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable

from storecollections.services.collections.models import CollectionProduct

logger = logging.getLogger("storecoll.database")

__all__ = ["MembershipMixin"]


class MembershipMixin:
    """Mixin providing collection link operations.

    Requires ConnectionBase attributes: conn.
    """

    def _next_position(self, collection_id: int) -> int:
        cursor = self.conn.execute(
            "SELECT COALESCE(MAX(position), -1) + 1 FROM collection_products WHERE collection_id = ?",
            (collection_id,),
        )
        return cursor.fetchone()[0]

    def add_collection_product(self, collection_id: int, product_id: str, position: int | None = None) -> bool:
        """Links a product to a collection.

        Args:
            collection_id: The target collection.
            product_id: The product to link.
            position: Explicit position; appended at the end when None.

        Returns:
            True if a new link was created, False if it already existed.
        """
        if position is None:
            position = self._next_position(collection_id)
        cursor = self.conn.execute(
            """
            INSERT OR IGNORE INTO collection_products (collection_id, product_id, position, added_at)
            VALUES (?, ?, ?, ?)
            """,
            (collection_id, product_id, position, int(time.time())),
        )
        return cursor.rowcount > 0

    def remove_collection_product(self, collection_id: int, product_id: str) -> bool:
        """Removes a product link.

        Returns:
            True if a link was removed.
        """
        cursor = self.conn.execute(
            "DELETE FROM collection_products WHERE collection_id = ? AND product_id = ?",
            (collection_id, product_id),
        )
        return cursor.rowcount > 0

    def bulk_add_collection_products(self, collection_id: int, product_ids: Iterable[str]) -> int:
        """Appends many products to a collection, skipping existing links.

        Args:
            collection_id: The target collection.
            product_ids: Products to link, in the order they should appear.

        Returns:
            Number of links created.
        """
        existing = set(self.get_collection_product_ids(collection_id))
        position = self._next_position(collection_id)
        now = int(time.time())

        rows = []
        for product_id in dict.fromkeys(product_ids):
            if product_id in existing:
                continue
            rows.append((collection_id, product_id, position, now))
            position += 1

        if rows:
            self.conn.executemany(
                "INSERT OR IGNORE INTO collection_products (collection_id, product_id, position, added_at) "
                "VALUES (?, ?, ?, ?)",
                rows,
            )
        return len(rows)

    def bulk_remove_collection_products(self, collection_id: int, product_ids: Iterable[str]) -> int:
        """Removes many product links.

        Returns:
            Number of links removed.
        """
        removed = 0
        for product_id in dict.fromkeys(product_ids):
            if self.remove_collection_product(collection_id, product_id):
                removed += 1
        return removed

    def get_collection_links(self, collection_id: int) -> list[CollectionProduct]:
        """Retrieves the links of a collection in position order.

        Args:
            collection_id: The collection to query.

        Returns:
            List of CollectionProduct rows.
        """
        cursor = self.conn.execute(
            """
            SELECT collection_id, product_id, position, added_at
            FROM collection_products
            WHERE collection_id = ?
            ORDER BY position, added_at, rowid
            """,
            (collection_id,),
        )
        return [
            CollectionProduct(
                collection_id=row["collection_id"],
                product_id=row["product_id"],
                position=row["position"],
                added_at=row["added_at"],
            )
            for row in cursor.fetchall()
        ]

    def get_collection_product_ids(self, collection_id: int) -> list[str]:
        return [link.product_id for link in self.get_collection_links(collection_id)]

    def copy_collection_products(self, source_id: int, target_id: int) -> int:
        """Copies all links of one collection to another, keeping positions.

        Returns:
            Number of links copied.
        """
        cursor = self.conn.execute(
            """
            INSERT OR IGNORE INTO collection_products (collection_id, product_id, position, added_at)
            SELECT ?, product_id, position, ?
            FROM collection_products
            WHERE collection_id = ?
            """,
            (target_id, int(time.time()), source_id),
        )
        return cursor.rowcount
