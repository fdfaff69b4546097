"""Catalog snapshot database operations.

Stores the products pulled from the marketplace so collection membership
can be resolved locally. Products are read back in insertion order, which
is the catalog order rule evaluation preserves.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Iterable

from storecollections.core.product import Product, parse_price

logger = logging.getLogger("storecoll.database")

__all__ = ["ProductQueryMixin"]

# SQLite caps bound parameters; IN (...) lists are chunked
_CHUNK_SIZE = 500


def _chunks(ids: list[str]) -> Iterable[list[str]]:
    for start in range(0, len(ids), _CHUNK_SIZE):
        yield ids[start : start + _CHUNK_SIZE]


class ProductQueryMixin:
    """Mixin providing catalog product operations.

    Requires ConnectionBase attributes: conn.
    """

    def upsert_product(self, product: Product) -> None:
        """Inserts a product or refreshes an existing one.

        Keeps the row id of existing products so catalog order is stable
        across refreshes. Does NOT commit.

        Args:
            product: The product to store.
        """
        now = int(time.time())
        self.conn.execute(
            """
            INSERT INTO products (product_id, seller_id, title, price, stock_quantity,
                                  category_id, status, units_sold, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(product_id) DO UPDATE SET
                seller_id = excluded.seller_id,
                title = excluded.title,
                price = excluded.price,
                stock_quantity = excluded.stock_quantity,
                category_id = excluded.category_id,
                status = excluded.status,
                units_sold = excluded.units_sold,
                created_at = excluded.created_at,
                updated_at = excluded.updated_at
            """,
            (
                product.product_id,
                product.seller_id,
                product.title,
                str(product.price),
                product.stock_quantity,
                product.category_id,
                product.status,
                product.units_sold,
                product.created_at,
                now,
            ),
        )
        self.conn.execute("DELETE FROM product_tags WHERE product_id = ?", (product.product_id,))
        self.conn.executemany(
            "INSERT OR IGNORE INTO product_tags (product_id, tag, position) VALUES (?, ?, ?)",
            [(product.product_id, tag, i) for i, tag in enumerate(product.tags)],
        )

    def batch_upsert_products(self, products: Iterable[Product]) -> int:
        """Upserts many products. Does NOT commit.

        Args:
            products: Products to store.

        Returns:
            Number of products written.
        """
        count = 0
        for product in products:
            self.upsert_product(product)
            count += 1
        return count

    def get_product(self, product_id: str) -> Product | None:
        """Loads a single product by ID.

        Args:
            product_id: The product to load.

        Returns:
            The Product, or None if it is not in the catalog snapshot.
        """
        cursor = self.conn.execute("SELECT * FROM products WHERE product_id = ?", (product_id,))
        row = cursor.fetchone()
        if not row:
            return None
        tags = self._batch_get_tags([product_id])
        return self._row_to_product(row, tags.get(product_id, []))

    def get_products(self, seller_id: str, active_only: bool = True) -> list[Product]:
        """Loads a seller's catalog in catalog order.

        Args:
            seller_id: The owning seller.
            active_only: Skip draft and archived products.

        Returns:
            List of Products.
        """
        sql = "SELECT * FROM products WHERE seller_id = ?"
        if active_only:
            sql += " AND status = 'active'"
        rows = self.conn.execute(sql + " ORDER BY rowid", (seller_id,)).fetchall()
        tags = self._batch_get_tags([row["product_id"] for row in rows])
        return [self._row_to_product(row, tags.get(row["product_id"], [])) for row in rows]

    def get_existing_product_ids(self, seller_id: str, product_ids: Iterable[str]) -> set[str]:
        """Returns the subset of the given IDs present in a seller's catalog."""
        ids = list(dict.fromkeys(product_ids))
        if not ids:
            return set()
        found: set[str] = set()
        for chunk in _chunks(ids):
            placeholders = ",".join("?" * len(chunk))
            cursor = self.conn.execute(
                f"SELECT product_id FROM products WHERE seller_id = ? AND product_id IN ({placeholders})",
                [seller_id, *chunk],
            )
            found.update(row[0] for row in cursor.fetchall())
        return found

    def get_sales_metrics(self, seller_id: str) -> dict[str, int]:
        """Returns units sold per product for a seller."""
        cursor = self.conn.execute("SELECT product_id, units_sold FROM products WHERE seller_id = ?", (seller_id,))
        return {row[0]: row[1] for row in cursor.fetchall()}

    def update_sales_metrics(self, metrics: dict[str, int]) -> int:
        """Writes the sales metric for known products. Does NOT commit.

        Args:
            metrics: Units sold per product_id.

        Returns:
            Number of products updated.
        """
        cursor = self.conn.executemany(
            "UPDATE products SET units_sold = ? WHERE product_id = ?",
            [(int(units), product_id) for product_id, units in metrics.items()],
        )
        return cursor.rowcount if cursor.rowcount is not None else 0

    def archive_missing_products(self, seller_id: str, keep_ids: Iterable[str]) -> int:
        """Archives a seller's products that are not in keep_ids. Does NOT commit.

        Archived products drop out of the live catalog but keep their
        collection links, so a product that comes back is linked again.

        Args:
            seller_id: The owning seller.
            keep_ids: IDs of the products the marketplace still lists.

        Returns:
            Number of products archived.
        """
        keep = set(keep_ids)
        cursor = self.conn.execute(
            "SELECT product_id FROM products WHERE seller_id = ? AND status != 'archived' ORDER BY rowid",
            (seller_id,),
        )
        missing = [row[0] for row in cursor.fetchall() if row[0] not in keep]
        now = int(time.time())
        for chunk in _chunks(missing):
            placeholders = ",".join("?" * len(chunk))
            self.conn.execute(
                f"UPDATE products SET status = 'archived', updated_at = ? WHERE product_id IN ({placeholders})",
                [now, *chunk],
            )
        return len(missing)

    def _batch_get_tags(self, product_ids: list[str]) -> dict[str, list[str]]:
        """Batch load tags for multiple products, in their stored order.

        Args:
            product_ids: List of product IDs.

        Returns:
            Dict mapping product_id to list of tags.
        """
        if not product_ids:
            return {}

        result: dict[str, list[str]] = {}
        for chunk in _chunks(product_ids):
            placeholders = ",".join("?" * len(chunk))
            cursor = self.conn.execute(
                f"SELECT product_id, tag FROM product_tags WHERE product_id IN ({placeholders}) "
                "ORDER BY product_id, position",
                chunk,
            )
            for row in cursor.fetchall():
                result.setdefault(row[0], []).append(row[1])
        return result

    @staticmethod
    def _row_to_product(row: sqlite3.Row, tags: list[str]) -> Product:
        return Product(
            product_id=row["product_id"],
            seller_id=row["seller_id"],
            title=row["title"],
            price=parse_price(row["price"]),
            stock_quantity=row["stock_quantity"],
            category_id=row["category_id"],
            tags=tuple(tags),
            status=row["status"],
            created_at=row["created_at"],
            units_sold=row["units_sold"],
        )
