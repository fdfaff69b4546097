"""Collection database operations.

Handles CRUD for manual and smart collections. Rows are returned as plain
dicts; CollectionManager hydrates them into Collection objects.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from typing import Any

from storecollections.core.errors import DuplicateSlugError

logger = logging.getLogger("storecoll.database")

__all__ = ["CollectionQueryMixin"]

# Columns a caller may write; anything else in the field dict is ignored
_WRITABLE_COLUMNS = (
    "name",
    "slug",
    "description",
    "collection_type",
    "conditions",
    "sort_order",
    "is_active",
    "is_featured",
    "is_draft",
    "visible_storefront",
    "visible_mobile_app",
    "product_count",
)


class CollectionQueryMixin:
    """Mixin providing collection operations.

    Requires ConnectionBase attributes: conn.
    """

    def create_collection(self, seller_id: str, fields: dict[str, Any]) -> int:
        """Creates a new collection row.

        Args:
            seller_id: The owning seller.
            fields: Column values; unknown keys are ignored.

        Returns:
            The new collection_id.

        Raises:
            DuplicateSlugError: If the seller already has a collection with
                this slug.
        """
        values = {key: fields[key] for key in _WRITABLE_COLUMNS if key in fields}
        now = int(time.time())
        values["seller_id"] = seller_id
        values["created_at"] = fields.get("created_at") or now
        values["updated_at"] = fields.get("updated_at") or now

        columns = ", ".join(values)
        placeholders = ", ".join("?" * len(values))
        try:
            cursor = self.conn.execute(
                f"INSERT INTO collections ({columns}) VALUES ({placeholders})",
                tuple(values.values()),
            )
        except sqlite3.IntegrityError as exc:
            if "slug" in str(exc):
                raise DuplicateSlugError(values.get("slug", ""), seller_id) from exc
            raise
        return cursor.lastrowid or 0

    def update_collection(self, collection_id: int, fields: dict[str, Any]) -> bool:
        """Updates the given columns of a collection and bumps updated_at.

        Args:
            collection_id: The collection to update.
            fields: Column values; unknown keys are ignored.

        Returns:
            True if a row was updated.

        Raises:
            DuplicateSlugError: If the new slug collides with another
                collection of the same seller.
        """
        values = {key: fields[key] for key in _WRITABLE_COLUMNS if key in fields}
        values["updated_at"] = int(time.time())

        assignments = ", ".join(f"{column} = ?" for column in values)
        try:
            cursor = self.conn.execute(
                f"UPDATE collections SET {assignments} WHERE collection_id = ?",
                (*values.values(), collection_id),
            )
        except sqlite3.IntegrityError as exc:
            if "slug" in str(exc):
                row = self.get_collection(collection_id)
                raise DuplicateSlugError(values.get("slug", ""), row["seller_id"] if row else "") from exc
            raise
        return cursor.rowcount > 0

    def delete_collection(self, collection_id: int) -> bool:
        """Deletes a collection; its product links cascade.

        Args:
            collection_id: The collection to delete.

        Returns:
            True if a row was deleted.
        """
        cursor = self.conn.execute("DELETE FROM collections WHERE collection_id = ?", (collection_id,))
        return cursor.rowcount > 0

    def get_collection(self, collection_id: int) -> dict | None:
        """Retrieves a single collection by ID.

        Args:
            collection_id: The collection to retrieve.

        Returns:
            Dict with collection fields, or None if not found.
        """
        cursor = self.conn.execute("SELECT * FROM collections WHERE collection_id = ?", (collection_id,))
        row = cursor.fetchone()
        return dict(row) if row else None

    def get_collection_by_slug(self, seller_id: str, slug: str) -> dict | None:
        cursor = self.conn.execute(
            "SELECT * FROM collections WHERE seller_id = ? AND slug = ?",
            (seller_id, slug),
        )
        row = cursor.fetchone()
        return dict(row) if row else None

    def get_collections(self, seller_id: str) -> list[dict]:
        """Retrieves all collections of a seller, most recently updated first.

        Args:
            seller_id: The owning seller.

        Returns:
            List of dicts with collection fields.
        """
        cursor = self.conn.execute(
            "SELECT * FROM collections WHERE seller_id = ? ORDER BY updated_at DESC, collection_id DESC",
            (seller_id,),
        )
        return [dict(row) for row in cursor.fetchall()]

    def get_smart_collection_ids(self, seller_id: str) -> list[int]:
        """Returns the IDs of a seller's smart collections."""
        cursor = self.conn.execute(
            "SELECT collection_id FROM collections WHERE seller_id = ? AND collection_type = 'smart' "
            "ORDER BY collection_id",
            (seller_id,),
        )
        return [row[0] for row in cursor.fetchall()]

    def slug_exists(self, seller_id: str, slug: str, exclude_id: int | None = None) -> bool:
        """Checks whether a seller already uses a slug.

        Args:
            seller_id: The owning seller.
            slug: The slug to look up.
            exclude_id: A collection to ignore (the one being edited).

        Returns:
            True if another collection uses the slug.
        """
        sql = "SELECT 1 FROM collections WHERE seller_id = ? AND slug = ?"
        params: list[Any] = [seller_id, slug]
        if exclude_id is not None:
            sql += " AND collection_id != ?"
            params.append(exclude_id)
        return self.conn.execute(sql, params).fetchone() is not None

    def set_product_count(self, collection_id: int, count: int) -> None:
        """Stores the cached membership size without touching updated_at."""
        self.conn.execute(
            "UPDATE collections SET product_count = ? WHERE collection_id = ?",
            (count, collection_id),
        )
