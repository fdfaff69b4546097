# storecollections/services/collections/collection_manager.py

"""Collection lifecycle manager: CRUD, membership, preview, sync.

Orchestrates collection persistence, condition validation, on-demand
membership resolution against the local catalog snapshot, and the
sort and pagination stages used by storefront reads.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from storecollections.core.errors import CollectionNotFoundError, ProductNotFoundError
from storecollections.services.collections.collection_filter import CollectionListFilter, apply_list_filter
from storecollections.services.collections.evaluator import ConditionEvaluator
from storecollections.services.collections.models import (
    Collection,
    CollectionType,
    Condition,
    SortOrder,
    conditions_from_json,
    conditions_to_json,
)
from storecollections.services.collections.pagination import DEFAULT_PAGE_SIZE, Page, paginate
from storecollections.services.collections.resolver import resolve_membership
from storecollections.services.collections.sorting import parse_sort_order, sort_products
from storecollections.utils.i18n import t
from storecollections.utils.slugs import generate_slug, unique_copy_slug

if TYPE_CHECKING:
    from storecollections.core.db import Database
    from storecollections.core.product import Product

__all__ = ["CollectionManager"]

logger = logging.getLogger("storecoll.collections.manager")


class CollectionManager:
    """Manages seller collections: CRUD, membership links, preview, sync.

    Membership is never stored for smart collections; it is resolved on
    demand from the catalog snapshot, and only the product count is cached.

    Attributes:
        database: The local store.
        evaluator: The condition evaluation engine.
        page_size: Default page size for get_collection_page.
    """

    def __init__(
        self,
        database: Database,
        evaluator: ConditionEvaluator | None = None,
        page_size: int | None = None,
    ) -> None:
        """Initializes the CollectionManager.

        Args:
            database: The local store.
            evaluator: Optional evaluator, a fresh one by default.
            page_size: Default page size (20 when omitted).
        """
        self.database = database
        self.evaluator = evaluator or ConditionEvaluator()
        self.page_size = page_size or DEFAULT_PAGE_SIZE

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, collection: Collection) -> int:
        """Validates and stores a new collection.

        The passed object is updated in place with its new ID, the final
        slug, the parsed conditions and the product count.

        Args:
            collection: The unsaved collection. Manual collections drop any
                conditions; an empty slug is derived from the name.

        Returns:
            The new collection_id.

        Raises:
            ValueError: If name or seller are missing or no slug can be derived.
            InvalidConditionError: If a condition is malformed.
            DuplicateSlugError: If the seller already uses the slug.
        """
        if not collection.seller_id:
            raise ValueError("Collection seller is required")
        self._prepare(collection)

        collection_id = self.database.create_collection(collection.seller_id, self._to_fields(collection))
        collection.collection_id = collection_id
        self._refresh_count(collection)
        self.database.commit()

        logger.info(
            t(
                "logs.collections.created",
                name=collection.name,
                id=collection_id,
                count=collection.product_count,
            )
        )
        return collection_id

    def update(self, collection: Collection) -> int:
        """Stores edits to an existing collection and re-syncs its count.

        Args:
            collection: The edited collection (collection_id must be set).

        Returns:
            The product count after the update.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
            ValueError: If the name is blank.
            InvalidConditionError: If a condition is malformed.
            DuplicateSlugError: If the new slug is used by another collection.
        """
        existing = self._require(collection.collection_id)
        collection.seller_id = existing.seller_id
        self._prepare(collection)

        self.database.update_collection(collection.collection_id, self._to_fields(collection))
        count = self._refresh_count(collection)
        self.database.commit()

        logger.info(t("logs.collections.updated", name=collection.name, id=collection.collection_id, count=count))
        return count

    def delete(self, collection_id: int) -> None:
        """Deletes a collection and all of its product links.

        Args:
            collection_id: The collection to delete.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
        """
        self._require(collection_id)
        self.database.delete_collection(collection_id)
        self.database.commit()
        logger.info(t("logs.collections.deleted", id=collection_id))

    def duplicate(self, collection_id: int) -> int:
        """Copies a collection with its conditions and product links.

        The copy is named "<name> (Copy)", gets the first free
        ``<slug>-copy[-N]`` slug and starts as an inactive draft.

        Args:
            collection_id: The collection to copy.

        Returns:
            The collection_id of the copy.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
        """
        source = self._require(collection_id)
        base_slug = source.slug or generate_slug(source.name)
        slug = unique_copy_slug(base_slug, lambda s: self.database.slug_exists(source.seller_id, s))

        copy = dataclasses.replace(
            source,
            collection_id=0,
            name=f"{source.name} (Copy)",
            slug=slug,
            conditions=list(source.conditions),
            is_active=False,
            is_featured=False,
            is_draft=True,
            product_count=0,
            created_at=0,
            updated_at=0,
        )
        new_id = self.database.create_collection(copy.seller_id, self._to_fields(copy))
        copy.collection_id = new_id
        self.database.copy_collection_products(collection_id, new_id)
        self._refresh_count(copy)
        self.database.commit()

        logger.info(t("logs.collections.duplicated", source=collection_id, id=new_id, slug=slug))
        return new_id

    def get(self, collection_id: int) -> Collection | None:
        """Loads a single collection.

        Args:
            collection_id: The collection to load.

        Returns:
            The Collection, or None if not found.
        """
        row = self.database.get_collection(collection_id)
        return self._hydrate_row(row) if row else None

    def get_by_slug(self, seller_id: str, slug: str) -> Collection | None:
        """Loads a collection by its seller-scoped slug.

        Args:
            seller_id: The owning seller.
            slug: The collection slug.

        Returns:
            The Collection, or None if not found.
        """
        row = self.database.get_collection_by_slug(seller_id, slug)
        return self._hydrate_row(row) if row else None

    def list_collections(self, seller_id: str, filters: CollectionListFilter | None = None) -> list[Collection]:
        """Loads a seller's collections, filtered and ordered.

        Args:
            seller_id: The owning seller.
            filters: Optional list filters; recently updated first by default.

        Returns:
            List of Collection instances.
        """
        collections = [self._hydrate_row(row) for row in self.database.get_collections(seller_id)]
        return apply_list_filter(collections, filters)

    # ------------------------------------------------------------------
    # EVALUATION
    # ------------------------------------------------------------------

    def preview_smart_collection(
        self, conditions: Sequence[Condition | dict[str, Any]], seller_id: str
    ) -> list[Product]:
        """Shows which products a condition list would match, without saving.

        Args:
            conditions: Condition objects or their dict wire shape.
            seller_id: The seller whose active catalog is searched.

        Returns:
            Matching products in catalog order.

        Raises:
            InvalidConditionError: If any condition is malformed.
        """
        parsed = self.evaluator.validate(conditions)
        catalog = self.database.get_products(seller_id)
        matches = self.evaluator.evaluate(parsed, catalog)
        logger.debug("Preview for seller %s: %d of %d products match", seller_id, len(matches), len(catalog))
        return matches

    def sync_smart_collection(self, collection_id: int) -> int:
        """Re-resolves a saved collection and stores its product count.

        Args:
            collection_id: The collection to sync.

        Returns:
            The current product count.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
        """
        collection = self._require(collection_id)
        count = self._refresh_count(collection)
        self.database.commit()
        logger.info(t("logs.collections.synced", id=collection_id, count=count))
        return count

    def refresh(self, seller_id: str) -> dict[str, int]:
        """Re-syncs all smart collections of a seller.

        Called after the catalog snapshot was refreshed.

        Args:
            seller_id: The owning seller.

        Returns:
            Dict mapping collection slug to product count.
        """
        result: dict[str, int] = {}
        for collection_id in self.database.get_smart_collection_ids(seller_id):
            collection = self._require(collection_id)
            result[collection.slug] = self._refresh_count(collection)

        if result:
            self.database.commit()
            logger.info(t("logs.collections.refreshed", count=len(result)))
        return result

    def get_collection_products(
        self, collection_id: int, sort_order: SortOrder | str | None = None
    ) -> list[Product]:
        """Resolves and sorts the products of a collection.

        Args:
            collection_id: The collection to read.
            sort_order: Overrides the collection's own sort order.

        Returns:
            The sorted membership.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
            ValueError: If sort_order is not a known order.
        """
        collection = self._require(collection_id)
        order = parse_sort_order(sort_order, default=collection.sort_order)
        products = self._resolve(collection)

        sales = None
        if order == SortOrder.BEST_SELLING:
            sales = self.database.get_sales_metrics(collection.seller_id)
        return sort_products(products, order, sales)

    def get_collection_page(
        self,
        collection_id: int,
        page: int,
        page_size: int | None = None,
        sort_order: SortOrder | str | None = None,
    ) -> Page:
        """Resolves, sorts and paginates the products of a collection.

        Args:
            collection_id: The collection to read.
            page: 1-indexed page number.
            page_size: Products per page, the manager default when omitted.
            sort_order: Overrides the collection's own sort order.

        Returns:
            The requested Page.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
            ValueError: If page or page_size is smaller than 1.
        """
        products = self.get_collection_products(collection_id, sort_order)
        return paginate(products, page, page_size or self.page_size)

    # ------------------------------------------------------------------
    # MANUAL LINKS
    # ------------------------------------------------------------------

    def add_product_to_collection(self, product_id: str, collection_id: int, position: int | None = None) -> bool:
        """Links a product to a collection.

        Args:
            product_id: The product to link.
            collection_id: The target collection.
            position: Explicit link position; appended when None.

        Returns:
            True if the link was created, False if it already existed.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
            ProductNotFoundError: If the product is not in the seller's catalog.
        """
        collection = self._require(collection_id)
        if not self.database.get_existing_product_ids(collection.seller_id, [product_id]):
            raise ProductNotFoundError(product_id)

        created = self.database.add_collection_product(collection_id, product_id, position)
        self._refresh_count(collection)
        self.database.commit()

        if created:
            logger.debug(t("logs.collections.link_added", product=product_id, id=collection_id))
        return created

    def remove_product_from_collection(self, product_id: str, collection_id: int) -> bool:
        """Removes a product link.

        A smart collection keeps a product that still matches its
        conditions; only the explicit link is removed.

        Args:
            product_id: The product to unlink.
            collection_id: The collection.

        Returns:
            True if a link was removed.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
        """
        collection = self._require(collection_id)
        removed = self.database.remove_collection_product(collection_id, product_id)
        self._refresh_count(collection)
        self.database.commit()

        if removed:
            logger.debug(t("logs.collections.link_removed", product=product_id, id=collection_id))
        return removed

    def bulk_add_products_to_collection(self, product_ids: Iterable[str], collection_id: int) -> int:
        """Links many products; nothing is written if any product is unknown.

        Args:
            product_ids: Products to append, in order.
            collection_id: The target collection.

        Returns:
            Number of new links.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
            ProductNotFoundError: For the first product missing from the
                seller's catalog.
        """
        collection = self._require(collection_id)
        ids = list(dict.fromkeys(product_ids))
        known = self.database.get_existing_product_ids(collection.seller_id, ids)
        for product_id in ids:
            if product_id not in known:
                raise ProductNotFoundError(product_id)

        added = self.database.bulk_add_collection_products(collection_id, ids)
        self._refresh_count(collection)
        self.database.commit()

        logger.info(t("logs.collections.bulk_added", count=added, id=collection_id))
        return added

    def bulk_remove_products_from_collection(self, product_ids: Iterable[str], collection_id: int) -> int:
        """Removes many product links.

        Args:
            product_ids: Products to unlink.
            collection_id: The collection.

        Returns:
            Number of links removed.

        Raises:
            CollectionNotFoundError: If the collection does not exist.
        """
        collection = self._require(collection_id)
        removed = self.database.bulk_remove_collection_products(collection_id, product_ids)
        self._refresh_count(collection)
        self.database.commit()

        logger.info(t("logs.collections.bulk_removed", count=removed, id=collection_id))
        return removed

    # ------------------------------------------------------------------
    # PRIVATE HELPERS
    # ------------------------------------------------------------------

    def _require(self, collection_id: int) -> Collection:
        collection = self.get(collection_id)
        if collection is None:
            raise CollectionNotFoundError(collection_id)
        return collection

    def _prepare(self, collection: Collection) -> None:
        """Normalizes name, slug and conditions before a write."""
        collection.name = collection.name.strip()
        if not collection.name:
            raise ValueError("Collection name is required")

        collection.slug = generate_slug(collection.slug or collection.name)
        if not collection.slug:
            raise ValueError(f"Cannot derive a slug from '{collection.name}'")

        if collection.is_smart:
            collection.conditions = self.evaluator.validate(collection.conditions)
        else:
            collection.conditions = []

    def _resolve(self, collection: Collection) -> list[Product]:
        catalog = self.database.get_products(collection.seller_id)
        rule_matches = self.evaluator.evaluate(collection.conditions, catalog) if collection.is_smart else []
        links = self.database.get_collection_links(collection.collection_id)
        return resolve_membership(collection, rule_matches, links, catalog)

    def _refresh_count(self, collection: Collection) -> int:
        count = len(self._resolve(collection))
        self.database.set_product_count(collection.collection_id, count)
        collection.product_count = count
        return count

    @staticmethod
    def _to_fields(collection: Collection) -> dict[str, Any]:
        return {
            "name": collection.name,
            "slug": collection.slug,
            "description": collection.description,
            "collection_type": collection.collection_type.value,
            "conditions": conditions_to_json(collection.conditions),
            "sort_order": collection.sort_order.value,
            "is_active": int(collection.is_active),
            "is_featured": int(collection.is_featured),
            "is_draft": int(collection.is_draft),
            "visible_storefront": int(collection.visible_storefront),
            "visible_mobile_app": int(collection.visible_mobile_app),
        }

    @staticmethod
    def _hydrate_row(row: dict) -> Collection:
        """Creates a Collection from a database row.

        Args:
            row: Database row dict with collection fields.

        Returns:
            Hydrated Collection with conditions loaded from JSON.
        """
        return Collection(
            collection_id=row["collection_id"],
            seller_id=row["seller_id"],
            name=row["name"],
            slug=row["slug"],
            description=row.get("description") or "",
            collection_type=CollectionType(row["collection_type"]),
            conditions=conditions_from_json(row.get("conditions", "")),
            sort_order=parse_sort_order(row.get("sort_order")),
            is_active=bool(row.get("is_active", 1)),
            is_featured=bool(row.get("is_featured", 0)),
            is_draft=bool(row.get("is_draft", 0)),
            visible_storefront=bool(row.get("visible_storefront", 1)),
            visible_mobile_app=bool(row.get("visible_mobile_app", 1)),
            product_count=row.get("product_count", 0),
            created_at=row.get("created_at", 0),
            updated_at=row.get("updated_at", 0),
        )
