# storecollections/utils/collection_exporter.py

"""Exports seller collections to portable JSON or CSV files.

Serializes collection settings and conditions into a self-contained
format for backup, sharing between shops, or migration.
"""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from storecollections.services.collections.models import Collection, condition_to_dict

__all__ = ["CSV_COLUMNS", "CollectionExporter"]

logger = logging.getLogger("storecoll.collection_exporter")

_FORMAT_VERSION = "1.0"

CSV_COLUMNS: tuple[str, ...] = (
    "name",
    "slug",
    "description",
    "type",
    "sort_order",
    "is_active",
    "is_featured",
    "is_draft",
    "visible_storefront",
    "visible_mobile_app",
    "conditions",
    "product_ids",
)


class CollectionExporter:
    """Exports collections to JSON or CSV.

    Every collection carries its ordered list of linked product IDs, so
    pins on smart collections survive a round trip. Smart collections also
    carry their conditions; rule matches are re-resolved after import.
    """

    @staticmethod
    def export(
        collections: list[Collection],
        output_path: Path,
        product_ids: Mapping[int, list[str]] | None = None,
    ) -> None:
        """Exports collections to a JSON file.

        Args:
            collections: The collections to export.
            output_path: The file path to write the JSON to.
            product_ids: Linked product IDs per collection_id, in link order.

        Raises:
            OSError: If the file cannot be written.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        links = product_ids or {}

        payload = {
            "version": _FORMAT_VERSION,
            "count": len(collections),
            "collections": [
                CollectionExporter._collection_to_dict(c, links.get(c.collection_id, [])) for c in collections
            ],
        }

        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)

        logger.info("Exported %d collections to %s", len(collections), output_path)

    @staticmethod
    def export_csv(
        collections: list[Collection],
        output_path: Path,
        product_ids: Mapping[int, list[str]] | None = None,
    ) -> None:
        """Exports collections to a CSV file, one row per collection.

        Conditions are written as a JSON array cell and product IDs as a
        ``;`` separated list.

        Args:
            collections: The collections to export.
            output_path: The file path to write the CSV to.
            product_ids: Linked product IDs per collection_id, in link order.

        Raises:
            OSError: If the file cannot be written.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        links = product_ids or {}

        with open(output_path, "w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=CSV_COLUMNS)
            writer.writeheader()
            for collection in collections:
                row = CollectionExporter._collection_to_dict(collection, links.get(collection.collection_id, []))
                row["conditions"] = json.dumps(row.get("conditions", []), ensure_ascii=False)
                row["product_ids"] = ";".join(row.get("product_ids", []))
                for flag in ("is_active", "is_featured", "is_draft", "visible_storefront", "visible_mobile_app"):
                    row[flag] = "true" if row[flag] else "false"
                writer.writerow(row)

        logger.info("Exported %d collections to %s", len(collections), output_path)

    @staticmethod
    def _collection_to_dict(collection: Collection, product_ids: list[str]) -> dict[str, Any]:
        """Serializes a Collection to a portable dict.

        Args:
            collection: The collection to serialize.
            product_ids: Its linked product IDs.

        Returns:
            Dict with settings, ``product_ids`` for every collection and
            ``conditions`` for smart ones.
        """
        result: dict[str, Any] = {
            "name": collection.name,
            "slug": collection.slug,
            "description": collection.description,
            "type": collection.collection_type.value,
            "sort_order": collection.sort_order.value,
            "is_active": collection.is_active,
            "is_featured": collection.is_featured,
            "is_draft": collection.is_draft,
            "visible_storefront": collection.visible_storefront,
            "visible_mobile_app": collection.visible_mobile_app,
        }
        if collection.is_smart:
            result["conditions"] = [condition_to_dict(c) for c in collection.conditions]
        result["product_ids"] = list(product_ids)
        return result
