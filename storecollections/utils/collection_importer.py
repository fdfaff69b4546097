# storecollections/utils/collection_importer.py

"""Imports seller collections from a portable JSON or CSV file.

Deserializes collection settings and conditions from a file previously
written by CollectionExporter.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from storecollections.services.collections.models import (
    Collection,
    CollectionType,
    conditions_from_list,
)
from storecollections.services.collections.sorting import parse_sort_order

__all__ = ["CollectionImporter"]

logger = logging.getLogger("storecoll.collection_importer")

_TRUE_STRINGS = frozenset({"true", "1", "yes"})


def _as_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


class CollectionImporter:
    """Imports collections from JSON or CSV format.

    Unknown fields are silently ignored for forward compatibility. Entries
    that fail validation are skipped with a warning.
    """

    @staticmethod
    def import_collections(file_path: Path) -> list[Collection]:
        """Imports collections from a JSON file.

        Args:
            file_path: Path to the JSON file to import.

        Returns:
            List of Collection instances (without collection_id or seller,
            ready to be created via CollectionManager).

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the JSON is malformed or has no collection list.
        """
        return [collection for collection, _ in CollectionImporter.import_entries(file_path)]

    @staticmethod
    def import_entries(file_path: Path) -> list[tuple[Collection, list[str]]]:
        """Imports collections from a JSON file with their product links.

        Args:
            file_path: Path to the JSON file to import.

        Returns:
            List of (Collection, linked product IDs) pairs.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the JSON is malformed or has no collection list.
        """
        if not file_path.exists():
            msg = f"File not found: {file_path}"
            raise FileNotFoundError(msg)

        with open(file_path, encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError as exc:
                msg = f"Invalid JSON: {exc}"
                raise ValueError(msg) from exc

        if not isinstance(data, dict) or "collections" not in data:
            msg = "Missing 'collections' key in JSON"
            raise ValueError(msg)

        raw_collections = data["collections"]
        if not isinstance(raw_collections, list):
            msg = "'collections' must be a list"
            raise ValueError(msg)

        result = CollectionImporter._parse_entries(raw_collections)
        logger.info("Imported %d collections from %s", len(result), file_path)
        return result

    @staticmethod
    def import_csv(file_path: Path) -> list[tuple[Collection, list[str]]]:
        """Imports collections from a CSV file.

        Args:
            file_path: Path to the CSV file to import.

        Returns:
            List of (Collection, linked product IDs) pairs.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        if not file_path.exists():
            msg = f"File not found: {file_path}"
            raise FileNotFoundError(msg)

        entries: list[dict[str, Any]] = []
        with open(file_path, newline="", encoding="utf-8") as fh:
            for row in csv.DictReader(fh):
                entry: dict[str, Any] = dict(row)
                try:
                    entry["conditions"] = json.loads(row.get("conditions") or "[]")
                except json.JSONDecodeError as exc:
                    logger.warning("Skipping collection '%s' with unreadable conditions: %s", row.get("name"), exc)
                    continue
                entry["product_ids"] = [pid for pid in (row.get("product_ids") or "").split(";") if pid]
                entries.append(entry)

        result = CollectionImporter._parse_entries(entries)
        logger.info("Imported %d collections from %s", len(result), file_path)
        return result

    @staticmethod
    def _parse_entries(raw_collections: list[Any]) -> list[tuple[Collection, list[str]]]:
        result: list[tuple[Collection, list[str]]] = []
        for entry in raw_collections:
            try:
                result.append(CollectionImporter._dict_to_collection(entry))
            except (ValueError, KeyError, TypeError, AttributeError) as exc:
                logger.warning("Skipping invalid collection entry: %s", exc)
        return result

    @staticmethod
    def _dict_to_collection(data: dict) -> tuple[Collection, list[str]]:
        """Deserializes a single collection from a dict.

        Args:
            data: Dict with name, type, conditions or product_ids, and
                optional settings.

        Returns:
            The unsaved Collection and its linked product IDs.

        Raises:
            ValueError: If required fields are missing or invalid.
        """
        name = (data.get("name") or "").strip()
        if not name:
            msg = "Collection name is required"
            raise ValueError(msg)

        collection_type = CollectionType(data.get("type") or "manual")
        conditions = []
        if collection_type == CollectionType.SMART:
            conditions = conditions_from_list(data.get("conditions") or [])

        raw_ids = data.get("product_ids") or []
        if not isinstance(raw_ids, list):
            msg = "'product_ids' must be a list"
            raise ValueError(msg)

        collection = Collection(
            name=name,
            slug=data.get("slug") or "",
            description=data.get("description") or "",
            collection_type=collection_type,
            conditions=conditions,
            sort_order=parse_sort_order(data.get("sort_order")),
            is_active=_as_bool(data.get("is_active"), True),
            is_featured=_as_bool(data.get("is_featured"), False),
            is_draft=_as_bool(data.get("is_draft"), False),
            visible_storefront=_as_bool(data.get("visible_storefront"), True),
            visible_mobile_app=_as_bool(data.get("visible_mobile_app"), True),
        )
        return collection, [str(pid) for pid in raw_ids]
