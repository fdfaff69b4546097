"""Seller collections service: manual and rule-based product collections.

Provides models, the condition evaluator, membership resolution, the sort
and pagination stages, and the manager that ties them to the local store.
"""

from __future__ import annotations

from storecollections.services.collections.collection_filter import CollectionListFilter, CollectionListSort
from storecollections.services.collections.collection_manager import CollectionManager
from storecollections.services.collections.evaluator import ConditionEvaluator
from storecollections.services.collections.models import (
    Collection,
    CollectionProduct,
    CollectionType,
    ConditionType,
    Operator,
    SortOrder,
)
from storecollections.services.collections.pagination import Page, paginate
from storecollections.services.collections.resolver import resolve_membership
from storecollections.services.collections.sorting import sort_products

__all__: list[str] = [
    "Collection",
    "CollectionListFilter",
    "CollectionListSort",
    "CollectionManager",
    "CollectionProduct",
    "CollectionType",
    "ConditionEvaluator",
    "ConditionType",
    "Operator",
    "Page",
    "SortOrder",
    "paginate",
    "resolve_membership",
    "sort_products",
]
