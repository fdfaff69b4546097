# storecollections/services/collections/resolver.py

"""Membership resolution: rule matches plus manual links.

Manual collections are exactly their linked products. Smart collections are
the union of the rule matches and the manually linked products; a manual
link can pin a product in, but never push a rule match out.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from storecollections.services.collections.models import Collection, CollectionProduct

if TYPE_CHECKING:
    from storecollections.core.product import Product

__all__ = ["ordered_links", "resolve_membership"]

logger = logging.getLogger("storecoll.collections.resolver")


def ordered_links(links: Iterable[CollectionProduct]) -> list[CollectionProduct]:
    """Sorts links by position; ties keep their input order."""
    return sorted(links, key=lambda link: link.position)


def resolve_membership(
    collection: Collection,
    rule_matches: Iterable[Product],
    manual_links: Iterable[CollectionProduct],
    catalog: Iterable[Product],
) -> list[Product]:
    """Computes the effective product set of a collection.

    Args:
        collection: The collection being resolved.
        rule_matches: Products that satisfy the collection's conditions
            (ignored for manual collections).
        manual_links: Link rows of this collection; rows of other
            collections are ignored.
        catalog: Products the links are resolved against. Links to products
            outside the catalog are skipped.

    Returns:
        Manual: linked products in link order. Smart: rule matches in their
        given order, then linked products not already matched, in link order.
        Never contains a product twice.
    """
    by_id: dict[str, Product] = {p.product_id: p for p in catalog}
    links = ordered_links(link for link in manual_links if link.collection_id == collection.collection_id)

    result: list[Product] = []
    seen: set[str] = set()

    if collection.is_smart:
        for product in rule_matches:
            if product.product_id not in seen:
                seen.add(product.product_id)
                result.append(product)

    skipped = 0
    for link in links:
        if link.product_id in seen:
            continue
        product = by_id.get(link.product_id)
        if product is None:
            skipped += 1
            continue
        seen.add(link.product_id)
        result.append(product)

    if skipped:
        logger.debug(
            "Collection %d: skipped %d links to products outside the catalog",
            collection.collection_id,
            skipped,
        )
    return result
