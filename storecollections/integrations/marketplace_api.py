"""Marketplace API client for a seller's product catalog.

Pulls the seller's products page by page and the per-product sales metric
used by best-selling ordering. The products are stored in the local
catalog snapshot collections are resolved against.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from storecollections.core.errors import CatalogUnavailableError
from storecollections.core.product import Product, product_from_dict
from storecollections.utils.i18n import t
from storecollections.version import __version__

logger = logging.getLogger("storecoll.marketplace_api")

__all__ = ["MarketplaceClient", "fetch_and_store_catalog"]

# Upper bound on followed pages, guards against a server that never ends
MAX_PAGES = 500


class MarketplaceClient:
    """Client for the marketplace seller API.

    Uses a shared session with an optional bearer token. Every network or
    parse failure is raised as CatalogUnavailableError.
    """

    def __init__(self, base_url: str, token: str | None = None, timeout: float = 10) -> None:
        """Initializes the client with a configured session.

        Args:
            base_url: API root, e.g. ``http://localhost:5000/api``.
            token: Optional bearer token of the seller.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json", "User-Agent": f"StoreCollections/{__version__}"})
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning(t("logs.catalog.network_error", url=url, error=str(exc)))
            raise CatalogUnavailableError(f"Network error fetching {url}: {exc}") from exc

        if response.status_code != 200:
            logger.warning(t("logs.catalog.bad_status", url=url, status=response.status_code))
            raise CatalogUnavailableError(f"Unexpected status {response.status_code} from {url}")

        try:
            return response.json()
        except ValueError as exc:
            raise CatalogUnavailableError(f"Invalid JSON from {url}") from exc

    def get_products(self, seller_id: str) -> list[Product]:
        """Fetches the complete catalog of a seller.

        Follows the ``pagination`` block of the response until the last
        page; a response without one is treated as a single page.

        Args:
            seller_id: The seller whose products are fetched.

        Returns:
            List of Products in server order. Entries without an ID are
            skipped.

        Raises:
            CatalogUnavailableError: On network, status or parse failures.
        """
        products: list[Product] = []
        page = 1
        while page <= MAX_PAGES:
            data = self._get_json("/seller/products", {"sellerId": seller_id, "page": page})
            if isinstance(data, list):
                items, pages = data, 1
            elif isinstance(data, dict):
                items = data.get("products") or []
                pages = int((data.get("pagination") or {}).get("pages") or 1)
            else:
                raise CatalogUnavailableError("Unexpected product list payload")

            for item in items:
                try:
                    product = product_from_dict(item)
                except (KeyError, TypeError, ValueError) as exc:
                    logger.warning(t("logs.catalog.skipped_product", error=str(exc)))
                    continue
                if not product.seller_id:
                    product = product_from_dict({**item, "seller_id": seller_id})
                products.append(product)

            if page >= pages or not items:
                break
            page += 1

        logger.info(t("logs.catalog.fetched", count=len(products), seller=seller_id))
        return products

    def get_sales(self, seller_id: str) -> dict[str, int]:
        """Fetches units sold per product.

        Accepts either ``{"sales": {"<id>": n}}`` or a list of
        ``{"productId": ..., "unitsSold": ...}`` objects.

        Args:
            seller_id: The seller whose metrics are fetched.

        Returns:
            Dict mapping product_id to units sold.

        Raises:
            CatalogUnavailableError: On network, status or parse failures.
        """
        data = self._get_json("/seller/products/sales", {"sellerId": seller_id})
        if isinstance(data, dict):
            data = data.get("sales", data)

        try:
            if isinstance(data, dict):
                return {str(key): int(value) for key, value in data.items()}
            return {
                str(entry.get("productId") or entry.get("product_id")): int(
                    entry.get("unitsSold", entry.get("units_sold", 0))
                )
                for entry in data
            }
        except (AttributeError, TypeError, ValueError) as exc:
            raise CatalogUnavailableError("Unexpected sales payload") from exc


def fetch_and_store_catalog(seller_id: str, db: Any, client: MarketplaceClient, with_sales: bool = True) -> int:
    """Fetches a seller's catalog and replaces the local copy with it.

    Fetched products are upserted; stored products the marketplace no longer
    returns are archived in the same transaction.

    Args:
        seller_id: The seller whose catalog is refreshed.
        db: Database instance with batch_upsert_products(),
            archive_missing_products(), update_sales_metrics() and commit().
        client: MarketplaceClient instance.
        with_sales: Also refresh the sales metric.

    Returns:
        Number of products stored.

    Raises:
        CatalogUnavailableError: If the marketplace cannot be reached.
    """
    products = client.get_products(seller_id)
    sales = client.get_sales(seller_id) if with_sales else {}

    count = db.batch_upsert_products(products)
    archived = db.archive_missing_products(seller_id, [p.product_id for p in products])
    if sales:
        db.update_sales_metrics(sales)
    db.commit()

    logger.info(t("logs.catalog.stored", count=count, seller=seller_id))
    if archived:
        logger.info(t("logs.catalog.archived", count=archived, seller=seller_id))
    return count
