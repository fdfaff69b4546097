from __future__ import annotations

__all__: list[str] = ["MarketplaceClient", "fetch_and_store_catalog"]

from storecollections.integrations.marketplace_api import MarketplaceClient, fetch_and_store_catalog
