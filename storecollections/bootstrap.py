"""Startup wiring for the collections engine.

Builds the logging setup, message catalog, local store, marketplace
client and collection manager from the active Config, in that order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from storecollections.config import Config, config
from storecollections.core.db import Database
from storecollections.core.logging import LOG_FILE_NAME, setup_logging
from storecollections.integrations.marketplace_api import MarketplaceClient, fetch_and_store_catalog
from storecollections.services.collections.collection_manager import CollectionManager
from storecollections.utils.i18n import init_i18n

logger = logging.getLogger("storecoll.bootstrap")

__all__ = ["Services", "bootstrap", "refresh_catalog"]


@dataclass
class Services:
    """The wired-up engine components.

    Attributes:
        database: The open local store.
        client: Marketplace API client.
        manager: Collection manager bound to the database.
    """

    database: Database
    client: MarketplaceClient
    manager: CollectionManager

    def close(self) -> None:
        self.database.close()


def bootstrap(cfg: Config | None = None, db_path: Path | None = None) -> Services:
    """Initializes logging, i18n and all engine components.

    Args:
        cfg: Configuration to use, the module-level config by default.
        db_path: Override for the database file.

    Returns:
        The wired Services.
    """
    cfg = cfg or config
    setup_logging(cfg.log_level, cfg.LOG_DIR / LOG_FILE_NAME)
    init_i18n(cfg.UI_LANGUAGE)

    database = Database(db_path or cfg.DATABASE_FILE)
    client = MarketplaceClient(cfg.API_BASE_URL, token=cfg.API_TOKEN, timeout=cfg.REQUEST_TIMEOUT)
    manager = CollectionManager(database, page_size=cfg.PAGE_SIZE)

    logger.debug("Engine ready (database=%s, api=%s)", database.db_path, cfg.API_BASE_URL)
    return Services(database=database, client=client, manager=manager)


def refresh_catalog(services: Services, seller_id: str) -> dict[str, int]:
    """Pulls the seller's catalog and re-syncs their smart collections.

    Args:
        services: The wired Services.
        seller_id: The seller to refresh.

    Returns:
        Dict mapping collection slug to product count.

    Raises:
        CatalogUnavailableError: If the marketplace cannot be reached.
    """
    fetch_and_store_catalog(seller_id, services.database, services.client)
    return services.manager.refresh(seller_id)
