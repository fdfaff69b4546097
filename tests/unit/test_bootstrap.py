# tests/unit/test_bootstrap.py

"""Unit tests for engine startup wiring."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from storecollections.bootstrap import Services, bootstrap, refresh_catalog
from storecollections.config import Config
from storecollections.core.errors import CatalogUnavailableError
from storecollections.core.logging import logger as app_logger
from storecollections.core.product import Product
from storecollections.services.collections.models import Collection, CollectionType


@pytest.fixture
def cfg(tmp_path: Path) -> Config:
    return Config(
        DATA_DIR=tmp_path,
        LOG_DIR=tmp_path / "logs",
        SETTINGS_FILE=tmp_path / "settings.json",
        DATABASE_FILE=tmp_path / "collections.db",
        PAGE_SIZE=5,
        API_TOKEN="tok",
    )


@pytest.fixture
def services(cfg: Config):
    with patch("storecollections.bootstrap.setup_logging"):
        wired = bootstrap(cfg)
    yield wired
    wired.close()


class TestBootstrap:
    """Tests for bootstrap()."""

    def test_wires_components(self, services: Services, cfg: Config) -> None:
        assert services.database.db_path == cfg.DATABASE_FILE
        assert services.manager.database is services.database
        assert services.manager.page_size == 5
        assert services.client.base_url == cfg.API_BASE_URL

    def test_configures_logging(self, cfg: Config) -> None:
        with patch("storecollections.bootstrap.setup_logging") as mock_setup:
            wired = bootstrap(cfg, db_path=cfg.DATA_DIR / "other.db")
        wired.close()

        mock_setup.assert_called_once_with(cfg.log_level, cfg.LOG_DIR / "storecollections.log")
        assert wired.database.db_path == cfg.DATA_DIR / "other.db"

    def test_writes_log_file(self, cfg: Config) -> None:
        saved_handlers = list(app_logger.handlers)
        saved_level = app_logger.level
        for handler in saved_handlers:
            app_logger.removeHandler(handler)
        try:
            cfg.LOG_LEVEL = "ERROR"
            bootstrap(cfg).close()
            for handler in app_logger.handlers:
                handler.flush()
            assert "Engine ready" in (cfg.LOG_DIR / "storecollections.log").read_text(encoding="utf-8")
        finally:
            for handler in list(app_logger.handlers):
                app_logger.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                app_logger.addHandler(handler)
            app_logger.setLevel(saved_level)


class TestRefreshCatalog:
    """Tests for refresh_catalog()."""

    def test_stores_catalog_and_resyncs(self, services: Services) -> None:
        collection = Collection(
            seller_id="s1",
            name="Cheap",
            collection_type=CollectionType.SMART,
            conditions=[{"type": "price", "operator": "less_than", "value": 10}],
        )
        services.manager.create(collection)
        assert collection.product_count == 0

        services.client = MagicMock()
        services.client.get_products.return_value = [
            Product(product_id="a", seller_id="s1", price=Decimal("4")),
            Product(product_id="b", seller_id="s1", price=Decimal("40")),
        ]
        services.client.get_sales.return_value = {}

        assert refresh_catalog(services, "s1") == {"cheap": 1}

    def test_unreachable_marketplace(self, services: Services) -> None:
        services.client = MagicMock()
        services.client.get_products.side_effect = CatalogUnavailableError("down")
        with pytest.raises(CatalogUnavailableError):
            refresh_catalog(services, "s1")
