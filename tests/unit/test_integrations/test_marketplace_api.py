"""Tests for the marketplace API client."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests

from storecollections.core.errors import CatalogUnavailableError
from storecollections.core.product import Product
from storecollections.integrations.marketplace_api import MarketplaceClient, fetch_and_store_catalog
from storecollections.services.collections.collection_manager import CollectionManager
from storecollections.services.collections.models import Collection, CollectionType


def _response(status: int = 200, payload: object = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.json.return_value = payload
    return response


def _session(mock_session_cls: MagicMock, *responses: MagicMock) -> MagicMock:
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = list(responses)
    mock_session_cls.return_value = session
    return session


class TestClientSetup:
    """Tests for MarketplaceClient construction."""

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_headers_with_token(self, mock_session_cls: MagicMock) -> None:
        session = _session(mock_session_cls)
        MarketplaceClient("http://api.test/", token="abc")
        assert session.headers["Authorization"] == "Bearer abc"
        assert session.headers["Accept"] == "application/json"
        assert session.headers["User-Agent"].startswith("StoreCollections/")

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_no_token_no_auth_header(self, mock_session_cls: MagicMock) -> None:
        session = _session(mock_session_cls)
        client = MarketplaceClient("http://api.test/")
        assert "Authorization" not in session.headers
        assert client.base_url == "http://api.test"


class TestGetProducts:
    """Tests for MarketplaceClient.get_products()."""

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_follows_pagination(self, mock_session_cls: MagicMock) -> None:
        session = _session(
            mock_session_cls,
            _response(
                payload={
                    "products": [{"_id": "a", "sellerId": "s1", "name": "A", "price": 5}],
                    "pagination": {"page": 1, "limit": 1, "total": 2, "pages": 2},
                }
            ),
            _response(
                payload={
                    "products": [{"_id": "b", "sellerId": "s1", "name": "B", "price": "7.5"}],
                    "pagination": {"page": 2, "limit": 1, "total": 2, "pages": 2},
                }
            ),
        )

        products = MarketplaceClient("http://api.test", timeout=3).get_products("s1")

        assert [p.product_id for p in products] == ["a", "b"]
        assert products[1].price == Decimal("7.5")
        assert session.get.call_count == 2
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"sellerId": "s1", "page": 2}
        assert kwargs["timeout"] == 3
        assert session.get.call_args.args[0] == "http://api.test/seller/products"

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_plain_list_is_single_page(self, mock_session_cls: MagicMock) -> None:
        session = _session(mock_session_cls, _response(payload=[{"id": "a", "title": "A"}]))
        products = MarketplaceClient("http://api.test").get_products("s1")
        assert products[0].seller_id == "s1"
        assert session.get.call_count == 1

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_stops_on_empty_page(self, mock_session_cls: MagicMock) -> None:
        session = _session(mock_session_cls, _response(payload={"products": [], "pagination": {"pages": 9}}))
        assert MarketplaceClient("http://api.test").get_products("s1") == []
        assert session.get.call_count == 1

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_skips_entries_without_id(self, mock_session_cls: MagicMock) -> None:
        _session(mock_session_cls, _response(payload=[{"title": "no id"}, {"id": "ok"}]))
        products = MarketplaceClient("http://api.test").get_products("s1")
        assert [p.product_id for p in products] == ["ok"]

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_network_error(self, mock_session_cls: MagicMock) -> None:
        session = _session(mock_session_cls)
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(CatalogUnavailableError, match="Network error"):
            MarketplaceClient("http://api.test").get_products("s1")

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_bad_status(self, mock_session_cls: MagicMock) -> None:
        _session(mock_session_cls, _response(status=503))
        with pytest.raises(CatalogUnavailableError, match="503"):
            MarketplaceClient("http://api.test").get_products("s1")

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_invalid_json(self, mock_session_cls: MagicMock) -> None:
        response = _response()
        response.json.side_effect = ValueError("no json")
        _session(mock_session_cls, response)
        with pytest.raises(CatalogUnavailableError, match="Invalid JSON"):
            MarketplaceClient("http://api.test").get_products("s1")

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_unexpected_payload(self, mock_session_cls: MagicMock) -> None:
        _session(mock_session_cls, _response(payload="nope"))
        with pytest.raises(CatalogUnavailableError):
            MarketplaceClient("http://api.test").get_products("s1")


class TestGetSales:
    """Tests for MarketplaceClient.get_sales()."""

    @pytest.mark.parametrize(
        "payload",
        [
            {"sales": {"a": 3, "b": "7"}},
            {"a": 3, "b": 7},
            [{"productId": "a", "unitsSold": 3}, {"product_id": "b", "units_sold": 7}],
        ],
    )
    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_accepted_shapes(self, mock_session_cls: MagicMock, payload: object) -> None:
        _session(mock_session_cls, _response(payload=payload))
        assert MarketplaceClient("http://api.test").get_sales("s1") == {"a": 3, "b": 7}

    @patch("storecollections.integrations.marketplace_api.requests.Session")
    def test_garbage_payload(self, mock_session_cls: MagicMock) -> None:
        _session(mock_session_cls, _response(payload={"sales": {"a": "many"}}))
        with pytest.raises(CatalogUnavailableError):
            MarketplaceClient("http://api.test").get_sales("s1")


class TestFetchAndStoreCatalog:
    """Tests for fetch_and_store_catalog()."""

    def test_stores_products_and_sales(self) -> None:
        products = [Product(product_id="a", seller_id="s1")]
        client = MagicMock()
        client.get_products.return_value = products
        client.get_sales.return_value = {"a": 4}
        db = MagicMock()
        db.batch_upsert_products.return_value = 1

        assert fetch_and_store_catalog("s1", db, client) == 1
        db.batch_upsert_products.assert_called_once_with(products)
        db.archive_missing_products.assert_called_once_with("s1", ["a"])
        db.update_sales_metrics.assert_called_once_with({"a": 4})
        db.commit.assert_called_once()

    def test_without_sales(self) -> None:
        client = MagicMock()
        client.get_products.return_value = []
        db = MagicMock()
        db.batch_upsert_products.return_value = 0

        fetch_and_store_catalog("s1", db, client, with_sales=False)
        client.get_sales.assert_not_called()
        db.update_sales_metrics.assert_not_called()

    def test_unreachable_marketplace_writes_nothing(self) -> None:
        client = MagicMock()
        client.get_products.side_effect = CatalogUnavailableError("down")
        db = MagicMock()

        with pytest.raises(CatalogUnavailableError):
            fetch_and_store_catalog("s1", db, client)
        db.batch_upsert_products.assert_not_called()
        db.commit.assert_not_called()

    def test_real_database(self, db) -> None:
        client = MagicMock()
        client.get_products.return_value = [
            Product(product_id="a", seller_id="s1", price=Decimal("3")),
            Product(product_id="b", seller_id="s1", price=Decimal("4")),
        ]
        client.get_sales.return_value = {"b": 11}

        assert fetch_and_store_catalog("s1", db, client) == 2
        assert db.get_sales_metrics("s1") == {"a": 0, "b": 11}

    def test_delisted_products_leave_smart_collections(self, db) -> None:
        client = MagicMock()
        client.get_sales.return_value = {}
        client.get_products.return_value = [
            Product(product_id="a", seller_id="s", tags=("sale",)),
            Product(product_id="b", seller_id="s", tags=("sale",)),
        ]
        fetch_and_store_catalog("s", db, client)

        manager = CollectionManager(db)
        collection_id = manager.create(
            Collection(
                seller_id="s",
                name="Sale",
                collection_type=CollectionType.SMART,
                conditions=[{"type": "tag", "operator": "equals", "value": "sale"}],
            )
        )
        assert [p.product_id for p in manager.get_collection_products(collection_id)] == ["a", "b"]

        client.get_products.return_value = [Product(product_id="a", seller_id="s", tags=("sale",))]
        fetch_and_store_catalog("s", db, client)

        assert manager.refresh("s") == {"sale": 1}
        assert [p.product_id for p in manager.get_collection_products(collection_id)] == ["a"]
        assert [p.product_id for p in db.get_products("s", active_only=False) if p.status == "archived"] == ["b"]

    def test_relisted_product_is_active_again(self, db) -> None:
        client = MagicMock()
        client.get_sales.return_value = {}
        client.get_products.return_value = []
        db.upsert_product(Product(product_id="a", seller_id="s"))
        db.commit()

        fetch_and_store_catalog("s", db, client)
        assert db.get_products("s") == []

        client.get_products.return_value = [Product(product_id="a", seller_id="s")]
        fetch_and_store_catalog("s", db, client)
        assert [p.product_id for p in db.get_products("s")] == ["a"]
