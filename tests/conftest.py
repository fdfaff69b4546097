# tests/conftest.py
import os
import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Generator

# Keep settings.json and the default database out of the source tree
os.environ.setdefault("STORECOLL_DATA_DIR", tempfile.mkdtemp(prefix="storecoll-test-"))

import pytest

from storecollections.core.db import Database
from storecollections.core.product import Product
from storecollections.services.collections.collection_manager import CollectionManager
from storecollections.utils.i18n import init_i18n

SELLER = "seller-1"
OTHER_SELLER = "seller-2"


@pytest.fixture(autouse=True)
def english_messages() -> Generator[None, None, None]:
    """Every test starts and ends with the English message catalog."""
    init_i18n("en")
    yield
    init_i18n("en")


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Temporary SQLite database file path."""
    return tmp_path / "collections.db"


@pytest.fixture
def db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Fresh database with the current schema."""
    database = Database(temp_db_path)
    yield database
    database.close()


@pytest.fixture
def scenario_catalog() -> list[Product]:
    """The three-product catalog used by the evaluator scenarios."""
    return [
        Product(product_id="p10", seller_id=SELLER, title="Cheap Sale", price=Decimal("10"), tags=("sale",)),
        Product(product_id="p60", seller_id=SELLER, title="New Arrival", price=Decimal("60"), tags=("new",)),
        Product(product_id="p30", seller_id=SELLER, title="Sale Arrival", price=Decimal("30"), tags=("sale", "new")),
    ]


@pytest.fixture
def sample_products() -> list[Product]:
    """A small catalog for one seller plus one foreign product."""
    return [
        Product(
            product_id="tee",
            seller_id=SELLER,
            title="Organic Cotton Tee",
            price=Decimal("19.99"),
            stock_quantity=12,
            category_id="apparel",
            tags=("Summer", "Organic"),
            created_at=1_700_000_300,
            units_sold=40,
        ),
        Product(
            product_id="mug",
            seller_id=SELLER,
            title="Ceramic Mug",
            price=Decimal("12.50"),
            stock_quantity=0,
            category_id="kitchen",
            tags=("Gift",),
            created_at=1_700_000_100,
            units_sold=75,
        ),
        Product(
            product_id="hat",
            seller_id=SELLER,
            title="Straw Hat",
            price=Decimal("35"),
            stock_quantity=3,
            category_id="apparel",
            tags=("summer sale",),
            created_at=1_700_000_200,
            units_sold=5,
        ),
        Product(
            product_id="lamp",
            seller_id=SELLER,
            title="Desk Lamp",
            price=Decimal("49"),
            stock_quantity=7,
            category_id="home",
            tags=(),
            status="draft",
            created_at=1_700_000_400,
        ),
        Product(
            product_id="foreign",
            seller_id=OTHER_SELLER,
            title="Foreign Tee",
            price=Decimal("15"),
            stock_quantity=1,
            category_id="apparel",
            tags=("Summer",),
        ),
    ]


@pytest.fixture
def seeded_db(db: Database, sample_products: list[Product]) -> Database:
    """Database holding the sample catalog."""
    db.batch_upsert_products(sample_products)
    db.commit()
    return db


@pytest.fixture
def manager(seeded_db: Database) -> CollectionManager:
    """CollectionManager bound to the seeded database."""
    return CollectionManager(seeded_db, page_size=2)
