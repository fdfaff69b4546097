"""Tests for condition display text."""

from __future__ import annotations

from decimal import Decimal

from storecollections.services.collections.models import (
    CategoryCondition,
    Operator,
    PriceBetweenCondition,
    PriceCompareCondition,
    StockCondition,
    TagCondition,
    TitleCondition,
)
from storecollections.utils.condition_format import format_condition, format_conditions, format_price
from storecollections.utils.i18n import init_i18n


class TestFormatPrice:
    """Tests for format_price()."""

    def test_whole_amount(self) -> None:
        assert format_price(Decimal("20.00")) == "20"

    def test_cents(self) -> None:
        assert format_price(Decimal("19.5")) == "19.50"


class TestFormatCondition:
    """Tests for format_condition() in English."""

    def test_text_conditions(self) -> None:
        assert format_condition(TagCondition(Operator.CONTAINS, "sale")) == 'Product tag contains "sale"'
        assert format_condition(TitleCondition(Operator.EQUALS, "Mug")) == 'Product title is "Mug"'
        assert format_condition(CategoryCondition(Operator.NOT_EQUALS, "home")) == 'Product category is not "home"'

    def test_price_conditions(self) -> None:
        assert format_condition(PriceCompareCondition(Operator.LESS_THAN, 50)) == "Price is less than $50"
        assert format_condition(PriceBetweenCondition(20, "39.9")) == "Price is between $20 and $39.90"

    def test_stock(self) -> None:
        assert format_condition(StockCondition(Operator.OUT_OF_STOCK)) == "Product is out of stock"

    def test_joined(self) -> None:
        text = format_conditions([TagCondition(Operator.CONTAINS, "sale"), StockCondition(Operator.IN_STOCK)])
        assert text == 'Product tag contains "sale" AND Product is in stock'

    def test_german(self) -> None:
        init_i18n("de")
        text = format_conditions([StockCondition(Operator.IN_STOCK), PriceCompareCondition(Operator.GREATER_THAN, 5)])
        assert text == "Produkt ist auf Lager UND Preis ist größer als 5 $"
