"""Human-readable display text for smart collection conditions."""

from __future__ import annotations

from decimal import Decimal

from storecollections.services.collections.models import (
    Condition,
    PriceBetweenCondition,
    PriceCompareCondition,
    StockCondition,
)
from storecollections.utils.i18n import t

__all__ = ["format_condition", "format_conditions", "format_price"]


def format_price(value: Decimal) -> str:
    """Formats a price without trailing zeros: 20 -> '20', 19.5 -> '19.50'."""
    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return str(value.quantize(Decimal("0.01")))


def format_condition(condition: Condition) -> str:
    """Describes a condition as a sentence for the seller UI.

    Args:
        condition: Any condition variant.

    Returns:
        Translated text, e.g. 'Product tag contains "sale"'.
    """
    key = f"conditions.{condition.condition_type.value}.{condition.operator.value}"
    if isinstance(condition, PriceBetweenCondition):
        return t(key, min=format_price(condition.min_price), max=format_price(condition.max_price))
    if isinstance(condition, PriceCompareCondition):
        return t(key, value=format_price(condition.value))
    if isinstance(condition, StockCondition):
        return t(key)
    return t(key, value=condition.value)


def format_conditions(conditions: list[Condition]) -> str:
    """Joins condition sentences with the translated AND separator."""
    return t("conditions.joiner").join(format_condition(c) for c in conditions)
