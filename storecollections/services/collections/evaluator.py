# storecollections/services/collections/evaluator.py

"""Smart collection condition evaluation engine.

Evaluates condition lists against catalog products. A product qualifies when
it satisfies every condition (logical AND); an empty condition list matches
nothing. Evaluation is a pure filter over the catalog it is given.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from storecollections.services.collections.models import (
    CategoryCondition,
    Condition,
    Operator,
    PriceBetweenCondition,
    PriceCompareCondition,
    StockCondition,
    TagCondition,
    TitleCondition,
    conditions_from_list,
)

if TYPE_CHECKING:
    from storecollections.core.product import Product

__all__ = ["ConditionEvaluator", "evaluate"]

logger = logging.getLogger("storecoll.collections.evaluator")


class ConditionEvaluator:
    """Evaluates smart collection conditions against products."""

    def validate(self, conditions: Iterable[Condition | dict[str, Any]]) -> list[Condition]:
        """Parses and validates a condition list as a whole.

        Args:
            conditions: Condition objects or their dict wire shape.

        Returns:
            The validated condition variants.

        Raises:
            InvalidConditionError: Identifying the first offending index.
        """
        return conditions_from_list(list(conditions))

    def evaluate(
        self,
        conditions: Sequence[Condition | dict[str, Any]],
        catalog: Iterable[Product],
    ) -> list[Product]:
        """Returns the catalog products that satisfy all conditions.

        All conditions are validated before the first product is looked at,
        so a malformed list never yields a partial result.

        Args:
            conditions: The smart collection conditions.
            catalog: The seller's active products.

        Returns:
            Matching products in catalog order. Empty when there are no
            conditions.

        Raises:
            InvalidConditionError: If any condition is malformed.
        """
        parsed = self.validate(conditions)
        if not parsed:
            return []
        matches = [product for product in catalog if self._matches_all(product, parsed)]
        logger.debug("Evaluated %d conditions: %d matching products", len(parsed), len(matches))
        return matches

    def evaluate_product(self, product: Product, conditions: Sequence[Condition | dict[str, Any]]) -> bool:
        """Checks a single product against a condition list.

        Args:
            product: The product to check.
            conditions: The smart collection conditions.

        Returns:
            True if the product satisfies every condition. False for an empty
            condition list.
        """
        parsed = self.validate(conditions)
        return bool(parsed) and self._matches_all(product, parsed)

    def _matches_all(self, product: Product, conditions: list[Condition]) -> bool:
        return all(self.match(product, condition) for condition in conditions)

    def match(self, product: Product, condition: Condition) -> bool:
        """Matches one validated condition against one product.

        Args:
            product: The product to check.
            condition: A condition variant.

        Returns:
            True if the product satisfies the condition.
        """
        if isinstance(condition, TagCondition):
            return self._match_tags(product.tags, condition.operator, condition.value)
        if isinstance(condition, TitleCondition):
            return self._match_text(product.title, condition.operator, condition.value)
        if isinstance(condition, PriceBetweenCondition):
            return condition.min_price <= product.price <= condition.max_price
        if isinstance(condition, PriceCompareCondition):
            if condition.operator == Operator.GREATER_THAN:
                return product.price > condition.value
            return product.price < condition.value
        if isinstance(condition, CategoryCondition):
            if condition.operator == Operator.EQUALS:
                return product.category_id == condition.value
            return product.category_id != condition.value
        if isinstance(condition, StockCondition):
            if condition.operator == Operator.IN_STOCK:
                return product.in_stock
            return not product.in_stock

        logger.warning("Unknown condition variant %r", condition)
        return False

    @staticmethod
    def _match_tags(tags: Iterable[str], operator: Operator, target: str) -> bool:
        """Any-tag match: the condition holds if one tag satisfies it."""
        target_lower = target.lower()
        for tag in tags:
            tag_lower = tag.lower()
            if operator == Operator.CONTAINS and target_lower in tag_lower:
                return True
            if operator == Operator.EQUALS and tag_lower == target_lower:
                return True
        return False

    @staticmethod
    def _match_text(value: str, operator: Operator, target: str) -> bool:
        value_lower = value.lower()
        target_lower = target.lower()
        if operator == Operator.CONTAINS:
            return target_lower in value_lower
        return value_lower == target_lower


_default_evaluator = ConditionEvaluator()


def evaluate(conditions: Sequence[Condition | dict[str, Any]], catalog: Iterable[Product]) -> list[Product]:
    """Module-level shortcut for ``ConditionEvaluator().evaluate``."""
    return _default_evaluator.evaluate(conditions, catalog)
