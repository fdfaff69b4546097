# storecollections/services/collections/models.py

"""Data models for seller collections: enums, condition variants, serialization.

Defines the condition language of smart collections as a tagged union: one
frozen dataclass per condition shape, each carrying only the operators and
value shape that are valid for it and validating itself on construction.
Also defines the Collection and CollectionProduct records and the JSON
helpers used for persistence and import/export.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Union

from storecollections.core.errors import InvalidConditionError
from storecollections.core.product import parse_price

__all__ = [
    "CategoryCondition",
    "Collection",
    "CollectionProduct",
    "CollectionType",
    "Condition",
    "ConditionType",
    "Operator",
    "PriceBetweenCondition",
    "PriceCompareCondition",
    "SortOrder",
    "StockCondition",
    "TagCondition",
    "TitleCondition",
    "VALID_OPERATORS",
    "condition_from_dict",
    "condition_to_dict",
    "conditions_from_json",
    "conditions_from_list",
    "conditions_to_json",
]

logger = logging.getLogger("storecoll.collections.models")


class ConditionType(Enum):
    """Product attribute a smart collection condition looks at."""

    TAG = "tag"
    TITLE = "title"
    PRICE = "price"
    CATEGORY = "category"
    STOCK = "stock"


class Operator(Enum):
    """Comparison operators for smart collection conditions."""

    # Text operators
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"

    # Numeric operators
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    BETWEEN = "between"

    # Stock operators
    IN_STOCK = "in_stock"
    OUT_OF_STOCK = "out_of_stock"


class CollectionType(Enum):
    """How a collection's membership is determined."""

    MANUAL = "manual"
    SMART = "smart"


class SortOrder(Enum):
    """Display order of a collection's products."""

    MANUAL = "manual"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    NEWEST = "newest"
    OLDEST = "oldest"
    BEST_SELLING = "best_selling"


VALID_OPERATORS: dict[ConditionType, tuple[Operator, ...]] = {
    ConditionType.TAG: (Operator.CONTAINS, Operator.EQUALS),
    ConditionType.TITLE: (Operator.CONTAINS, Operator.EQUALS),
    ConditionType.PRICE: (Operator.GREATER_THAN, Operator.LESS_THAN, Operator.BETWEEN),
    ConditionType.CATEGORY: (Operator.EQUALS, Operator.NOT_EQUALS),
    ConditionType.STOCK: (Operator.IN_STOCK, Operator.OUT_OF_STOCK),
}


def _check_operator(condition_type: ConditionType, operator: Operator) -> None:
    if operator not in VALID_OPERATORS[condition_type]:
        allowed = ", ".join(op.value for op in VALID_OPERATORS[condition_type])
        raise InvalidConditionError(
            f"operator '{operator.value}' is not valid for {condition_type.value} conditions (allowed: {allowed})"
        )


def _check_text(condition_type: ConditionType, value: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidConditionError(f"{condition_type.value} condition requires a value")


def _to_price(value: Any, label: str) -> Decimal:
    if value is None or value == "":
        raise InvalidConditionError(f"price condition requires {label}")
    try:
        return parse_price(value)
    except ValueError as exc:
        raise InvalidConditionError(f"price {label} must be a number, got {value!r}") from exc


# ========================================================================
# CONDITION VARIANTS
# ========================================================================


@dataclass(frozen=True)
class TagCondition:
    """Matches products by tag (case-insensitive).

    Attributes:
        operator: CONTAINS (substring of any tag) or EQUALS (whole tag).
        value: The tag text to look for.
    """

    condition_type: ClassVar[ConditionType] = ConditionType.TAG

    operator: Operator
    value: str

    def __post_init__(self) -> None:
        _check_operator(self.condition_type, self.operator)
        _check_text(self.condition_type, self.value)


@dataclass(frozen=True)
class TitleCondition:
    """Matches products by title (case-insensitive).

    Attributes:
        operator: CONTAINS or EQUALS.
        value: The title text to look for.
    """

    condition_type: ClassVar[ConditionType] = ConditionType.TITLE

    operator: Operator
    value: str

    def __post_init__(self) -> None:
        _check_operator(self.condition_type, self.operator)
        _check_text(self.condition_type, self.value)


@dataclass(frozen=True)
class PriceCompareCondition:
    """Strict price comparison against a single bound.

    Attributes:
        operator: GREATER_THAN or LESS_THAN.
        value: The price bound.
    """

    condition_type: ClassVar[ConditionType] = ConditionType.PRICE

    operator: Operator
    value: Decimal

    def __post_init__(self) -> None:
        if self.operator == Operator.BETWEEN:
            raise InvalidConditionError("between price conditions need min and max bounds")
        _check_operator(self.condition_type, self.operator)
        object.__setattr__(self, "value", _to_price(self.value, "a value"))


@dataclass(frozen=True)
class PriceBetweenCondition:
    """Inclusive price range.

    Attributes:
        min_price: Lower bound (inclusive).
        max_price: Upper bound (inclusive), never below min_price.
    """

    condition_type: ClassVar[ConditionType] = ConditionType.PRICE
    operator: ClassVar[Operator] = Operator.BETWEEN

    min_price: Decimal
    max_price: Decimal

    def __post_init__(self) -> None:
        lower = _to_price(self.min_price, "a min bound")
        upper = _to_price(self.max_price, "a max bound")
        if lower > upper:
            raise InvalidConditionError(f"price min ({lower}) must not exceed max ({upper})")
        object.__setattr__(self, "min_price", lower)
        object.__setattr__(self, "max_price", upper)


@dataclass(frozen=True)
class CategoryCondition:
    """Exact category identifier match or mismatch.

    Attributes:
        operator: EQUALS or NOT_EQUALS.
        value: The category identifier.
    """

    condition_type: ClassVar[ConditionType] = ConditionType.CATEGORY

    operator: Operator
    value: str

    def __post_init__(self) -> None:
        _check_operator(self.condition_type, self.operator)
        _check_text(self.condition_type, self.value)


@dataclass(frozen=True)
class StockCondition:
    """Stock availability check, carries no value.

    Attributes:
        operator: IN_STOCK (quantity > 0) or OUT_OF_STOCK (quantity == 0).
    """

    condition_type: ClassVar[ConditionType] = ConditionType.STOCK

    operator: Operator

    def __post_init__(self) -> None:
        _check_operator(self.condition_type, self.operator)


Condition = Union[
    TagCondition,
    TitleCondition,
    PriceCompareCondition,
    PriceBetweenCondition,
    CategoryCondition,
    StockCondition,
]

_CONDITION_CLASSES: tuple[type, ...] = (
    TagCondition,
    TitleCondition,
    PriceCompareCondition,
    PriceBetweenCondition,
    CategoryCondition,
    StockCondition,
)

_TEXT_CONDITIONS: dict[ConditionType, type] = {
    ConditionType.TAG: TagCondition,
    ConditionType.TITLE: TitleCondition,
    ConditionType.CATEGORY: CategoryCondition,
}


# ========================================================================
# COLLECTION RECORDS
# ========================================================================


@dataclass
class Collection:
    """A seller collection with its conditions and display settings.

    Attributes:
        collection_id: Database primary key (0 for unsaved).
        seller_id: Identifier of the owning seller.
        name: Display name.
        slug: URL slug, unique per seller ('' means derive from name).
        description: Optional description.
        collection_type: MANUAL (explicit list) or SMART (rule based).
        conditions: Smart collection conditions, combined with AND.
        sort_order: Display order of the collection's products.
        is_active: Whether the collection is live.
        is_featured: Whether the collection is featured on the storefront.
        is_draft: Whether the collection is still a draft.
        visible_storefront: Shown on the web storefront.
        visible_mobile_app: Shown in the mobile app.
        product_count: Cached size of the resolved membership.
        created_at: Unix timestamp of creation.
        updated_at: Unix timestamp of the last edit.
    """

    collection_id: int = 0
    seller_id: str = ""
    name: str = ""
    slug: str = ""
    description: str = ""
    collection_type: CollectionType = CollectionType.MANUAL
    conditions: list[Condition] = field(default_factory=list)
    sort_order: SortOrder = SortOrder.MANUAL
    is_active: bool = True
    is_featured: bool = False
    is_draft: bool = False
    visible_storefront: bool = True
    visible_mobile_app: bool = True
    product_count: int = 0
    created_at: int = 0
    updated_at: int = 0

    @property
    def is_smart(self) -> bool:
        """True for rule-based collections."""
        return self.collection_type == CollectionType.SMART


@dataclass(frozen=True)
class CollectionProduct:
    """An explicit product-to-collection link.

    Attributes:
        collection_id: The collection the product is linked to.
        product_id: The linked product.
        position: Link order within the collection (manual sort).
        added_at: Unix timestamp of when the link was created.
    """

    collection_id: int
    product_id: str
    position: int = 0
    added_at: int = 0


# ========================================================================
# SERIALIZATION HELPERS
# ========================================================================


def condition_to_dict(condition: Condition) -> dict[str, Any]:
    """Serializes a condition to its JSON wire shape.

    Prices are written as strings to keep Decimal precision.

    Args:
        condition: The condition to serialize.

    Returns:
        Dict with type, operator and value or min/max.
    """
    data: dict[str, Any] = {
        "type": condition.condition_type.value,
        "operator": condition.operator.value,
    }
    if isinstance(condition, PriceBetweenCondition):
        data["min"] = str(condition.min_price)
        data["max"] = str(condition.max_price)
    elif isinstance(condition, PriceCompareCondition):
        data["value"] = str(condition.value)
    elif not isinstance(condition, StockCondition):
        data["value"] = condition.value
    return data


def condition_from_dict(data: Any, index: int | None = None) -> Condition:
    """Parses a loosely typed condition into its variant.

    Args:
        data: A condition dict (``type``, ``operator``, ``value``, ``min``,
            ``max``) or an already constructed condition.
        index: Position of the condition in its list, for error reporting.

    Returns:
        The matching condition variant.

    Raises:
        InvalidConditionError: If type, operator or value are invalid.
    """
    if isinstance(data, _CONDITION_CLASSES):
        return data
    if not isinstance(data, dict):
        raise InvalidConditionError("condition must be an object", index=index, condition=data)

    try:
        return _build_condition(data)
    except InvalidConditionError as exc:
        raise InvalidConditionError(exc.reason, index=index, condition=data) from exc


def _build_condition(data: dict[str, Any]) -> Condition:
    raw_type = data.get("type")
    try:
        condition_type = ConditionType(raw_type)
    except ValueError:
        raise InvalidConditionError(f"unknown condition type {raw_type!r}") from None

    raw_operator = data.get("operator")
    try:
        operator = Operator(raw_operator)
    except ValueError:
        raise InvalidConditionError(f"unknown operator {raw_operator!r}") from None
    _check_operator(condition_type, operator)

    if condition_type == ConditionType.STOCK:
        return StockCondition(operator=operator)

    if condition_type == ConditionType.PRICE:
        if operator == Operator.BETWEEN:
            return PriceBetweenCondition(min_price=data.get("min"), max_price=data.get("max"))
        return PriceCompareCondition(operator=operator, value=data.get("value"))

    return _TEXT_CONDITIONS[condition_type](operator=operator, value=_text_value(data.get("value")))


def _text_value(value: Any) -> str:
    """Reads a text condition value; numeric identifiers become strings."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return str(value)
    return ""


def conditions_from_list(raw_conditions: Any) -> list[Condition]:
    """Parses a whole condition list, failing on the first invalid entry.

    Nothing is returned unless every entry is valid.

    Args:
        raw_conditions: List of condition dicts or condition objects.

    Returns:
        The parsed conditions in their original order.

    Raises:
        InvalidConditionError: Carrying the index of the first invalid entry.
    """
    if raw_conditions is None:
        return []
    if not isinstance(raw_conditions, (list, tuple)):
        raise InvalidConditionError("conditions must be a list", condition=raw_conditions)
    return [condition_from_dict(item, index=i) for i, item in enumerate(raw_conditions)]


def conditions_to_json(conditions: list[Condition]) -> str:
    """Serializes a condition list to a JSON string for DB storage."""
    return json.dumps([condition_to_dict(c) for c in conditions], ensure_ascii=False)


def conditions_from_json(conditions_json: str) -> list[Condition]:
    """Deserializes a stored condition list.

    Stored rows were validated on write, so an unreadable payload means the
    row was edited outside the engine; it is logged and treated as empty.

    Args:
        conditions_json: JSON array of condition dicts.

    Returns:
        The parsed conditions.

    Raises:
        InvalidConditionError: If a stored condition no longer validates.
    """
    if not conditions_json:
        return []
    try:
        data = json.loads(conditions_json)
    except json.JSONDecodeError:
        logger.warning("Invalid conditions JSON: %s", conditions_json[:100])
        return []
    return conditions_from_list(data)
