from __future__ import annotations

from storecollections.services.collections import CollectionManager, ConditionEvaluator

__all__: list[str] = [
    "CollectionManager",
    "ConditionEvaluator",
]
