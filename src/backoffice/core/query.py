"""MongoDB filter fragments shared by listing endpoints."""

import re
from typing import Any


def build_search_condition(search: str, fields: tuple[str, ...]) -> dict[str, Any]:
    """Case-insensitive substring match of `search` over any of `fields`.

    The search text is matched literally, regex metacharacters are escaped.
    """
    pattern = re.escape(search)
    return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in fields]}


def build_price_range(min_price: float | None, max_price: float | None) -> dict[str, float] | None:
    """Return a price condition, or None when no bound is given."""
    condition: dict[str, float] = {}
    if min_price is not None:
        condition["$gte"] = min_price
    if max_price is not None:
        condition["$lte"] = max_price
    return condition or None
