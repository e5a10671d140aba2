"""Query building for product listings."""

from typing import Any

from backoffice.core.modules.product.models import ProductSortField
from backoffice.core.pagination import SortOrder
from backoffice.core.query import build_price_range, build_search_condition

SEARCH_FIELDS = ("name", "short_description", "category", "brand")


def build_product_query(
    search: str | None = None,
    category: str | None = None,
    brand: str | None = None,
    has_promo: bool | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    flavours: list[str] | None = None,
    sizes: list[str] | None = None,
) -> dict[str, Any]:
    """Build a MongoDB filter from product listing parameters. All conditions are ANDed."""
    query: dict[str, Any] = {}
    if search:
        query.update(build_search_condition(search, SEARCH_FIELDS))
    if category:
        query["category"] = category
    if brand:
        query["brand"] = brand
    if has_promo is not None:
        query["has_promo"] = has_promo
    price = build_price_range(min_price, max_price)
    if price is not None:
        query["price"] = price
    if flavours:
        query["flavours"] = {"$in": flavours}
    if sizes:
        query["sizes"] = {"$in": sizes}
    return query


def build_product_sort(sort_by: ProductSortField | None, sort_order: SortOrder) -> list[tuple[str, int]]:
    """Default is newest first."""
    if sort_by is None:
        return [("created_at", -1)]
    return [(str(sort_by), sort_order.direction)]
