from typing import Any

import structlog

from backoffice.core.entity import EntityService, validate_document
from backoffice.core.modules.counter.models import EntityType
from backoffice.core.modules.pack.models import Pack, PackProduct, PackSortField, PackView
from backoffice.core.pagination import PaginationResult, SortOrder, paginate
from backoffice.core.query import build_price_range, build_search_condition
from backoffice.errors import ValidationError

logger = structlog.get_logger(__name__)


class PackService(EntityService[Pack]):
    """Manages product packs."""

    entity_type = EntityType.PACK
    collection_name = "packs"
    model = Pack

    async def on_start(self) -> None:
        await self._collection.create_index([("products", 1)])

    async def _validate_products(self, product_ids: list[int]) -> list[int]:
        """Reject empty lists and references to products that do not exist."""
        if not product_ids:
            raise ValidationError("At least one product is required")
        missing = await self.core.services.product.find_missing(product_ids)
        if missing:
            raise ValidationError(f"Products not found: {', '.join(str(pid) for pid in missing)}")
        return product_ids

    async def to_view(self, pack: Pack) -> PackView:
        """Resolve product IDs into summaries. Products deleted since are left out."""
        products = await self.core.services.product.get_many(pack.products)
        summaries = [
            PackProduct(id=p.id, name=p.name, price=p.price, promo_price=p.promo_price, images=p.images)
            for pid in pack.products
            if (p := products.get(pid)) is not None
        ]
        return PackView(**pack.model_dump(exclude={"products"}), products=summaries)

    async def list_packs(
        self,
        limit: int = 10,
        offset: int = 0,
        search: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        sort_by: PackSortField = PackSortField.NAME,
        sort_order: SortOrder = SortOrder.ASC,
    ) -> PaginationResult[PackView]:
        """Get paginated packs with products resolved."""
        query: dict[str, Any] = {}
        if search:
            query.update(build_search_condition(search, ("name", "description")))
        price = build_price_range(min_price, max_price)
        if price is not None:
            query["price"] = price

        page = await paginate(self._collection, Pack, query, [(str(sort_by), sort_order.direction)], limit, offset)
        views = [await self.to_view(pack) for pack in page.items]
        return PaginationResult(items=views, total=page.total, limit=page.limit, offset=page.offset)

    async def create_pack(self, data: dict[str, Any]) -> Pack:
        """Create pack after checking every referenced product exists."""
        validate_document(Pack, {**data, "id": 1})
        await self._validate_products(data["products"])
        pack = await self.insert(lambda entity_id: validate_document(Pack, {**data, "id": entity_id}))
        logger.info("pack_created", pack_id=pack.id, products=pack.products)
        return pack

    async def update_pack(self, pack_id: int, fields: dict[str, Any]) -> Pack:
        """Partially update a pack; product references are re-checked when provided."""
        current = await self.get(pack_id)
        merged = validate_document(Pack, {**current.model_dump(), **fields})
        if "products" in fields:
            await self._validate_products(merged.products)
        return await self.update(pack_id, merged.model_dump(include=set(fields)))

    async def find_by_product(self, product_id: int) -> list[int]:
        """Return IDs of packs that contain `product_id`."""
        cursor = self._collection.find({"products": product_id}, projection={"_id": 1}).sort("_id", 1)
        return [doc["_id"] async for doc in cursor]
