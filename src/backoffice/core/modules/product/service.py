from typing import Any

import structlog

from backoffice.core.entity import EntityService, validate_document
from backoffice.core.modules.counter.models import EntityType
from backoffice.core.modules.product.models import Product, ProductSortField
from backoffice.core.modules.product.query import build_product_query, build_product_sort
from backoffice.core.pagination import PaginationResult, SortOrder, paginate
from backoffice.errors import ValidationError

logger = structlog.get_logger(__name__)


class ProductService(EntityService[Product]):
    """Manages catalog products."""

    entity_type = EntityType.PRODUCT
    collection_name = "products"
    model = Product

    async def on_start(self) -> None:
        """Create indexes for common listing filters."""
        await self._collection.create_index([("category", 1)])
        await self._collection.create_index([("brand", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def list_products(
        self,
        limit: int = 50,
        offset: int = 0,
        search: str | None = None,
        category: str | None = None,
        brand: str | None = None,
        has_promo: bool | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        flavours: list[str] | None = None,
        sizes: list[str] | None = None,
        sort_by: ProductSortField | None = None,
        sort_order: SortOrder = SortOrder.ASC,
    ) -> PaginationResult[Product]:
        """Get paginated products matching all given filters.

        Args:
            search: Case-insensitive text matched against name, short description, category and brand
            flavours: Match products offering any of these flavours
            sizes: Match products offering any of these sizes
            sort_by: Sort field; newest first when omitted
        """
        query = build_product_query(search, category, brand, has_promo, min_price, max_price, flavours, sizes)
        sort = build_product_sort(sort_by, sort_order)
        result = await paginate(self._collection, Product, query, sort, limit, offset)
        logger.debug("list_products", query=query, sort=sort, total=result.total, returned=len(result.items))
        return result

    async def create_product(self, data: dict[str, Any]) -> Product:
        """Create product from validated field values (everything except id and timestamps)."""
        validate_document(Product, {**data, "id": 1})  # fail before allocating an ID
        product = await self.insert(lambda entity_id: validate_document(Product, {**data, "id": entity_id}))
        logger.info("product_created", product_id=product.id, name=product.name)
        return product

    async def update_product(self, product_id: int, fields: dict[str, Any]) -> Product:
        """Partially update a product; the merged result must still be a valid product."""
        current = await self.get(product_id)
        merged = validate_document(Product, {**current.model_dump(), **fields})
        return await self.update(product_id, merged.model_dump(include=set(fields)))

    async def find_missing(self, product_ids: list[int]) -> list[int]:
        """Return the IDs from `product_ids` that have no product document."""
        cursor = self._collection.find({"_id": {"$in": product_ids}}, projection={"_id": 1})
        found = {doc["_id"] async for doc in cursor}
        return [pid for pid in product_ids if pid not in found]

    async def get_many(self, product_ids: list[int]) -> dict[int, Product]:
        cursor = self._collection.find({"_id": {"$in": product_ids}})
        return {product.id: product for product in await Product.list_cursor(cursor)}

    async def delete(self, entity_id: int) -> Product:
        """Delete a product that no pack contains.

        Raises:
            ValidationError: If any pack contains the product
        """
        pack_ids = await self.core.services.pack.find_by_product(entity_id)
        if pack_ids:
            raise ValidationError(
                f"Product {entity_id} is part of packs {', '.join(str(pid) for pid in pack_ids)}; remove it from them first"
            )
        return await super().delete(entity_id)
