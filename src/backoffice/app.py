from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from backoffice.config import Config
from backoffice.core.core import Core
from backoffice.core.modules.accessory.models import Accessory
from backoffice.core.modules.brand.models import Brand
from backoffice.core.modules.category.models import Category
from backoffice.core.modules.counter.models import Counter
from backoffice.core.modules.notification.models import Subscriber, Subscription
from backoffice.core.modules.order.models import Order, OrderStatus
from backoffice.core.modules.pack.models import PackSortField, PackView
from backoffice.core.modules.product.models import Product, ProductSortField
from backoffice.core.modules.upload.models import UploadedFile
from backoffice.core.pagination import PaginationResult, SortOrder


class App:
    """Facade for all application operations, delegates to Core services."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Categories ===
    async def get_categories(self) -> list[Category]:
        return await self._core.services.category.list_all()

    async def get_category(self, category_id: int) -> Category:
        return await self._core.services.category.get(category_id)

    async def create_category(self, name: str, image: str | None) -> Category:
        return await self._core.services.category.create_category(name, image)

    async def update_category(self, category_id: int, name: str | None, image: str | None) -> Category:
        return await self._core.services.category.update_category(category_id, name, image)

    async def delete_category(self, category_id: int) -> None:
        await self._core.services.category.delete(category_id)

    # === Brands ===
    async def get_brands(self) -> list[Brand]:
        return await self._core.services.brand.list_all()

    async def get_brand(self, brand_id: int) -> Brand:
        return await self._core.services.brand.get(brand_id)

    async def create_brand(self, name: str, description: str, logo: str | None) -> Brand:
        return await self._core.services.brand.create_brand(name, description, logo)

    async def update_brand(self, brand_id: int, name: str | None, description: str | None, logo: str | None) -> Brand:
        return await self._core.services.brand.update_brand(brand_id, name, description, logo)

    async def delete_brand(self, brand_id: int) -> None:
        await self._core.services.brand.delete(brand_id)

    # === Products ===
    async def get_products(
        self,
        limit: int,
        offset: int,
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
        return await self._core.services.product.list_products(
            limit, offset, search, category, brand, has_promo, min_price, max_price, flavours, sizes, sort_by, sort_order
        )

    async def get_product(self, product_id: int) -> Product:
        return await self._core.services.product.get(product_id)

    async def create_product(self, data: dict[str, Any]) -> Product:
        return await self._core.services.product.create_product(data)

    async def update_product(self, product_id: int, fields: dict[str, Any]) -> Product:
        return await self._core.services.product.update_product(product_id, fields)

    async def delete_product(self, product_id: int) -> None:
        await self._core.services.product.delete(product_id)

    # === Packs ===
    async def get_packs(
        self,
        limit: int,
        offset: int,
        search: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        sort_by: PackSortField = PackSortField.NAME,
        sort_order: SortOrder = SortOrder.ASC,
    ) -> PaginationResult[PackView]:
        return await self._core.services.pack.list_packs(limit, offset, search, min_price, max_price, sort_by, sort_order)

    async def get_pack(self, pack_id: int) -> PackView:
        pack = await self._core.services.pack.get(pack_id)
        return await self._core.services.pack.to_view(pack)

    async def create_pack(self, data: dict[str, Any]) -> PackView:
        pack = await self._core.services.pack.create_pack(data)
        return await self._core.services.pack.to_view(pack)

    async def update_pack(self, pack_id: int, fields: dict[str, Any]) -> PackView:
        pack = await self._core.services.pack.update_pack(pack_id, fields)
        return await self._core.services.pack.to_view(pack)

    async def delete_pack(self, pack_id: int) -> None:
        await self._core.services.pack.delete(pack_id)

    # === Accessories ===
    async def get_accessories(self) -> list[Accessory]:
        return await self._core.services.accessory.list_all()

    async def get_accessory(self, accessory_id: int) -> Accessory:
        return await self._core.services.accessory.get(accessory_id)

    async def create_accessory(self, name: str) -> Accessory:
        return await self._core.services.accessory.create_accessory(name)

    async def rename_accessory(self, accessory_id: int, name: str) -> Accessory:
        return await self._core.services.accessory.rename_accessory(accessory_id, name)

    async def delete_accessory(self, accessory_id: int) -> None:
        await self._core.services.accessory.delete(accessory_id)

    # === Orders ===
    async def get_orders(self, limit: int, offset: int, status: OrderStatus | None = None) -> PaginationResult[Order]:
        return await self._core.services.order.list_orders(limit, offset, status)

    async def get_order(self, order_id: int) -> Order:
        return await self._core.services.order.get(order_id)

    async def create_order(self, data: dict[str, Any]) -> Order:
        return await self._core.services.order.create_order(data)

    async def update_order(self, order_id: int, fields: dict[str, Any]) -> Order:
        return await self._core.services.order.update_order(order_id, fields)

    async def delete_order(self, order_id: int) -> None:
        await self._core.services.order.delete_order(order_id)

    # === Order notifications ===
    async def subscribe_to_orders(self, subscriber: Subscriber) -> Subscription:
        return await self._core.services.notification.subscribe(subscriber)

    async def unsubscribe_from_orders(self, subscription: Subscription) -> None:
        await self._core.services.notification.unsubscribe(subscription)

    # === Uploads ===
    async def upload_image(self, filename: str, content: bytes, mime_type: str) -> UploadedFile:
        return await self._core.services.upload.save_image(filename, content, mime_type)

    # === Sequences ===
    async def get_sequence(self, entity_name: str) -> Counter:
        """Inspect the ID counter of an entity name."""
        return await self._core.services.sequence.get_counter(entity_name)
