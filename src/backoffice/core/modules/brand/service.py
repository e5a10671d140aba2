from typing import Any

import structlog
from pymongo.errors import DuplicateKeyError

from backoffice.core.entity import EntityService
from backoffice.core.modules.brand.models import Brand
from backoffice.core.modules.counter.models import EntityType
from backoffice.errors import ValidationError

logger = structlog.get_logger(__name__)


class BrandService(EntityService[Brand]):
    """Manages product brands."""

    entity_type = EntityType.BRAND
    collection_name = "brands"
    model = Brand

    async def on_start(self) -> None:
        await self._collection.create_index([("name", 1)], unique=True)

    async def _ensure_name_available(self, name: str, exclude_id: int | None = None) -> None:
        doc = await self._collection.find_one({"name": name})
        if doc is not None and doc["_id"] != exclude_id:
            raise ValidationError(f"Brand '{name}' already exists")

    async def create_brand(self, name: str, description: str = "", logo: str | None = None) -> Brand:
        name = name.strip()
        if not name:
            raise ValidationError("Brand name is required")
        await self._ensure_name_available(name)

        try:
            brand = await self.insert(
                lambda entity_id: Brand(id=entity_id, name=name, description=description, logo=logo)
            )
        except DuplicateKeyError as e:
            raise ValidationError(f"Brand '{name}' already exists") from e
        logger.info("brand_created", brand_id=brand.id, name=name)
        return brand

    async def update_brand(
        self, brand_id: int, name: str | None = None, description: str | None = None, logo: str | None = None
    ) -> Brand:
        """Partially update a brand; only provided values change."""
        brand = await self.get(brand_id)
        fields: dict[str, Any] = {}
        if name is not None and name.strip() != brand.name:
            name = name.strip()
            if not name:
                raise ValidationError("Brand name is required")
            await self._ensure_name_available(name, exclude_id=brand_id)
            fields["name"] = name
        if description is not None:
            fields["description"] = description
        if logo is not None:
            fields["logo"] = logo

        try:
            return await self.update(brand_id, fields)
        except DuplicateKeyError as e:
            raise ValidationError(f"Brand '{name}' already exists") from e
