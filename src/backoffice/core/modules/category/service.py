from typing import Any

import structlog
from pymongo.errors import DuplicateKeyError

from backoffice.core.entity import EntityService
from backoffice.core.modules.category.models import Category
from backoffice.core.modules.counter.models import EntityType
from backoffice.errors import ValidationError

logger = structlog.get_logger(__name__)


class CategoryService(EntityService[Category]):
    """Manages product categories."""

    entity_type = EntityType.CATEGORY
    collection_name = "categories"
    model = Category

    async def on_start(self) -> None:
        """Create unique index on category name."""
        await self._collection.create_index([("name", 1)], unique=True)

    async def _ensure_name_available(self, name: str, exclude_id: int | None = None) -> None:
        doc = await self._collection.find_one({"name": name})
        if doc is not None and doc["_id"] != exclude_id:
            raise ValidationError(f"Category '{name}' already exists")

    async def create_category(self, name: str, image: str | None = None) -> Category:
        """Create category with a unique, non-blank name."""
        name = name.strip()
        if not name:
            raise ValidationError("Category name is required")
        await self._ensure_name_available(name)

        try:
            category = await self.insert(lambda entity_id: Category(id=entity_id, name=name, image=image))
        except DuplicateKeyError as e:
            raise ValidationError(f"Category '{name}' already exists") from e
        logger.info("category_created", category_id=category.id, name=name)
        return category

    async def update_category(self, category_id: int, name: str | None = None, image: str | None = None) -> Category:
        """Rename category and/or replace its image."""
        await self.get(category_id)
        fields: dict[str, Any] = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Category name is required")
            await self._ensure_name_available(name, exclude_id=category_id)
            fields["name"] = name
        if image is not None:
            fields["image"] = image

        try:
            return await self.update(category_id, fields)
        except DuplicateKeyError as e:
            raise ValidationError(f"Category '{name}' already exists") from e
