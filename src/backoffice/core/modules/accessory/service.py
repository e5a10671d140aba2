from backoffice.core.entity import EntityService
from backoffice.core.modules.accessory.models import Accessory
from backoffice.core.modules.counter.models import EntityType
from backoffice.errors import ValidationError


class AccessoryService(EntityService[Accessory]):
    """Manages accessories."""

    entity_type = EntityType.ACCESSORY
    collection_name = "accessories"
    model = Accessory
    timestamped = False

    async def create_accessory(self, name: str) -> Accessory:
        name = name.strip()
        if not name:
            raise ValidationError("Accessory name is required")
        return await self.insert(lambda entity_id: Accessory(id=entity_id, name=name))

    async def rename_accessory(self, accessory_id: int, name: str) -> Accessory:
        name = name.strip()
        if not name:
            raise ValidationError("Accessory name is required")
        return await self.update(accessory_id, {"name": name})
