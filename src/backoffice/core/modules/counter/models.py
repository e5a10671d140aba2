"""Per-entity counters for sequential IDs with recycling."""

from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field


class EntityType(StrEnum):
    """Entities whose documents are keyed by sequential IDs."""

    PRODUCT = "product"
    BRAND = "brand"
    CATEGORY = "category"
    PACK = "pack"
    ORDER = "order"
    ACCESSORY = "accessory"


class Counter(BaseModel):
    """ID bookkeeping for one entity name.

    Every ID handed out for `name` is either live (owned by a document),
    pending reuse in `deleted_ids`, or unallocated (above `value`).
    Stored as `{name, value, deletedIds, version}`, indexed on name - unique.
    """

    name: str
    value: int = Field(default=0, ge=0)  # Highest ID ever minted; next fresh ID is value + 1
    deleted_ids: list[int] = Field(default_factory=list, alias="deletedIds")  # Freed IDs, oldest first
    version: int = Field(default=0, ge=0)  # Bumped on every write; records written without it count as 0

    model_config = ConfigDict(populate_by_name=True)

    def take_next(self) -> tuple[Self, int]:
        """Return the counter after one allocation and the allocated ID.

        Recycled IDs are consumed oldest-first; a fresh ID is minted only
        when the recycling pool is empty.
        """
        if self.deleted_ids:
            allocated, *rest = self.deleted_ids
            return self.model_copy(update={"deleted_ids": rest}), allocated
        allocated = self.value + 1
        return self.model_copy(update={"value": allocated}), allocated

    def with_released(self, entity_id: int) -> Self:
        """Return the counter with `entity_id` queued for reuse."""
        return self.model_copy(update={"deleted_ids": [*self.deleted_ids, entity_id]})

    def to_mongo(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
