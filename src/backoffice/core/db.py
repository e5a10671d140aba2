from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor


class MongoModel(BaseModel):
    """Document keyed by a sequential integer ID issued by the sequence allocator.

    The ID is stored as Mongo's `_id` and exposed as `id` in the API.
    """

    id: int = Field(alias="_id", serialization_alias="id", ge=1)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Document as inserted, with the allocated ID under `_id`."""
        return {"_id": self.id, **self.model_dump(exclude={"id"})}

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        return [cls.model_validate(item) async for item in cursor]
