"""Base service for documents keyed by allocator-issued IDs."""

from collections.abc import Callable
from typing import Any, ClassVar

import pydantic
import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from backoffice.core.core import Service
from backoffice.core.db import MongoModel
from backoffice.core.modules.counter.models import EntityType
from backoffice.errors import NotFoundError, ReleaseError, ValidationError
from backoffice.utils import now

logger = structlog.get_logger(__name__)


def validate_document[T: pydantic.BaseModel](model: type[T], data: dict[str, Any]) -> T:
    """Validate `data` as `model`, reporting failures as user-facing validation errors."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        messages = []
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"]) or model.__name__
            messages.append(f"{location}: {err['msg']}")
        raise ValidationError("; ".join(messages)) from e


class EntityService[M: MongoModel](Service):
    """CRUD over one collection whose `_id` comes from the sequence allocator.

    Creation allocates before inserting and deletion releases after removing,
    so an ID is only recycled once nothing references it. An insert that fails
    after allocation strands its ID; it is never reused.
    """

    entity_type: ClassVar[EntityType]
    collection_name: ClassVar[str]
    model: type[M]
    timestamped: ClassVar[bool] = True

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection(self.collection_name)

    async def get(self, entity_id: int) -> M:
        doc = await self._collection.find_one({"_id": entity_id})
        if not doc:
            raise NotFoundError(f"{self.entity_type.capitalize()} not found: {entity_id}")
        return self.model.model_validate(doc)

    async def list_all(self) -> list[M]:
        cursor = self._collection.find({}).sort("_id", 1)
        return await self.model.list_cursor(cursor)

    async def exists(self, entity_id: int) -> bool:
        return await self._collection.count_documents({"_id": entity_id}, limit=1) > 0

    async def insert(self, build: Callable[[int], M]) -> M:
        """Allocate an ID, build the document with it and insert it.

        Raises:
            AllocationError: If no ID could be allocated; nothing is inserted
        """
        entity_id = await self.core.services.sequence.allocate(self.entity_type)
        document = build(entity_id)
        await self._collection.insert_one(document.to_mongo())
        logger.debug("entity_created", entity=self.entity_type, id=entity_id)
        return document

    async def update(self, entity_id: int, fields: dict[str, Any]) -> M:
        """Apply a partial update and return the stored document."""
        update_doc = dict(fields)
        if self.timestamped:
            update_doc["updated_at"] = now()
        doc = await self._collection.find_one_and_update(
            {"_id": entity_id}, {"$set": update_doc}, return_document=ReturnDocument.AFTER
        )
        if not doc:
            raise NotFoundError(f"{self.entity_type.capitalize()} not found: {entity_id}")
        return self.model.model_validate(doc)

    async def delete(self, entity_id: int) -> M:
        """Delete the document, then hand its ID back for reuse.

        A failed release is logged and ignored: the document is already gone
        and the ID is simply never recycled.
        """
        doc = await self._collection.find_one_and_delete({"_id": entity_id})
        if not doc:
            raise NotFoundError(f"{self.entity_type.capitalize()} not found: {entity_id}")
        deleted = self.model.model_validate(doc)

        try:
            await self.core.services.sequence.release(self.entity_type, entity_id)
        except ReleaseError:
            logger.warning("id_release_failed", entity=self.entity_type, id=entity_id, exc_info=True)

        logger.debug("entity_deleted", entity=self.entity_type, id=entity_id)
        return deleted
