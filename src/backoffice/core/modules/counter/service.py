import asyncio
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from backoffice.core.core import Service
from backoffice.core.modules.counter.models import Counter
from backoffice.core.modules.counter.store import CounterStore, InMemoryCounterStore, MongoCounterStore
from backoffice.errors import AllocationError, CounterConflictError, ReleaseError, ValidationError

logger = structlog.get_logger(__name__)

STORE_ERRORS = (PyMongoError, CounterConflictError, OSError)


def _take_next(counter: Counter) -> tuple[Counter, tuple[int, bool]]:
    updated, entity_id = counter.take_next()
    return updated, (entity_id, bool(counter.deleted_ids))


class SequenceService(Service):
    """Allocates sequential integer IDs per entity name and recycles freed ones.

    Calls for the same entity name are serialised by a per-name lock; the store's
    atomic update keeps them correct across processes. Different names never contend.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]], store: CounterStore | None = None) -> None:
        super().__init__(database)
        self._store = store
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def store(self) -> CounterStore:
        if self._store is None:
            if self.core.config.counter_backend == "memory":
                self._store = InMemoryCounterStore()
            else:
                self._store = MongoCounterStore(
                    self.database.get_collection("counters"), max_attempts=self.core.config.counter_max_attempts
                )
        return self._store

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self.store.on_start()

    def _lock(self, entity_name: str) -> asyncio.Lock:
        return self._locks.setdefault(entity_name, asyncio.Lock())

    async def allocate(self, entity_name: str) -> int:
        """Return an ID for a new `entity_name` document, preferring the oldest freed one.

        Raises:
            ValidationError: If entity_name is empty
            AllocationError: If the counter store is unreachable or keeps rejecting the update
        """
        if not entity_name:
            raise ValidationError("Entity name is required")

        async with self._lock(entity_name):
            try:
                await self.store.create_if_absent(entity_name)
                counter, (entity_id, recycled) = await self.store.atomic_update(entity_name, _take_next)
            except STORE_ERRORS as e:
                logger.exception("id_allocation_failed", entity=entity_name)
                raise AllocationError(entity_name, str(e)) from e

        if recycled:
            logger.debug("id_recycled", entity=entity_name, id=entity_id, pending=len(counter.deleted_ids))
        else:
            logger.debug("id_allocated", entity=entity_name, id=entity_id)
        return entity_id

    async def release(self, entity_name: str, entity_id: int) -> None:
        """Queue `entity_id` for reuse after its document has been deleted.

        The caller guarantees the document is gone and releases each ID once;
        releasing twice would hand the same ID to two documents.

        Raises:
            ValidationError: If entity_name is empty
            ReleaseError: If the counter store is unreachable
        """
        if not entity_name:
            raise ValidationError("Entity name is required")

        async with self._lock(entity_name):
            try:
                await self.store.atomic_update(entity_name, lambda c: (c.with_released(entity_id), None))
            except STORE_ERRORS as e:
                raise ReleaseError(entity_name, entity_id, str(e)) from e

        logger.debug("id_released", entity=entity_name, id=entity_id)

    async def get_counter(self, entity_name: str) -> Counter:
        """Get the counter state without modifying it."""
        counter = await self.store.find_by_key(entity_name)
        if counter is None:
            return Counter(name=entity_name)
        return counter
