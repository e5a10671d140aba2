"""Counter storage backends.

A store guarantees that `atomic_update` applies its transform as an indivisible
read-modify-write on a single counter record.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from backoffice.core.modules.counter.models import Counter
from backoffice.errors import CounterConflictError

logger = structlog.get_logger(__name__)

type CounterTransform[R] = Callable[[Counter], tuple[Counter, R]]


def version_condition(version: int) -> int | dict[str, list[int | None]]:
    """Match `version`; a record that never had the field is at version 0."""
    if version == 0:
        return {"$in": [0, None]}
    return version


class CounterStore(ABC):
    """Persistent counter records keyed by entity name."""

    async def on_start(self) -> None:
        """Prepare the backend (indexes etc.)."""

    @abstractmethod
    async def find_by_key(self, name: str) -> Counter | None:
        """Get the counter for `name`, or None if it was never created."""

    @abstractmethod
    async def create_if_absent(self, name: str) -> Counter:
        """Create an empty counter for `name` unless one exists; return the stored record."""

    @abstractmethod
    async def atomic_update[R](self, name: str, transform: CounterTransform[R]) -> tuple[Counter, R]:
        """Apply `transform` to the stored counter atomically.

        Returns the persisted counter and the transform's result.
        """


class MongoCounterStore(CounterStore):
    """Counters in a MongoDB collection, updated by compare-and-swap on `version`."""

    def __init__(self, collection: AsyncCollection[dict[str, Any]], max_attempts: int = 10) -> None:
        self._collection = collection
        self._max_attempts = max_attempts

    async def on_start(self) -> None:
        await self._collection.create_index([("name", 1)], unique=True)

    async def find_by_key(self, name: str) -> Counter | None:
        doc = await self._collection.find_one({"name": name})
        if doc is None:
            return None
        return Counter.model_validate(doc)

    async def create_if_absent(self, name: str) -> Counter:
        initial = Counter(name=name).to_mongo()
        del initial["name"]
        try:
            doc = await self._collection.find_one_and_update(
                {"name": name},
                {"$setOnInsert": initial},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # Two upserts raced on the unique index; the winner's record is the one to use
            doc = await self._collection.find_one({"name": name})
        if doc is None:
            raise CounterConflictError(f"Counter '{name}' vanished during creation")
        return Counter.model_validate(doc)

    async def atomic_update[R](self, name: str, transform: CounterTransform[R]) -> tuple[Counter, R]:
        for attempt in range(1, self._max_attempts + 1):
            current = await self.find_by_key(name)
            if current is None:
                current = await self.create_if_absent(name)

            updated, result = transform(current)
            doc = await self._collection.find_one_and_update(
                {"name": name, "version": version_condition(current.version)},
                {
                    "$set": {"value": updated.value, "deletedIds": updated.deleted_ids},
                    "$inc": {"version": 1},
                },
                return_document=ReturnDocument.AFTER,
            )
            if doc is not None:
                return Counter.model_validate(doc), result

            logger.debug("counter_update_conflict", name=name, attempt=attempt, version=current.version)

        raise CounterConflictError(f"Counter '{name}' update lost {self._max_attempts} races in a row")


class InMemoryCounterStore(CounterStore):
    """Process-local counters, each guarded by its own lock."""

    def __init__(self) -> None:
        self._counters: dict[str, Counter] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock(self, name: str) -> asyncio.Lock:
        return self._locks.setdefault(name, asyncio.Lock())

    async def find_by_key(self, name: str) -> Counter | None:
        return self._counters.get(name)

    async def create_if_absent(self, name: str) -> Counter:
        return self._counters.setdefault(name, Counter(name=name))

    async def atomic_update[R](self, name: str, transform: CounterTransform[R]) -> tuple[Counter, R]:
        async with self._lock(name):
            current = await self.create_if_absent(name)
            updated, result = transform(current)
            stored = updated.model_copy(update={"version": current.version + 1})
            self._counters[name] = stored
            return stored, result
