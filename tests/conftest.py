"""Shared pytest fixtures."""

import asyncio
import copy
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from backoffice.core.modules.counter.service import SequenceService
from backoffice.core.modules.counter.store import InMemoryCounterStore
from backoffice.core.modules.notification.models import NotificationEvent
from backoffice.core.modules.notification.service import NotificationService


class RecordingSubscriber:
    """Subscriber that keeps every event it receives."""

    def __init__(self, is_open: bool = True, fail: bool = False) -> None:
        self.events: list[NotificationEvent] = []
        self.open = is_open
        self.fail = fail

    @property
    def is_open(self) -> bool:
        return self.open

    async def send(self, event: NotificationEvent) -> None:
        if self.fail:
            raise ConnectionResetError("peer went away")
        self.events.append(event)

    @property
    def kinds(self) -> list[str]:
        return [str(event.kind) for event in self.events]


@pytest.fixture
def make_subscriber():
    """Factory for recording subscribers."""
    return RecordingSubscriber


class CasCollection:
    """In-memory `counters` collection that applies updates the way MongoDB does.

    Each call yields to the event loop before touching the data, so concurrent
    callers interleave between their read and their conditional write.
    """

    def __init__(self, *docs: dict[str, Any]) -> None:
        self.docs: dict[str, dict[str, Any]] = {doc["name"]: copy.deepcopy(doc) for doc in docs}

    @staticmethod
    def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
        for key, condition in query.items():
            if isinstance(condition, dict):
                if doc.get(key) not in condition["$in"]:
                    return False
            elif doc.get(key) != condition:
                return False
        return True

    async def create_index(self, *args: Any, **kwargs: Any) -> None:
        await asyncio.sleep(0)

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        doc = self.docs.get(query["name"])
        return copy.deepcopy(doc) if doc is not None and self._matches(doc, query) else None

    async def find_one_and_update(
        self, query: dict[str, Any], update: dict[str, Any], upsert: bool = False, **kwargs: Any
    ) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        doc = self.docs.get(query["name"])
        if doc is None:
            if not upsert:
                return None
            doc = self.docs[query["name"]] = {"name": query["name"], **copy.deepcopy(update.get("$setOnInsert", {}))}
            return copy.deepcopy(doc)
        if not self._matches(doc, query):
            return None
        doc.update(copy.deepcopy(update.get("$set", {})))
        for key, amount in update.get("$inc", {}).items():
            doc[key] = doc.get(key, 0) + amount
        return copy.deepcopy(doc)


@pytest.fixture
def make_cas_collection():
    """Factory for counter collections with real compare-and-swap matching."""
    return CasCollection


@pytest.fixture
def mock_database():
    """Database whose collections are mocks with async methods.

    Every get_collection call returns the same collection mock.
    """
    database = MagicMock()
    collection = database.get_collection.return_value
    for method in ("find_one", "insert_one", "find_one_and_update", "find_one_and_delete", "count_documents", "create_index"):
        setattr(collection, method, AsyncMock())
    collection.find_one.return_value = None
    return database


@pytest.fixture
def counter_store():
    return InMemoryCounterStore()


@pytest.fixture
def sequence_service(counter_store):
    """Sequence allocator backed by process memory."""
    return SequenceService(MagicMock(), store=counter_store)


@pytest.fixture
def notification_service():
    return NotificationService(MagicMock())


@pytest.fixture
def fake_core(sequence_service, notification_service, tmp_path):
    """Minimal core exposing config and the services entity services depend on."""
    config = SimpleNamespace(uploads_path=str(tmp_path / "uploads"), upload_max_size=1024 * 1024)
    core: Any = SimpleNamespace(
        config=config, services=SimpleNamespace(sequence=sequence_service, notification=notification_service)
    )
    sequence_service.set_core(core)
    notification_service.set_core(core)
    return core


@pytest.fixture
def order_data():
    """Order payload as received from the API."""
    return {
        "items": [
            {"product": 3, "name": "Gold Standard Whey", "flavour": "Chocolate", "size": "2lb", "quantity": 2, "price": 90.0}
        ],
        "customer_details": {
            "first_name": "Amine",
            "last_name": "Ben Salah",
            "phone_number": "+216 20 123 456",
            "email": "amine@example.com",
            "address": "12 Rue de Marseille",
            "postal_code": "1000",
            "governorate": "Tunis",
            "city": "Tunis",
        },
        "subtotal": 180.0,
        "delivery_fee": 8.0,
        "total": 188.0,
    }
