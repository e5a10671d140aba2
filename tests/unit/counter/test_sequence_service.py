"""Tests for SequenceService allocation and recycling."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import AutoReconnect, ServerSelectionTimeoutError

from backoffice.core.modules.counter.service import SequenceService
from backoffice.core.modules.counter.store import CounterStore
from backoffice.errors import AllocationError, CounterConflictError, ReleaseError, ValidationError


class TestAllocate:
    """Tests for sequential allocation."""

    async def test_fresh_name_starts_at_one(self, sequence_service):
        """Test that the first two IDs of a new name are 1 and 2."""
        assert await sequence_service.allocate("widget") == 1
        assert await sequence_service.allocate("widget") == 2

    async def test_names_are_independent(self, sequence_service):
        """Test that each entity name has its own sequence."""
        await sequence_service.allocate("product")
        await sequence_service.allocate("product")

        assert await sequence_service.allocate("brand") == 1
        assert await sequence_service.allocate("product") == 3

    async def test_empty_name_rejected(self, sequence_service):
        """Test that an empty entity name is a validation error."""
        with pytest.raises(ValidationError):
            await sequence_service.allocate("")

    async def test_concurrent_allocations_are_unique(self, sequence_service):
        """Test that concurrent callers never receive the same ID."""
        ids = await asyncio.gather(*(sequence_service.allocate("order") for _ in range(50)))

        assert sorted(ids) == list(range(1, 51))

    async def test_counter_reflects_allocations(self, sequence_service):
        """Test that get_counter reports the high-water mark."""
        for _ in range(3):
            await sequence_service.allocate("widget")

        counter = await sequence_service.get_counter("widget")

        assert counter.value == 3
        assert counter.deleted_ids == []

    async def test_unknown_counter_is_empty(self, sequence_service, counter_store):
        """Test that inspecting an unseen name does not create it."""
        counter = await sequence_service.get_counter("ghost")

        assert counter.value == 0
        assert await counter_store.find_by_key("ghost") is None


class TestRelease:
    """Tests for ID recycling."""

    async def test_released_id_is_reused(self, sequence_service):
        """Test that a freed ID is handed out before a fresh one."""
        await sequence_service.allocate("widget")
        await sequence_service.allocate("widget")

        await sequence_service.release("widget", 1)

        assert await sequence_service.allocate("widget") == 1
        assert await sequence_service.allocate("widget") == 3

    async def test_released_ids_reused_in_release_order(self, sequence_service):
        """Test that recycling is first-in first-out."""
        await sequence_service.allocate("widget")
        await sequence_service.allocate("widget")

        await sequence_service.release("widget", 1)
        await sequence_service.release("widget", 2)

        assert await sequence_service.allocate("widget") == 1
        assert await sequence_service.allocate("widget") == 2

    async def test_release_order_not_numeric_order(self, sequence_service):
        """Test that the oldest release wins even when it is the larger ID."""
        for _ in range(3):
            await sequence_service.allocate("widget")

        await sequence_service.release("widget", 3)
        await sequence_service.release("widget", 1)

        assert await sequence_service.allocate("widget") == 3

    async def test_empty_name_rejected(self, sequence_service, counter_store):
        """Test that releasing under an empty entity name is a validation error."""
        with pytest.raises(ValidationError):
            await sequence_service.release("", 1)

        assert await counter_store.find_by_key("") is None

    async def test_concurrent_release_and_allocate_keep_ids_unique(self, sequence_service):
        """Test that IDs handed out during concurrent releases never collide with live ones."""
        for _ in range(10):
            await sequence_service.allocate("product")
        released = [2, 4, 6]
        live = set(range(1, 11)) - set(released)

        results = await asyncio.gather(
            *(sequence_service.release("product", entity_id) for entity_id in released),
            *(sequence_service.allocate("product") for _ in range(6)),
        )
        allocated = [entity_id for entity_id in results if entity_id is not None]

        assert len(set(allocated)) == 6
        assert not live & set(allocated)
        counter = await sequence_service.get_counter("product")
        assert set(counter.deleted_ids) | set(allocated) | live == set(range(1, counter.value + 1))


class TestCreateIfAbsent:
    """Tests for lazy counter creation."""

    async def test_concurrent_creation_yields_one_record(self, counter_store):
        """Test that racing creations leave a single zeroed counter."""
        first, second = await asyncio.gather(
            counter_store.create_if_absent("widget"), counter_store.create_if_absent("widget")
        )

        assert first.value == second.value == 0
        stored = await counter_store.find_by_key("widget")
        assert stored is not None
        assert stored.value == 0

    async def test_existing_counter_untouched(self, counter_store, sequence_service):
        """Test that creation does not reset a counter in use."""
        await sequence_service.allocate("widget")

        counter = await counter_store.create_if_absent("widget")

        assert counter.value == 1


class TestStoreFailures:
    """Tests for mapping storage failures to allocator errors."""

    @pytest.fixture
    def failing_store(self):
        return AsyncMock(spec=CounterStore)

    async def test_unreachable_store_raises_allocation_error(self, failing_store):
        """Test that allocation reports the entity name when storage is down."""
        failing_store.create_if_absent.side_effect = ServerSelectionTimeoutError("no servers available")
        service = SequenceService(MagicMock(), store=failing_store)

        with pytest.raises(AllocationError) as exc_info:
            await service.allocate("order")

        assert exc_info.value.entity_name == "order"

    async def test_exhausted_retries_raise_allocation_error(self, failing_store):
        """Test that losing every compare-and-swap race fails allocation."""
        failing_store.create_if_absent.return_value = None
        failing_store.atomic_update.side_effect = CounterConflictError("lost 10 races")
        service = SequenceService(MagicMock(), store=failing_store)

        with pytest.raises(AllocationError):
            await service.allocate("order")

    async def test_unreachable_store_raises_release_error(self, failing_store):
        """Test that release failures carry the entity and ID."""
        failing_store.atomic_update.side_effect = AutoReconnect("connection lost")
        service = SequenceService(MagicMock(), store=failing_store)

        with pytest.raises(ReleaseError) as exc_info:
            await service.release("brand", 4)

        assert exc_info.value.entity_name == "brand"
        assert exc_info.value.entity_id == 4
