"""Tests for Counter state transitions."""

from backoffice.core.modules.counter.models import Counter


class TestTakeNext:
    """Tests for Counter.take_next."""

    def test_fresh_counter_mints_one(self):
        """Test that an empty counter hands out 1."""
        counter = Counter(name="widget")

        updated, entity_id = counter.take_next()

        assert entity_id == 1
        assert updated.value == 1
        assert updated.deleted_ids == []

    def test_mints_above_highest_value(self):
        """Test that a fresh ID is one above the highest ever minted."""
        updated, entity_id = Counter(name="widget", value=7).take_next()

        assert entity_id == 8
        assert updated.value == 8

    def test_prefers_oldest_released_id(self):
        """Test that recycled IDs are used first and oldest first."""
        counter = Counter(name="widget", value=5, deleted_ids=[4, 2])

        updated, entity_id = counter.take_next()

        assert entity_id == 4
        assert updated.deleted_ids == [2]
        assert updated.value == 5  # recycling never moves the high-water mark

    def test_does_not_modify_original(self):
        """Test that take_next returns a new counter."""
        counter = Counter(name="widget", value=1, deleted_ids=[1])

        counter.take_next()

        assert counter.deleted_ids == [1]


class TestWithReleased:
    """Tests for Counter.with_released."""

    def test_appends_to_queue_tail(self):
        """Test that released IDs join the end of the queue."""
        counter = Counter(name="widget", value=3, deleted_ids=[2])

        updated = counter.with_released(1)

        assert updated.deleted_ids == [2, 1]
        assert counter.deleted_ids == [2]

    def test_mongo_document_has_no_id(self):
        """Test that the stored form is keyed by name only."""
        doc = Counter(name="order", value=2).to_mongo()

        assert doc == {"name": "order", "value": 2, "deletedIds": [], "version": 0}

    def test_reads_stored_layout(self):
        """Test that a stored record with deletedIds and no version validates."""
        counter = Counter.model_validate({"_id": "abc", "name": "brand", "value": 5, "deletedIds": [2, 4]})

        assert counter.deleted_ids == [2, 4]
        assert counter.version == 0
