"""Tests for product creation, updates and deletion."""

from unittest.mock import AsyncMock

import pytest

from backoffice.core.modules.product.service import ProductService
from backoffice.errors import NotFoundError, ValidationError


@pytest.fixture
def pack_service(fake_core):
    fake_core.services.pack = AsyncMock()
    fake_core.services.pack.find_by_product.return_value = []
    return fake_core.services.pack


@pytest.fixture
def product_service(mock_database, fake_core, pack_service):
    service = ProductService(mock_database)
    service.set_core(fake_core)
    return service


@pytest.fixture
def collection(mock_database):
    return mock_database.get_collection.return_value


@pytest.fixture
def product_data():
    return {
        "name": "Gold Standard Whey",
        "price": 189.0,
        "category": "Proteins",
        "brand": "Optimum Nutrition",
        "short_description": "24g of protein per serving",
        "flavours": ["Chocolate"],
        "sizes": ["2lb"],
    }


class TestCreateProduct:
    """Tests for ProductService.create_product."""

    async def test_creates_with_defaults(self, product_service, collection, product_data):
        """Test that optional fields get their defaults."""
        product = await product_service.create_product(product_data)

        assert product.id == 1
        assert product.stock == 0
        assert product.has_promo is False
        assert collection.insert_one.call_args.args[0]["_id"] == 1

    async def test_promo_requires_both_prices(self, product_service, product_data, sequence_service):
        """Test that a promo without prices is rejected without using an ID."""
        with pytest.raises(ValidationError, match="promo_price"):
            await product_service.create_product({**product_data, "has_promo": True, "promo_price": 150.0})

        assert (await sequence_service.get_counter("product")).value == 0

    async def test_too_many_sizes_rejected(self, product_service, product_data):
        """Test that size lists are capped."""
        with pytest.raises(ValidationError, match="sizes"):
            await product_service.create_product({**product_data, "sizes": ["1", "2", "3", "4", "5", "6"]})


class TestUpdateProduct:
    """Tests for ProductService.update_product."""

    async def test_merged_document_validated(self, product_service, collection, product_data):
        """Test that an update leaving the product invalid is refused."""
        collection.find_one.return_value = {"_id": 1, **product_data}

        with pytest.raises(ValidationError):
            await product_service.update_product(1, {"has_promo": True})

        collection.find_one_and_update.assert_not_awaited()

    async def test_partial_update(self, product_service, collection, product_data):
        """Test that only the given fields are written."""
        collection.find_one.return_value = {"_id": 1, **product_data}
        collection.find_one_and_update.return_value = {"_id": 1, **product_data, "stock": 4}

        product = await product_service.update_product(1, {"stock": 4})

        assert product.stock == 4
        update = collection.find_one_and_update.call_args.args[1]
        assert update["$set"]["stock"] == 4
        assert set(update["$set"]) == {"stock", "updated_at"}


class TestDeleteProduct:
    """Tests for ProductService.delete."""

    async def test_product_in_pack_not_deleted(
        self, product_service, pack_service, collection, product_data, sequence_service
    ):
        """Test that a product listed by a pack keeps its document and its ID."""
        await product_service.create_product(product_data)
        pack_service.find_by_product.return_value = [3, 8]

        with pytest.raises(ValidationError, match="packs 3, 8"):
            await product_service.delete(1)

        collection.find_one_and_delete.assert_not_awaited()
        assert (await sequence_service.get_counter("product")).deleted_ids == []

    async def test_id_not_reused_while_pack_references_it(self, product_service, pack_service, product_data):
        """Test that a refused delete leaves the ID out of the recycle queue."""
        first = await product_service.create_product(product_data)
        pack_service.find_by_product.return_value = [1]

        with pytest.raises(ValidationError):
            await product_service.delete(first.id)
        second = await product_service.create_product(product_data)

        assert second.id == 2

    async def test_unreferenced_product_deleted_and_id_recycled(
        self, product_service, pack_service, collection, product_data
    ):
        """Test that a product in no pack is deleted and its ID reused."""
        await product_service.create_product(product_data)
        collection.find_one_and_delete.return_value = {"_id": 1, **product_data}

        await product_service.delete(1)
        recreated = await product_service.create_product(product_data)

        pack_service.find_by_product.assert_awaited_once_with(1)
        assert recreated.id == 1

    async def test_missing_product(self, product_service, collection):
        collection.find_one_and_delete.return_value = None

        with pytest.raises(NotFoundError):
            await product_service.delete(9)
