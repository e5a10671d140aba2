"""Tests for the HTTP and websocket surface."""

from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from backoffice.config import Config
from backoffice.core.modules.notification.service import NotificationService
from backoffice.core.pagination import PaginationResult
from backoffice.errors import AllocationError, NotFoundError, ValidationError
from backoffice.web.server import create_fastapi_app


class StubApp:
    """Stands in for App; records listing arguments and raises on demand."""

    def __init__(self) -> None:
        self.notifications = NotificationService(MagicMock())
        self.product_listing: tuple | None = None

    @asynccontextmanager
    async def lifespan(self):
        yield

    async def get_products(self, limit, offset, *filters):
        self.product_listing = (limit, offset, *filters)
        return PaginationResult(items=[], total=0, limit=limit, offset=offset)

    async def get_product(self, product_id):
        raise NotFoundError(f"Product not found: {product_id}")

    async def create_brand(self, name, description, logo):
        raise AllocationError("brand", "counter store unreachable")

    async def create_category(self, name, image):
        raise ValidationError(f"Category '{name}' already exists")

    async def delete_order(self, order_id):
        return None

    async def subscribe_to_orders(self, subscriber):
        return await self.notifications.subscribe(subscriber)

    async def unsubscribe_from_orders(self, subscription):
        await self.notifications.unsubscribe(subscription)


@pytest.fixture
def stub_app():
    return StubApp()


@pytest.fixture
def client(stub_app, tmp_path):
    config = Config(database_url="mongodb://localhost:27017/backoffice_test", uploads_path=str(tmp_path / "uploads"))
    with TestClient(create_fastapi_app(stub_app, config)) as test_client:
        yield test_client


class TestErrorResponses:
    """Tests for mapping errors to HTTP responses."""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_not_found(self, client):
        """Test that NotFoundError becomes 404 with a typed body."""
        response = client.get("/api/v1/products/42")

        assert response.status_code == 404
        assert response.json() == {"message": "Product not found: 42", "type": "not_found"}

    def test_validation_error(self, client):
        """Test that ValidationError becomes 400."""
        response = client.post("/api/v1/categories", json={"name": "Proteins"})

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_allocation_failure(self, client):
        """Test that a failed ID allocation is reported as retryable 503."""
        response = client.post("/api/v1/brands", json={"name": "Optimum Nutrition"})

        assert response.status_code == 503
        assert response.json()["type"] == "allocation_failed"

    def test_delete_returns_no_content(self, client):
        response = client.delete("/api/v1/orders/3")

        assert response.status_code == 204


class TestProductListing:
    """Tests for product listing parameters."""

    def test_comma_separated_lists(self, client, stub_app):
        """Test that flavours and sizes are split on commas."""
        response = client.get("/api/v1/products", params={"flavours": "Chocolate, Vanilla", "sizes": "2lb"})

        assert response.status_code == 200
        assert response.json()["total"] == 0
        limit, offset, *filters = stub_app.product_listing
        assert (limit, offset) == (50, 0)
        assert filters[6] == ["Chocolate", "Vanilla"]
        assert filters[7] == ["2lb"]

    def test_invalid_sort_field(self, client):
        """Test that unknown sort fields are rejected by request validation."""
        response = client.get("/api/v1/products", params={"sort_by": "colour"})

        assert response.status_code == 422


class TestOrderWebsocket:
    """Tests for the order notification websocket."""

    def test_connection_acknowledged(self, client):
        """Test that a new websocket subscriber is greeted."""
        with client.websocket_connect("/ws/orders") as websocket:
            message = websocket.receive_json()

        assert message["kind"] == "connected"
        assert message["order_id"] is None
