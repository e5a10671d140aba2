from typing import Any

import structlog

from backoffice.core.entity import EntityService, validate_document
from backoffice.core.modules.counter.models import EntityType
from backoffice.core.modules.notification.models import EventKind, NotificationEvent
from backoffice.core.modules.order.models import Order, OrderStatus
from backoffice.core.pagination import PaginationResult, paginate

logger = structlog.get_logger(__name__)


class OrderService(EntityService[Order]):
    """Manages customer orders and announces their lifecycle to subscribers.

    Exactly one notification is published per creation, per update that
    carries a status, and per deletion, always after the database write.
    """

    entity_type = EntityType.ORDER
    collection_name = "orders"
    model = Order

    async def on_start(self) -> None:
        await self._collection.create_index([("status", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def list_orders(
        self, limit: int = 50, offset: int = 0, status: OrderStatus | None = None
    ) -> PaginationResult[Order]:
        """Get paginated orders, newest first."""
        query: dict[str, Any] = {}
        if status is not None:
            query["status"] = status
        return await paginate(self._collection, Order, query, [("created_at", -1)], limit, offset)

    async def create_order(self, data: dict[str, Any]) -> Order:
        validate_document(Order, {**data, "id": 1})
        order = await self.insert(lambda entity_id: validate_document(Order, {**data, "id": entity_id}))
        logger.info("order_created", order_id=order.id, total=order.total, items=len(order.items))

        await self.core.services.notification.publish(
            NotificationEvent(
                kind=EventKind.NEW_ORDER,
                order_id=order.id,
                message=f"New order #{order.id} from {order.customer_details.full_name} ({order.total:.2f})",
            )
        )
        return order

    async def update_order(self, order_id: int, fields: dict[str, Any]) -> Order:
        """Partially update an order. Subscribers hear about it only if the status was part of the update."""
        current = await self.get(order_id)
        merged = validate_document(Order, {**current.model_dump(), **fields})
        order = await self.update(order_id, merged.model_dump(include=set(fields)))

        if "status" in fields:
            logger.info("order_status_changed", order_id=order_id, old=current.status, new=order.status)
            await self.core.services.notification.publish(
                NotificationEvent(
                    kind=EventKind.ORDER_UPDATE,
                    order_id=order.id,
                    message=f"Order #{order.id} status changed to {order.status}",
                )
            )
        return order

    async def delete_order(self, order_id: int) -> None:
        await self.delete(order_id)
        await self.core.services.notification.publish(
            NotificationEvent(kind=EventKind.ORDER_DELETE, order_id=order_id, message=f"Order #{order_id} was deleted")
        )
