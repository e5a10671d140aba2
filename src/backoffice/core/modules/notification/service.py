import asyncio
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from backoffice.core.core import Service
from backoffice.core.modules.notification.models import EventKind, NotificationEvent, Subscriber, Subscription

logger = structlog.get_logger(__name__)


class NotificationService(Service):
    """Best-effort fan-out of order events to currently connected subscribers.

    There is no queue and no replay: a subscriber only sees events published
    while it is registered and open.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._subscriptions: dict[UUID, Subscription] = {}
        self._lock = asyncio.Lock()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    async def subscribe(self, subscriber: Subscriber) -> Subscription:
        """Send the connection acknowledgement, then register subscriber.

        The acknowledgement is always the first message a subscriber sees. A
        subscriber that cannot receive it is never registered.
        """
        subscription = Subscription(subscriber)
        ack = NotificationEvent(kind=EventKind.CONNECTED, message="Connected to order notifications")
        if not await self._deliver(subscription, ack):
            return subscription

        async with self._lock:
            self._subscriptions[subscription.id] = subscription
        logger.debug("subscriber_connected", subscription_id=subscription.id, total=self.subscriber_count)
        return subscription

    async def unsubscribe(self, subscription: Subscription) -> None:
        """Deregister subscription. Unknown or already removed handles are ignored."""
        async with self._lock:
            removed = self._subscriptions.pop(subscription.id, None)
        if removed is not None:
            logger.debug("subscriber_disconnected", subscription_id=subscription.id, total=self.subscriber_count)

    async def publish(self, event: NotificationEvent) -> int:
        """Deliver event once to every subscriber registered and open right now.

        Failed deliveries never fail the call; broken subscribers are dropped.

        Returns:
            Number of subscribers the event was delivered to
        """
        async with self._lock:
            snapshot = list(self._subscriptions.values())

        delivered = 0
        for subscription in snapshot:
            if not subscription.subscriber.is_open:
                continue
            if await self._deliver(subscription, event):
                delivered += 1

        logger.debug("event_published", kind=event.kind, order_id=event.order_id, delivered=delivered)
        return delivered

    async def _deliver(self, subscription: Subscription, event: NotificationEvent) -> bool:
        try:
            await subscription.subscriber.send(event)
        except Exception:
            logger.warning(
                "notification_delivery_failed", subscription_id=subscription.id, kind=event.kind, exc_info=True
            )
            await self.unsubscribe(subscription)
            return False
        return True

    async def on_stop(self) -> None:
        async with self._lock:
            self._subscriptions.clear()
