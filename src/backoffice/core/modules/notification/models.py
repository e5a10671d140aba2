from datetime import datetime
from enum import StrEnum
from typing import Protocol
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from backoffice.utils import now


class EventKind(StrEnum):
    """Kinds of messages pushed to order subscribers."""

    CONNECTED = "connected"  # Acknowledgement sent once to a new subscriber, not an order event
    NEW_ORDER = "newOrder"
    ORDER_UPDATE = "orderUpdate"
    ORDER_DELETE = "orderDelete"


class NotificationEvent(BaseModel):
    """Ephemeral message broadcast to connected subscribers. Never stored or retried."""

    kind: EventKind
    order_id: int | None = None
    message: str
    created_at: datetime = Field(default_factory=now)


class Subscriber(Protocol):
    """A connected consumer of notification events."""

    @property
    def is_open(self) -> bool: ...

    async def send(self, event: NotificationEvent) -> None: ...


class Subscription:
    """Handle returned by subscribe; pass it back to unsubscribe."""

    def __init__(self, subscriber: Subscriber) -> None:
        self.id: UUID = uuid4()
        self.subscriber = subscriber

    def __repr__(self) -> str:
        return f"Subscription(id={self.id})"
