from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from backoffice.core.db import MongoModel
from backoffice.utils import now


class OrderStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    """Line item as it was at checkout; copied, not referenced, so later product edits don't alter it."""

    product: int | None = None  # Product ID, if the line came from the catalog
    name: str
    flavour: str | None = None
    size: str | None = None
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)
    image: str | None = None


class CustomerDetails(BaseModel):
    first_name: str
    last_name: str
    phone_number: str
    email: str
    address: str
    postal_code: str
    governorate: str
    city: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Order(MongoModel):
    """Customer order."""

    items: list[OrderItem] = Field(min_length=1)
    customer_details: CustomerDetails
    subtotal: float = Field(ge=0)
    delivery_fee: float = Field(ge=0)
    total: float = Field(ge=0)
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
