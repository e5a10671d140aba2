from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from backoffice.core.db import MongoModel
from backoffice.utils import now


class PackSortField(StrEnum):
    NAME = "name"
    PRICE = "price"
    CREATED_AT = "created_at"


class Pack(MongoModel):
    """Bundle of products sold together at a pack price."""

    name: str = Field(min_length=1)
    description: str = ""
    price: float = Field(ge=0)
    image: str = ""  # Upload URL, empty when the pack has no image
    products: list[int] = Field(min_length=1)  # Product IDs
    total_value: float = Field(ge=0)  # Sum of the bundled products' prices, shown against `price`
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class PackProduct(BaseModel):
    """Product summary embedded in pack responses."""

    id: int
    name: str
    price: float
    promo_price: float | None = None
    images: list[str] = []


class PackView(BaseModel):
    """Pack with its product IDs resolved to summaries."""

    id: int
    name: str
    description: str
    price: float
    image: str
    products: list[PackProduct]
    total_value: float
    created_at: datetime
    updated_at: datetime
