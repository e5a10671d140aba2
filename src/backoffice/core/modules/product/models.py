from datetime import datetime
from enum import StrEnum
from typing import Self

from pydantic import Field, model_validator

from backoffice.core.db import MongoModel
from backoffice.utils import now

MAX_FLAVOURS = 10
MAX_SIZES = 5
MAX_IMAGES = 5


class ProductSortField(StrEnum):
    NAME = "name"
    PRICE = "price"
    CREATED_AT = "created_at"
    STOCK = "stock"


class Product(MongoModel):
    """Catalog product."""

    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    category: str
    sub_category: str | None = None
    brand: str
    images: list[str] = Field(default_factory=list, max_length=MAX_IMAGES)  # Upload URLs
    has_promo: bool = False
    original_price: float | None = Field(default=None, ge=0)  # Only meaningful when has_promo
    promo_price: float | None = Field(default=None, ge=0)  # Only meaningful when has_promo
    servings: int | None = Field(default=None, ge=1)
    short_description: str
    long_description: str = ""
    flavours: list[str] = Field(default_factory=list, max_length=MAX_FLAVOURS)
    sizes: list[str] = Field(default_factory=list, max_length=MAX_SIZES)
    stock: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    @model_validator(mode="after")
    def _check_promo(self) -> Self:
        if self.has_promo and (self.promo_price is None or self.original_price is None):
            raise ValueError("promo_price and original_price are required when has_promo is true")
        return self
