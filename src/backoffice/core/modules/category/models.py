from datetime import datetime

from pydantic import Field

from backoffice.core.db import MongoModel
from backoffice.utils import now


class Category(MongoModel):
    """Product category. Names are unique."""

    name: str
    image: str | None = None  # Upload URL, e.g. /uploads/1718000000000-shakers.png
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
