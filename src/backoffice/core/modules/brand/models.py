from datetime import datetime

from pydantic import Field

from backoffice.core.db import MongoModel
from backoffice.utils import now


class Brand(MongoModel):
    """Product brand. Names are unique."""

    name: str
    description: str = ""
    logo: str | None = None  # Upload URL of the logo image
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
