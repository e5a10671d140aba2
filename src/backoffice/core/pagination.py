from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field
from pymongo.asynchronous.collection import AsyncCollection

from backoffice.core.db import MongoModel


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"

    @property
    def direction(self) -> int:
        return 1 if self is SortOrder.ASC else -1


class PaginationResult[T](BaseModel):
    """Pagination result wrapper for list endpoints."""

    items: list[T] = Field(..., description="List of items in current page")
    total: int = Field(..., description="Total number of items matching the query", ge=0)
    limit: int = Field(..., description="Maximum items per page", ge=1)
    offset: int = Field(..., description="Number of items skipped", ge=0)

    @property
    def has_more(self) -> bool:
        """Whether there are more items beyond the current page."""
        return self.offset + len(self.items) < self.total


async def paginate[M: MongoModel](
    collection: AsyncCollection[dict[str, Any]],
    model: type[M],
    query: dict[str, Any],
    sort: list[tuple[str, int]],
    limit: int,
    offset: int,
) -> PaginationResult[M]:
    """Run a counted, sorted, paginated find and validate documents into `model`."""
    total = await collection.count_documents(query)
    # _id breaks ties so pages stay stable when the sort key repeats
    cursor = collection.find(query).sort([*sort, ("_id", 1)]).skip(offset).limit(limit)
    items = await model.list_cursor(cursor)
    return PaginationResult(items=items, total=total, limit=limit, offset=offset)
