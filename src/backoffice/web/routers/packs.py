from typing import Annotated

from fastapi import APIRouter, Query, Response
from pydantic import BaseModel, Field

from backoffice.core.modules.pack.models import PackSortField, PackView
from backoffice.core.pagination import PaginationResult, SortOrder
from backoffice.web.deps import AppDep
from backoffice.web.openapi import ALLOCATION_FAILED, INVALID, NOT_FOUND

router: APIRouter = APIRouter(tags=["packs"])


class CreatePackRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(..., ge=0)
    image: str = Field("", description="Image URL returned by the upload endpoint")
    products: list[int] = Field(..., min_length=1, description="IDs of existing products")
    total_value: float = Field(..., ge=0, description="Combined price of the products if bought separately")


class UpdatePackRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    image: str | None = None
    products: list[int] | None = Field(None, min_length=1)
    total_value: float | None = Field(None, ge=0)


@router.get("/packs", summary="List packs", operation_id="listPacks")
async def list_packs(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=1000)] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
    search: Annotated[str | None, Query(description="Text matched against name and description")] = None,
    min_price: Annotated[float | None, Query(ge=0)] = None,
    max_price: Annotated[float | None, Query(ge=0)] = None,
    sort_by: PackSortField = PackSortField.NAME,
    sort_order: SortOrder = SortOrder.ASC,
) -> PaginationResult[PackView]:
    return await app.get_packs(limit, offset, search, min_price, max_price, sort_by, sort_order)


@router.get("/packs/{pack_id}", summary="Get pack", operation_id="getPack", responses={**NOT_FOUND})
async def get_pack(pack_id: int, app: AppDep) -> PackView:
    return await app.get_pack(pack_id)


@router.post(
    "/packs",
    summary="Create pack",
    description="Create a pack. Every listed product must exist.",
    operation_id="createPack",
    status_code=201,
    responses={**INVALID, **ALLOCATION_FAILED},
)
async def create_pack(request: CreatePackRequest, app: AppDep) -> PackView:
    return await app.create_pack(request.model_dump())


@router.patch(
    "/packs/{pack_id}", summary="Update pack", operation_id="updatePack", responses={**INVALID, **NOT_FOUND}
)
async def update_pack(pack_id: int, request: UpdatePackRequest, app: AppDep) -> PackView:
    return await app.update_pack(pack_id, request.model_dump(exclude_unset=True))


@router.delete(
    "/packs/{pack_id}", summary="Delete pack", operation_id="deletePack", status_code=204, responses={**NOT_FOUND}
)
async def delete_pack(pack_id: int, app: AppDep) -> Response:
    await app.delete_pack(pack_id)
    return Response(status_code=204)
