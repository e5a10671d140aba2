from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from backoffice.core.modules.brand.models import Brand
from backoffice.web.deps import AppDep
from backoffice.web.openapi import ALLOCATION_FAILED, INVALID, NOT_FOUND

router: APIRouter = APIRouter(tags=["brands"])


class CreateBrandRequest(BaseModel):
    name: str = Field(..., description="Unique brand name", min_length=1)
    description: str = Field("", description="Free-text description")
    logo: str | None = Field(None, description="Logo URL returned by the upload endpoint")


class UpdateBrandRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    logo: str | None = None


@router.get("/brands", summary="List brands", operation_id="listBrands")
async def list_brands(app: AppDep) -> list[Brand]:
    return await app.get_brands()


@router.get("/brands/{brand_id}", summary="Get brand", operation_id="getBrand", responses={**NOT_FOUND})
async def get_brand(brand_id: int, app: AppDep) -> Brand:
    return await app.get_brand(brand_id)


@router.post(
    "/brands",
    summary="Create brand",
    operation_id="createBrand",
    status_code=201,
    responses={**INVALID, **ALLOCATION_FAILED},
)
async def create_brand(request: CreateBrandRequest, app: AppDep) -> Brand:
    return await app.create_brand(request.name, request.description, request.logo)


@router.patch(
    "/brands/{brand_id}",
    summary="Update brand",
    description="Partially update a brand. Omitted fields keep their values.",
    operation_id="updateBrand",
    responses={**INVALID, **NOT_FOUND},
)
async def update_brand(brand_id: int, request: UpdateBrandRequest, app: AppDep) -> Brand:
    return await app.update_brand(brand_id, request.name, request.description, request.logo)


@router.delete(
    "/brands/{brand_id}", summary="Delete brand", operation_id="deleteBrand", status_code=204, responses={**NOT_FOUND}
)
async def delete_brand(brand_id: int, app: AppDep) -> Response:
    await app.delete_brand(brand_id)
    return Response(status_code=204)
