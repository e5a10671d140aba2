from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from backoffice.core.modules.category.models import Category
from backoffice.web.deps import AppDep
from backoffice.web.openapi import ALLOCATION_FAILED, INVALID, NOT_FOUND

router: APIRouter = APIRouter(tags=["categories"])


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., description="Unique category name", min_length=1)
    image: str | None = Field(None, description="Image URL returned by the upload endpoint")


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(None, description="New unique name", min_length=1)
    image: str | None = Field(None, description="New image URL")


@router.get("/categories", summary="List categories", operation_id="listCategories")
async def list_categories(app: AppDep) -> list[Category]:
    return await app.get_categories()


@router.get(
    "/categories/{category_id}", summary="Get category", operation_id="getCategory", responses={**NOT_FOUND}
)
async def get_category(category_id: int, app: AppDep) -> Category:
    return await app.get_category(category_id)


@router.post(
    "/categories",
    summary="Create category",
    description="Create a category. Its ID is the oldest freed category ID, or the next unused one.",
    operation_id="createCategory",
    status_code=201,
    responses={**INVALID, **ALLOCATION_FAILED},
)
async def create_category(request: CreateCategoryRequest, app: AppDep) -> Category:
    return await app.create_category(request.name, request.image)


@router.patch(
    "/categories/{category_id}",
    summary="Update category",
    operation_id="updateCategory",
    responses={**INVALID, **NOT_FOUND},
)
async def update_category(category_id: int, request: UpdateCategoryRequest, app: AppDep) -> Category:
    return await app.update_category(category_id, request.name, request.image)


@router.delete(
    "/categories/{category_id}",
    summary="Delete category",
    description="Delete a category; its ID becomes available for the next category created.",
    operation_id="deleteCategory",
    status_code=204,
    responses={**NOT_FOUND},
)
async def delete_category(category_id: int, app: AppDep) -> Response:
    await app.delete_category(category_id)
    return Response(status_code=204)
