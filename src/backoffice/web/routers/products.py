from typing import Annotated

from fastapi import APIRouter, Query, Response
from pydantic import BaseModel, Field

from backoffice.core.modules.product.models import MAX_FLAVOURS, MAX_IMAGES, MAX_SIZES, Product, ProductSortField
from backoffice.core.pagination import PaginationResult, SortOrder
from backoffice.web.deps import AppDep
from backoffice.web.openapi import ALLOCATION_FAILED, INVALID, NOT_FOUND

router: APIRouter = APIRouter(tags=["products"])


class CreateProductRequest(BaseModel):
    """Request to create a new product."""

    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: str
    sub_category: str | None = None
    brand: str
    images: list[str] = Field([], max_length=MAX_IMAGES, description="Image URLs returned by the upload endpoint")
    has_promo: bool = False
    original_price: float | None = Field(None, ge=0, description="Required when has_promo is true")
    promo_price: float | None = Field(None, ge=0, description="Required when has_promo is true")
    servings: int | None = Field(None, ge=1)
    short_description: str
    long_description: str = ""
    flavours: list[str] = Field([], max_length=MAX_FLAVOURS)
    sizes: list[str] = Field([], max_length=MAX_SIZES)
    stock: int = Field(0, ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Gold Standard Whey",
                    "price": 189.0,
                    "category": "Proteins",
                    "brand": "Optimum Nutrition",
                    "images": ["/uploads/1718000000000-whey.png"],
                    "has_promo": True,
                    "original_price": 210.0,
                    "promo_price": 189.0,
                    "servings": 74,
                    "short_description": "24g of protein per serving",
                    "flavours": ["Chocolate", "Vanilla"],
                    "sizes": ["2lb", "5lb"],
                    "stock": 12,
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    """Partial product update. Only provided fields change."""

    name: str | None = Field(None, min_length=1)
    price: float | None = Field(None, ge=0)
    category: str | None = None
    sub_category: str | None = None
    brand: str | None = None
    images: list[str] | None = Field(None, max_length=MAX_IMAGES)
    has_promo: bool | None = None
    original_price: float | None = Field(None, ge=0)
    promo_price: float | None = Field(None, ge=0)
    servings: int | None = Field(None, ge=1)
    short_description: str | None = None
    long_description: str | None = None
    flavours: list[str] | None = Field(None, max_length=MAX_FLAVOURS)
    sizes: list[str] | None = Field(None, max_length=MAX_SIZES)
    stock: int | None = Field(None, ge=0)


def split_csv(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


@router.get(
    "/products",
    summary="List products",
    description="""Get paginated products with optional filtering.

- `search` matches name, short description, category and brand (case-insensitive)
- `flavours` and `sizes` are comma-separated; a product matches if it offers any of them
- Without `sort_by`, newest products come first""",
    operation_id="listProducts",
)
async def list_products(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=1000, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
    search: Annotated[str | None, Query(description="Text to search for")] = None,
    category: str | None = None,
    brand: str | None = None,
    has_promo: bool | None = None,
    min_price: Annotated[float | None, Query(ge=0)] = None,
    max_price: Annotated[float | None, Query(ge=0)] = None,
    flavours: Annotated[str | None, Query(description="Comma-separated flavours")] = None,
    sizes: Annotated[str | None, Query(description="Comma-separated sizes")] = None,
    sort_by: ProductSortField | None = None,
    sort_order: SortOrder = SortOrder.ASC,
) -> PaginationResult[Product]:
    return await app.get_products(
        limit,
        offset,
        search,
        category,
        brand,
        has_promo,
        min_price,
        max_price,
        split_csv(flavours),
        split_csv(sizes),
        sort_by,
        sort_order,
    )


@router.get("/products/{product_id}", summary="Get product", operation_id="getProduct", responses={**NOT_FOUND})
async def get_product(product_id: int, app: AppDep) -> Product:
    return await app.get_product(product_id)


@router.post(
    "/products",
    summary="Create product",
    operation_id="createProduct",
    status_code=201,
    responses={**INVALID, **ALLOCATION_FAILED},
)
async def create_product(request: CreateProductRequest, app: AppDep) -> Product:
    return await app.create_product(request.model_dump())


@router.patch(
    "/products/{product_id}",
    summary="Update product",
    operation_id="updateProduct",
    responses={**INVALID, **NOT_FOUND},
)
async def update_product(product_id: int, request: UpdateProductRequest, app: AppDep) -> Product:
    return await app.update_product(product_id, request.model_dump(exclude_unset=True))


@router.delete(
    "/products/{product_id}",
    summary="Delete product",
    description="Delete a product. Products still contained in a pack cannot be deleted.",
    operation_id="deleteProduct",
    status_code=204,
    responses={**INVALID, **NOT_FOUND},
)
async def delete_product(product_id: int, app: AppDep) -> Response:
    await app.delete_product(product_id)
    return Response(status_code=204)
