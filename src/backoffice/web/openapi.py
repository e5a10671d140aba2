from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

OPENAPI_TAGS = [
    {"name": "products", "description": "Catalog products with promo pricing, flavours and sizes"},
    {"name": "brands", "description": "Product brands"},
    {"name": "categories", "description": "Product categories"},
    {"name": "packs", "description": "Bundles of existing products sold at one price"},
    {"name": "orders", "description": "Customer orders; changes are pushed to `/ws/orders` subscribers"},
    {"name": "accessories", "description": "Named accessories"},
    {"name": "uploads", "description": "Image uploads referenced by URL from other documents"},
    {"name": "sequences", "description": "Sequential ID counters per entity"},
]


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Backoffice API",
            version="0.1.0",
            summary="Store back-office: catalog, orders and live order notifications",
            routes=app.routes,
            tags=OPENAPI_TAGS,
        )

        # Sequential integer IDs everywhere, document it once on the path parameters
        for path_item in openapi_schema["paths"].values():
            for operation in path_item.values():
                for parameter in operation.get("parameters", []):
                    if parameter["in"] == "path" and parameter["name"].endswith("_id"):
                        parameter.setdefault("description", "Sequential ID, freed IDs are reused oldest first")

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Product not found: 42", "type": "not_found"},
                {"message": "Brand 'Optimum' already exists", "type": "validation_error"},
                {"message": "Could not allocate an identifier, please retry.", "type": "allocation_failed"},
            ]
        }
    }


NOT_FOUND = {404: {"model": ErrorResponse, "description": "Document not found"}}
INVALID = {400: {"model": ErrorResponse, "description": "Invalid data or validation failed"}}
ALLOCATION_FAILED = {503: {"model": ErrorResponse, "description": "No identifier could be allocated; nothing was created"}}
