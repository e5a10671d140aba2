from typing import Annotated

from fastapi import APIRouter, Query, Response
from pydantic import BaseModel, Field

from backoffice.core.modules.order.models import CustomerDetails, Order, OrderItem, OrderStatus
from backoffice.core.pagination import PaginationResult
from backoffice.web.deps import AppDep
from backoffice.web.openapi import ALLOCATION_FAILED, INVALID, NOT_FOUND

router: APIRouter = APIRouter(tags=["orders"])


class CreateOrderRequest(BaseModel):
    items: list[OrderItem] = Field(..., min_length=1)
    customer_details: CustomerDetails
    subtotal: float = Field(..., ge=0)
    delivery_fee: float = Field(..., ge=0)
    total: float = Field(..., ge=0)
    status: OrderStatus = OrderStatus.PENDING


class UpdateOrderRequest(BaseModel):
    """Partial order update. Including `status` notifies order subscribers."""

    items: list[OrderItem] | None = Field(None, min_length=1)
    customer_details: CustomerDetails | None = None
    subtotal: float | None = Field(None, ge=0)
    delivery_fee: float | None = Field(None, ge=0)
    total: float | None = Field(None, ge=0)
    status: OrderStatus | None = None


@router.get("/orders", summary="List orders", description="Get paginated orders, newest first.", operation_id="listOrders")
async def list_orders(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, le=1000)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
    status: OrderStatus | None = None,
) -> PaginationResult[Order]:
    return await app.get_orders(limit, offset, status)


@router.get("/orders/{order_id}", summary="Get order", operation_id="getOrder", responses={**NOT_FOUND})
async def get_order(order_id: int, app: AppDep) -> Order:
    return await app.get_order(order_id)


@router.post(
    "/orders",
    summary="Create order",
    description="Create an order and push a `newOrder` event to connected order subscribers.",
    operation_id="createOrder",
    status_code=201,
    responses={**INVALID, **ALLOCATION_FAILED},
)
async def create_order(request: CreateOrderRequest, app: AppDep) -> Order:
    return await app.create_order(request.model_dump())


@router.patch(
    "/orders/{order_id}",
    summary="Update order",
    description="Partially update an order. An `orderUpdate` event is pushed when `status` is included.",
    operation_id="updateOrder",
    responses={**INVALID, **NOT_FOUND},
)
async def update_order(order_id: int, request: UpdateOrderRequest, app: AppDep) -> Order:
    return await app.update_order(order_id, request.model_dump(exclude_unset=True))


@router.delete(
    "/orders/{order_id}",
    summary="Delete order",
    description="Delete an order and push an `orderDelete` event.",
    operation_id="deleteOrder",
    status_code=204,
    responses={**NOT_FOUND},
)
async def delete_order(order_id: int, app: AppDep) -> Response:
    await app.delete_order(order_id)
    return Response(status_code=204)
