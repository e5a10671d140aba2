from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from backoffice.core.modules.accessory.models import Accessory
from backoffice.web.deps import AppDep
from backoffice.web.openapi import ALLOCATION_FAILED, INVALID, NOT_FOUND

router: APIRouter = APIRouter(tags=["accessories"])


class AccessoryRequest(BaseModel):
    name: str = Field(..., min_length=1)


@router.get("/accessories", summary="List accessories", operation_id="listAccessories")
async def list_accessories(app: AppDep) -> list[Accessory]:
    return await app.get_accessories()


@router.get(
    "/accessories/{accessory_id}", summary="Get accessory", operation_id="getAccessory", responses={**NOT_FOUND}
)
async def get_accessory(accessory_id: int, app: AppDep) -> Accessory:
    return await app.get_accessory(accessory_id)


@router.post(
    "/accessories",
    summary="Create accessory",
    operation_id="createAccessory",
    status_code=201,
    responses={**INVALID, **ALLOCATION_FAILED},
)
async def create_accessory(request: AccessoryRequest, app: AppDep) -> Accessory:
    return await app.create_accessory(request.name)


@router.patch(
    "/accessories/{accessory_id}",
    summary="Rename accessory",
    operation_id="updateAccessory",
    responses={**INVALID, **NOT_FOUND},
)
async def update_accessory(accessory_id: int, request: AccessoryRequest, app: AppDep) -> Accessory:
    return await app.rename_accessory(accessory_id, request.name)


@router.delete(
    "/accessories/{accessory_id}",
    summary="Delete accessory",
    operation_id="deleteAccessory",
    status_code=204,
    responses={**NOT_FOUND},
)
async def delete_accessory(accessory_id: int, app: AppDep) -> Response:
    await app.delete_accessory(accessory_id)
    return Response(status_code=204)
