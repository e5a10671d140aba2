from fastapi import APIRouter, UploadFile

from backoffice.core.modules.upload.models import UploadedFile
from backoffice.web.deps import AppDep
from backoffice.web.openapi import INVALID

router: APIRouter = APIRouter(tags=["uploads"])


@router.post(
    "/uploads",
    summary="Upload image",
    description=(
        "Upload a JPEG, PNG, GIF, WEBP or AVIF image. "
        "Returns the public URL to store in a product, brand, category or pack."
    ),
    operation_id="uploadImage",
    status_code=201,
    responses={**INVALID},
)
async def upload_image(file: UploadFile, app: AppDep) -> UploadedFile:
    content = await file.read()
    filename = file.filename or "image"
    mime_type = file.content_type or "application/octet-stream"
    return await app.upload_image(filename, content, mime_type)
