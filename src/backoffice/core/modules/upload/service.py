import asyncio

import structlog

from backoffice.core.core import Service
from backoffice.core.modules.upload.models import UploadedFile
from backoffice.core.modules.upload.storage import (
    ALLOWED_IMAGE_TYPES,
    UPLOADS_URL_PREFIX,
    build_stored_name,
    detect_image_format,
    write_upload_file,
)
from backoffice.errors import ValidationError

logger = structlog.get_logger(__name__)


class UploadService(Service):
    """Stores uploaded images on disk for products, brands, categories and packs."""

    def validate_image(self, content: bytes, mime_type: str) -> None:
        """Check type, size and that the bytes really are an image of that type.

        Raises:
            ValidationError: If the file is not an accepted image
        """
        accepted_formats = ALLOWED_IMAGE_TYPES.get(mime_type)
        if accepted_formats is None:
            raise ValidationError("Unsupported file type. Only JPEG, PNG, GIF, WEBP, and AVIF are allowed.")

        max_size = self.core.config.upload_max_size
        if len(content) > max_size:
            raise ValidationError(f"File too large: {len(content)} bytes (max {max_size})")
        if not content:
            raise ValidationError("File is empty")

        detected = detect_image_format(content)
        if detected not in accepted_formats:
            raise ValidationError(f"File content is not a valid {mime_type} image")

    async def save_image(self, filename: str, content: bytes, mime_type: str) -> UploadedFile:
        """Validate and store an image, returning its public URL."""
        await asyncio.to_thread(self.validate_image, content, mime_type)

        stored_name = build_stored_name(filename)
        file_path = await asyncio.to_thread(write_upload_file, self.core.config.uploads_path, stored_name, content)
        logger.debug("image_uploaded", path=str(file_path), size=len(content), mime_type=mime_type)

        return UploadedFile(
            url=f"{UPLOADS_URL_PREFIX}/{stored_name}", filename=stored_name, size=len(content), mime_type=mime_type
        )
