from pydantic import BaseModel, Field


class UploadedFile(BaseModel):
    """Stored image, referenced from entity documents by its URL."""

    url: str = Field(..., description="Public URL path, e.g. /uploads/1718000000000-logo.png")
    filename: str = Field(..., description="Stored file name")
    size: int = Field(..., description="File size in bytes", ge=0)
    mime_type: str = Field(..., description="Content type (e.g., image/png)")
