"""File storage operations for uploaded images."""

import re
import time
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

UPLOADS_URL_PREFIX = "/uploads"

# Content type -> Pillow format names accepted for it
ALLOWED_IMAGE_TYPES: dict[str, set[str]] = {
    "image/jpeg": {"JPEG", "MPO"},
    "image/png": {"PNG"},
    "image/gif": {"GIF"},
    "image/webp": {"WEBP"},
    "image/avif": {"AVIF"},
}


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe filesystem storage on Unix-like systems.

    Args:
        filename: Original filename from user

    Returns:
        Sanitized filename safe for filesystem use
    """
    # Remove path components to prevent traversal attacks
    filename = Path(filename).name
    filename = filename.lstrip(".")

    # Allow only word characters, dots, and hyphens; spaces become hyphens for URL use
    sanitized = re.sub(r"\s+", "-", filename.strip())
    sanitized = re.sub(r"[^\w.-]", "_", sanitized)
    sanitized = re.sub(r"_+", "_", sanitized)

    if len(sanitized) > 100:
        name, dot, ext = sanitized.rpartition(".")
        sanitized = f"{name[: 99 - len(ext)]}.{ext}" if dot and len(ext) < 20 else sanitized[:100]

    if not re.sub(r"[._-]", "", sanitized):
        sanitized = "image"

    return sanitized


def build_stored_name(filename: str, timestamp_ms: int | None = None) -> str:
    """Prefix the sanitized name with a millisecond timestamp so repeated uploads don't collide."""
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"{timestamp_ms}-{sanitize_filename(filename)}"


def detect_image_format(content: bytes) -> str | None:
    """Return the Pillow format name if content is a readable image, else None."""
    try:
        with Image.open(BytesIO(content)) as img:
            img.verify()
            return img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None


def write_upload_file(uploads_path: str, stored_name: str, content: bytes) -> Path:
    """Write file to disk, creating the uploads directory if needed.

    Returns:
        Absolute path to written file
    """
    file_path = Path(uploads_path).resolve() / stored_name
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content)
    return file_path
