from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 5000
    debug: bool = False
    cors_origins: list[str] = []
    uploads_path: str = "uploads"  # Directory for uploaded images, served at /uploads
    upload_max_size: int = 5 * 1024 * 1024  # Max upload size in bytes
    counter_backend: Literal["mongo", "memory"] = "mongo"  # "memory" is only safe for a single process
    counter_max_attempts: int = Field(default=10, ge=1)  # Compare-and-swap attempts before allocation gives up

    model_config = {
        "env_file": [".env"],
        "env_prefix": "BACKOFFICE_",
        "extra": "ignore",
    }
