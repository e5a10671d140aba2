from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backoffice.app import App
from backoffice.config import Config
from backoffice.core.modules.upload.storage import UPLOADS_URL_PREFIX
from backoffice.errors import AllocationError, UserError
from backoffice.web.error_handlers import allocation_error_handler, general_exception_handler, user_error_handler
from backoffice.web.openapi import set_custom_openapi
from backoffice.web.routers import (
    accessories_router,
    brands_router,
    categories_router,
    notifications_router,
    orders_router,
    packs_router,
    products_router,
    sequences_router,
    uploads_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="Backoffice API", lifespan=lifespan)

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    # API v1 routes
    app.include_router(products_router, prefix="/api/v1")
    app.include_router(brands_router, prefix="/api/v1")
    app.include_router(categories_router, prefix="/api/v1")
    app.include_router(packs_router, prefix="/api/v1")
    app.include_router(orders_router, prefix="/api/v1")
    app.include_router(accessories_router, prefix="/api/v1")
    app.include_router(uploads_router, prefix="/api/v1")
    app.include_router(sequences_router, prefix="/api/v1")
    app.include_router(notifications_router)

    # Uploaded images are served as-is
    uploads_dir = Path(config.uploads_path)
    uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=uploads_dir), name="uploads")

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(AllocationError, allocation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
