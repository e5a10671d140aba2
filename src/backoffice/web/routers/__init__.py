from backoffice.web.routers.accessories import router as accessories_router
from backoffice.web.routers.brands import router as brands_router
from backoffice.web.routers.categories import router as categories_router
from backoffice.web.routers.notifications import router as notifications_router
from backoffice.web.routers.orders import router as orders_router
from backoffice.web.routers.packs import router as packs_router
from backoffice.web.routers.products import router as products_router
from backoffice.web.routers.sequences import router as sequences_router
from backoffice.web.routers.uploads import router as uploads_router

__all__ = [
    "accessories_router",
    "brands_router",
    "categories_router",
    "notifications_router",
    "orders_router",
    "packs_router",
    "products_router",
    "sequences_router",
    "uploads_router",
]
