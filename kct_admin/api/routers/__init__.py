"""
API Routers
FastAPI route handlers for different endpoints.
"""

from .admin import router as admin_router
from .bulk import router as bulk_router
from .collections import router as collections_router
from .health import router as health_router
from .import_export import router as import_export_router
from .orders import router as orders_router
from .products import router as products_router
from .shipping import router as shipping_router
from .variants import router as variants_router
from .vendor import router as vendor_router

__all__ = [
    "health_router",
    "products_router",
    "bulk_router",
    "variants_router",
    "collections_router",
    "import_export_router",
    "vendor_router",
    "orders_router",
    "shipping_router",
    "admin_router",
]
