"""
FastAPI Main Application
Entry point for the KCT admin API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from ..config.settings import get_settings
from .errors import setup_error_handlers
from .middleware import RequestLoggingMiddleware, RequestTimingMiddleware
from .routers import (
    admin_router,
    bulk_router,
    collections_router,
    health_router,
    import_export_router,
    orders_router,
    products_router,
    shipping_router,
    variants_router,
    vendor_router,
)

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.version} ({settings.environment})")
    if settings.require_api_key and not settings.api_keys:
        logger.warning("API_REQUIRE_KEY is set but API_KEYS is empty")

    yield

    logger.info(f"Shutting down {settings.app_name}...")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=settings.description,
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Set up CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Add GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Add custom middleware
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # Set up error handlers
    setup_error_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(bulk_router)
    app.include_router(products_router)
    app.include_router(variants_router)
    app.include_router(collections_router)
    app.include_router(import_export_router)
    app.include_router(vendor_router)
    app.include_router(orders_router)
    app.include_router(shipping_router)
    app.include_router(admin_router)

    @app.get("/")
    def root():
        """API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "description": settings.description,
            "endpoints": {
                "health": "/health",
                "status": "/status",
                "products": "/api/v1/products",
                "collections": "/api/v1/collections",
                "csv": "/api/v1/csv",
                "vendor_inbox": "/api/v1/vendor/inbox",
                "orders": "/api/v1/orders",
                "tasks": "/api/v1/admin/tasks",
                "docs": "/docs",
            },
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "kct_admin.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )
