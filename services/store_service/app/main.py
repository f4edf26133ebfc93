"""FastAPI application for the Store Service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.store_service.routers import (
    admin_catalog_router,
    admin_dashboard_router,
    cart_router,
    catalog_router,
    orders_router,
)
from services.store_service.schemas import HealthResponse


def create_app() -> FastAPI:
    """Create and configure the Store Service FastAPI app."""
    settings = get_settings()

    app = FastAPI(
        title="Kedai Store Service",
        version="0.1.0",
        description="Bilingual storefront - catalog, cart, checkout, orders and admin dashboard.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health-check", response_model=HealthResponse, tags=["system"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", timestamp=utc_now())

    # Public store routes (catalog, cart, checkout, orders)
    app.include_router(catalog_router)
    app.include_router(cart_router)
    app.include_router(orders_router)

    # Admin routes (dashboard, product management)
    app.include_router(admin_dashboard_router, prefix="/admin")
    app.include_router(admin_catalog_router, prefix="/admin")

    return app


app = create_app()
