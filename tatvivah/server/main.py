"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers the exception handlers, and includes all API
routers under ``/v1``.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tatvivah.core.cache import close_cache
from tatvivah.core.database import dispose_engine
from tatvivah.core.logging_config import get_logger, setup_logging
from tatvivah.core.monitoring import initialize_logfire
from tatvivah.notifications import notification_service

from .api.v1 import (
    admin,
    admin_notifications,
    auth,
    bestsellers,
    cart,
    categories,
    checkout,
    health,
    orders,
    payments,
    products,
    reviews,
    seller_products,
    sellers,
    shipments,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    On shutdown, pending notification jobs are cancelled and the database
    engine and cache client are closed.
    """
    logger.info(f"Starting up TatVivah API ({settings.environment})...")

    yield

    logger.info("Shutting down TatVivah API...")
    await notification_service.dispatcher.shutdown()
    await dispose_engine()
    await close_cache()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    TatVivah Marketplace API

    Backend for a multi-seller marketplace: catalog and moderation, carts
    and checkout, payments with seller settlements, per-seller shipments, and an
    audited admin back office.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

V1 = constant.API_V1_STR

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{V1}/auth", tags=["auth"])
app.include_router(sellers.router, prefix=f"{V1}/seller", tags=["sellers"])
app.include_router(categories.router, prefix=f"{V1}/categories", tags=["categories"])
app.include_router(products.router, prefix=f"{V1}/products", tags=["products"])
app.include_router(seller_products.router, prefix=f"{V1}/seller/products", tags=["seller"])
app.include_router(cart.router, prefix=f"{V1}/cart", tags=["cart"])
app.include_router(checkout.router, prefix=f"{V1}/checkout", tags=["checkout"])
app.include_router(shipments.tracking_router, prefix=f"{V1}/orders", tags=["shipments"])
app.include_router(orders.router, prefix=f"{V1}/orders", tags=["orders"])
app.include_router(orders.seller_router, prefix=f"{V1}/seller/orders", tags=["seller"])
app.include_router(shipments.seller_router, prefix=f"{V1}/seller/shipments", tags=["shipments"])
app.include_router(payments.webhook_router, prefix=f"{V1}/payments/webhook", tags=["payments"])
app.include_router(payments.router, prefix=f"{V1}/payments", tags=["payments"])
app.include_router(payments.settlement_router, prefix=f"{V1}/seller/settlements", tags=["seller"])
app.include_router(reviews.router, prefix=f"{V1}/reviews", tags=["reviews"])
app.include_router(bestsellers.router, prefix=f"{V1}/bestsellers", tags=["bestsellers"])
app.include_router(admin.router, prefix=f"{V1}/admin", tags=["admin"])
app.include_router(categories.admin_router, prefix=f"{V1}/admin/categories", tags=["admin"])
app.include_router(reviews.admin_router, prefix=f"{V1}/admin/reviews", tags=["admin"])
app.include_router(bestsellers.admin_router, prefix=f"{V1}/admin/bestsellers", tags=["admin"])
app.include_router(shipments.admin_router, prefix=f"{V1}/admin/shipments", tags=["admin"])
app.include_router(admin_notifications.router, prefix=f"{V1}/admin/notifications", tags=["admin"])


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_config=None)


if __name__ == "__main__":
    run()
