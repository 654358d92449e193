"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request timing), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agrilink import __version__
from agrilink.core.database import init_db
from agrilink.core.logging_config import get_logger, setup_logging
from agrilink.core.monitoring import initialize_logfire

from .api.v1 import (
    addresses,
    alert_rules,
    alerts,
    auth,
    cart,
    categories,
    devices,
    farm_analytics,
    farm_export,
    farms,
    follows,
    health,
    listings,
    messages,
    notifications,
    orders,
    payments,
    profiles,
    reviews,
    sensor_analytics,
    telemetry,
    wishlist,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging(log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the schema for local SQLite databases on startup. PostgreSQL
    deployments are migrated with Alembic before the server starts.
    """
    logger.info(f"Starting up {constant.PROJECT_NAME} Server...")
    await init_db()
    logger.info("Database initialized successfully")

    yield

    logger.info(f"Shutting down {constant.PROJECT_NAME} Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    AgriLink Server API

    Backend services for the AgriLink agricultural marketplace: farm and crop
    management, IoT telemetry ingestion with threshold alerting, produce
    listings, carts, orders and payments, notifications and messaging.
    """,
    version=__version__,
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
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)

API = constant.API_V1_STR

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{API}/auth", tags=["auth"])

# Farm management
app.include_router(farms.farms_router, prefix=f"{API}/farms", tags=["farms"])
app.include_router(farms.fields_router, prefix=f"{API}/fields", tags=["farms"])
app.include_router(farms.crop_plans_router, prefix=f"{API}/crop-plans", tags=["farms"])
app.include_router(farm_analytics.router, prefix=f"{API}/farm-analytics", tags=["farm-analytics"])
app.include_router(farm_export.router, prefix=f"{API}/export", tags=["farms"])

# IoT
app.include_router(devices.router, prefix=f"{API}/devices", tags=["iot"])
app.include_router(alert_rules.router, prefix=f"{API}/alert-rules", tags=["iot"])
app.include_router(telemetry.router, prefix=f"{API}/telemetry", tags=["iot"])
app.include_router(alerts.router, prefix=f"{API}/alerts", tags=["iot"])
app.include_router(sensor_analytics.router, prefix=f"{API}/analytics", tags=["iot"])

# Marketplace
app.include_router(listings.router, prefix=f"{API}/listings", tags=["marketplace"])
app.include_router(reviews.router, prefix=f"{API}/reviews", tags=["marketplace"])
app.include_router(categories.router, prefix=f"{API}/categories", tags=["marketplace"])
app.include_router(wishlist.router, prefix=f"{API}/wishlist", tags=["marketplace"])

# Orders
app.include_router(cart.router, prefix=f"{API}/cart", tags=["orders"])
app.include_router(orders.router, prefix=f"{API}/orders", tags=["orders"])
app.include_router(payments.router, prefix=f"{API}/payments", tags=["orders"])

# Notifications
app.include_router(notifications.router, prefix=f"{API}/notifications", tags=["notifications"])
app.include_router(messages.router, prefix=f"{API}/messages", tags=["messaging"])

# Users
app.include_router(profiles.farmer_router, prefix=f"{API}/profiles/farmer", tags=["profiles"])
app.include_router(profiles.manager_router, prefix=f"{API}/profiles/manager", tags=["profiles"])
app.include_router(profiles.customer_router, prefix=f"{API}/profiles/customer", tags=["profiles"])
app.include_router(profiles.admin_router, prefix=f"{API}/admin/profiles", tags=["admin"])
app.include_router(addresses.router, prefix=f"{API}/addresses", tags=["addresses"])
app.include_router(follows.router, prefix=f"{API}/follows", tags=["follows"])

initialize_logfire(app)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "agrilink.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
