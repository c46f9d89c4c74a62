"""
Canteen Storefront FastAPI Application
Main entry point: middleware, configuration and remote service clients
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio
from typing import Optional

from api.routes import health, menu, auth, cart, orders, admin, recommendations, chat

from domain.models import init_database
from adapters import backend_client, chat_client, recommendation_client

from app.config import settings

from api.middleware import (
    REQUEST_ID_HEADER,
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    storefront_exception_handler,
    general_exception_handler,
)
from app.exceptions import StorefrontError
from services.menu_service import catalog

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("storefront.main")


def connect_clients():
    backend_client.connect(settings.backend_url, timeout=settings.http_timeout_sec)
    recommendation_client.connect(
        settings.recommendation_api_url,
        settings.special_recommendation_url,
        timeout=settings.http_timeout_sec,
        # development never calls the recommender; widgets are built from the menu
        synthesize_only=settings.is_development(),
    )
    chat_client.connect(settings.chat_api_url, timeout=settings.http_timeout_sec)


def close_clients():
    for adapter in (backend_client, recommendation_client, chat_client):
        try:
            adapter.close()
        except Exception as e:
            _logger.exception("Error closing %s during shutdown: %s", adapter.__name__, e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.
    Creates the session tables (with retries) and the remote service clients.
    """
    last_exc: Optional[Exception] = None

    _logger.info(f"Starting {settings.app_name} in {settings.environment.value} mode")

    for attempt in range(1, settings.db_init_attempts + 1):
        try:
            await anyio.to_thread.run_sync(init_database)
            _logger.info("Database initialization succeeded")
            break
        except Exception as exc:
            last_exc = exc
            _logger.warning(
                "Database init attempt %d/%d failed: %s",
                attempt,
                settings.db_init_attempts,
                exc,
            )
            if attempt < settings.db_init_attempts:
                await anyio.sleep(settings.db_init_delay_sec)
            else:
                _logger.error(
                    "Database initialization failed after %d attempts", attempt
                )
                raise

    if not settings.is_testing():
        connect_clients()
        # Warm the menu cache (best-effort, the backend may be cold-starting)
        await anyio.to_thread.run_sync(catalog.load_food_list)

    try:
        yield
    finally:
        _logger.info(f"Shutting down {settings.app_name}")
        if not settings.is_testing():
            close_clients()


# Create FastAPI application with enhanced configuration
app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=(
        f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
    ),
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
    expose_headers=[settings.session_header, REQUEST_ID_HEADER],
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Register exception handlers
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(StorefrontError, storefront_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(menu.router, prefix=settings.api_prefix)
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(cart.router, prefix=settings.api_prefix)
app.include_router(orders.router, prefix=settings.api_prefix)
app.include_router(admin.router, prefix=settings.api_prefix)
app.include_router(recommendations.router, prefix=settings.api_prefix)
app.include_router(chat.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
