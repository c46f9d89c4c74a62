"""
Consolidated middleware for the storefront API
"""

import time
import logging
from uuid import uuid4
from decimal import Decimal

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from api.responses import ErrorDetail, ErrorResponse
from app.config import settings
from app.exceptions import BackendError, StorefrontError

logger = logging.getLogger("storefront.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    elif isinstance(obj, Exception):
        return str(obj)
    return obj


def _error_body(code: str, message, details=None) -> dict:
    return ErrorResponse(
        error=ErrorDetail(code=code, message=str(message), details=details or None)
    ).model_dump(mode="json")


# ============================================================================
# Request Logging Middleware
# ============================================================================


REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request with its id, the storefront session and the time taken"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        session = (request.headers.get(settings.session_header) or "new")[:8]
        start_time = time.time()

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.error(
                "%s %s failed after %.4fs [request=%s session=%s]",
                request.method,
                request.url.path,
                time.time() - start_time,
                request_id,
                session,
                exc_info=True,
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            "%s %s -> %d in %.4fs [request=%s session=%s]",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
            request_id,
            session,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=_error_body(
            "VALIDATION_ERROR",
            "Request validation failed",
            make_serializable(exc.errors()),
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(f"HTTP_{exc.status_code}", exc.detail),
    )


async def storefront_exception_handler(request: Request, exc: StorefrontError):
    """Handle storefront errors (validation, auth, not found, upstream failures)"""
    status_code = exc.http_status
    # client errors reported by the backend keep their status
    if isinstance(exc, BackendError) and exc.status_code and 400 <= exc.status_code < 500:
        status_code = exc.status_code

    if status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url}: {exc}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.code or exc.error_code, exc.message, exc.details),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
    )
