"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    StorefrontError,
    ServiceValidationError,
    NotFoundError,
    ConflictError,
    UnauthorizedError,
    BackendError,
    CartSyncError,
)

__all__ = [
    "settings",
    "StorefrontError",
    "ServiceValidationError",
    "NotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "BackendError",
    "CartSyncError",
]
