from typing import Any, Mapping, Optional


class StorefrontError(Exception):
    """Base class for errors surfaced to storefront clients.

    Attributes:
        message: human-readable message, shown to the visitor as a notification
        details: optional mapping with extra context (field errors, upstream info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    error_code = "INTERNAL_SERVER_ERROR"
    default_message = "Something went wrong!"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(StorefrontError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    error_code = "SERVICE_VALIDATION_ERROR"
    default_message = "Invalid input"


class UnauthorizedError(StorefrontError):
    """Raised when authentication or authorization fails. http_status is 401."""

    http_status = 401
    error_code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class NotFoundError(StorefrontError):
    """Raised when a requested resource was not found. http_status is 404."""

    http_status = 404
    error_code = "NOT_FOUND"
    default_message = "Not found"


class ConflictError(StorefrontError):
    """Raised when a resource conflict occurs (e.g., duplicate registration)."""

    http_status = 409
    error_code = "CONFLICT"
    default_message = "Conflict"


class BackendError(StorefrontError):
    """Raised when a remote service fails or answers with an unsuccessful payload.

    Attributes:
        status_code: HTTP status returned upstream, None on transport failure
    """

    http_status = 502
    error_code = "BACKEND_ERROR"
    default_message = "Server error while contacting the canteen backend."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, details=details, code=code)
        self.status_code = status_code


class CartSyncError(BackendError):
    """Raised after an optimistic cart change was rolled back because the backend refused it."""

    default_message = "Could not update your cart. Please try again."
