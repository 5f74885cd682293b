"""
Domain exceptions.

Services raise these; the HTTP layer maps each to its status code in one
place (backend.app.error_handlers). Messages are safe to show to clients.
"""

from typing import Any


class ServiceDeskError(Exception):
    """Base class for expected, client-facing failures."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, errors: list[dict[str, Any]] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(ServiceDeskError):
    """Malformed, missing or out-of-range input."""

    status_code = 400
    default_message = "Validation failed"


class AuthenticationError(ServiceDeskError):
    """Bad credentials or a bad/expired token."""

    status_code = 401
    default_message = "Not authenticated"


class InvalidToken(AuthenticationError):
    """Token signature, expiry, type or subject check failed."""

    default_message = "Invalid or expired token"


class AuthorizationError(ServiceDeskError):
    """Role or ownership check denied the operation."""

    status_code = 403
    default_message = "Access denied"


class NotFoundError(ServiceDeskError):
    """No record exists for the requested identifier."""

    status_code = 404
    default_message = "Not found"


__all__ = [
    "ServiceDeskError",
    "ValidationError",
    "AuthenticationError",
    "InvalidToken",
    "AuthorizationError",
    "NotFoundError",
]
