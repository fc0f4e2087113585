"""Centralized exception hierarchy for the application.

All custom exceptions inherit from AppException, which provides:
- Consistent error response format
- HTTP status codes
- Machine-readable error codes
- Optional details dict for additional context

The service turns these into JSON responses in main.py; the client raises
the transport-level ones itself when the auth service cannot be reached.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dict for JSON serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class AuthenticationError(AppException):
    """Credentials were rejected or no valid session cookie was presented."""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTH_FAILED",
    ):
        super().__init__(message, error_code, 401)


class ResourceNotFoundError(AppException):
    """Requested resource does not exist."""

    def __init__(self, resource: str, identifier: str | None = None):
        msg = f"{resource} not found"
        if identifier:
            msg = f"{resource} not found: {identifier}"
        super().__init__(
            msg,
            f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            404,
            {"resource": resource, "id": identifier}
            if identifier
            else {"resource": resource},
        )


class ResourceExistsError(AppException):
    """Resource already exists (duplicate key, unique constraint violation)."""

    def __init__(
        self,
        resource: str,
        field: str | None = None,
        message: str | None = None,
    ):
        msg = f"{resource} already exists"
        if field:
            msg = f"{resource} with this {field} already exists"
        super().__init__(
            message or msg,
            f"{resource.upper().replace(' ', '_')}_EXISTS",
            409,
            {"resource": resource, "field": field} if field else {"resource": resource},
        )


class ValidationError(AppException):
    """Request validation failed (beyond Pydantic's automatic validation)."""

    def __init__(self, message: str, field: str | None = None, error_code: str = "VALIDATION_ERROR"):
        super().__init__(
            message,
            error_code,
            422,
            {"field": field} if field else {},
        )


class ExternalServiceError(AppException):
    """External service (auth service, SMTP relay) is unavailable or failed."""

    def __init__(self, service: str, message: str | None = None):
        msg = f"{service} is unavailable"
        if message:
            msg = f"{service}: {message}"
        super().__init__(
            msg,
            "EXTERNAL_SERVICE_ERROR",
            503,
            {"service": service},
        )


class TimeoutError(AppException):
    """Operation timed out."""

    def __init__(self, operation: str, timeout_seconds: float | None = None):
        msg = f"{operation} timed out"
        if timeout_seconds:
            msg = f"{operation} timed out after {timeout_seconds}s"
        super().__init__(
            msg,
            "TIMEOUT",
            504,
            {"operation": operation, "timeout_seconds": timeout_seconds}
            if timeout_seconds
            else {"operation": operation},
        )


class InvalidTokenError(AppException):
    """A password reset token is malformed, expired or already used."""

    def __init__(self, message: str = "Invalid token", error_code: str = "INVALID_TOKEN"):
        super().__init__(message, error_code, 400)
