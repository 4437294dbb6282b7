"""
Service Errors

Base exception hierarchy shared by all feature services. Each error carries
a machine-readable ``error_code`` and the HTTP status the routers map it to.
"""

from fastapi import HTTPException


class ServiceError(Exception):
    """Base exception for service-layer errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class UnauthenticatedError(ServiceError):
    """No valid credentials were supplied."""

    def __init__(self, message: str = "You must be logged in to perform this action."):
        super().__init__(message=message, error_code="AUTHENTICATION_REQUIRED", status_code=401)


class ForbiddenError(ServiceError):
    """Authenticated, but the policy denies the action."""

    def __init__(
        self,
        message: str = "You are not permitted to perform this action.",
        error_code: str = "FORBIDDEN",
    ):
        super().__init__(message=message, error_code=error_code, status_code=403)


class NotFoundError(ServiceError):
    """The requested resource does not exist."""

    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class ConflictError(ServiceError):
    """The request conflicts with current state (duplicates, decided records)."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class ServiceFailureError(ServiceError):
    """A multi-step operation failed and was rolled back."""

    def __init__(self, message: str, error_code: str = "OPERATION_FAILED"):
        super().__init__(message=message, error_code=error_code, status_code=500)


def to_http_exception(e: ServiceError) -> HTTPException:
    """Convert a service error to the structured HTTPException routers raise."""
    headers = {"WWW-Authenticate": "Bearer"} if e.status_code == 401 else None
    return HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
        headers=headers,
    )


__all__ = [
    "ServiceError",
    "UnauthenticatedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ServiceFailureError",
    "to_http_exception",
]
