"""
Domain exceptions.

Services raise these; the server's exception handlers translate them into
the JSON error body. Routers never build error responses by hand.
"""

from typing import Any


class AgriLinkException(Exception):
    """Base exception carrying an HTTP status and a machine readable error code."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: int | None = None, error_code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code


class BadRequestException(AgriLinkException):
    status_code = 400
    error_code = "BAD_REQUEST"


class ResourceNotFoundException(AgriLinkException):
    """Raised when a looked-up record does not exist.

    The message follows the form ``"Device not found with id: '...'"``.
    """

    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource: str, field: str, value: Any) -> None:
        super().__init__(f"{resource} not found with {field}: '{value}'")
        self.resource = resource
        self.field = field
        self.value = value


class UnauthorizedException(AgriLinkException):
    status_code = 401
    error_code = "UNAUTHORIZED"


class ForbiddenException(AgriLinkException):
    status_code = 403
    error_code = "FORBIDDEN"


__all__ = [
    "AgriLinkException",
    "BadRequestException",
    "ForbiddenException",
    "ResourceNotFoundException",
    "UnauthorizedException",
]
