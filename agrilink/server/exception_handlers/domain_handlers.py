"""
Handlers for expected failures: domain exceptions, request validation and
database constraint violations.
"""

from typing import Dict, List

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from agrilink.core.exceptions import AgriLinkException
from agrilink.core.logging_config import get_logger

from .responses import error_response

logger = get_logger(__name__)

# Location prefixes that say where a value came from rather than which field it is
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def collect_validation_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Group validation messages by dotted field name."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_ROOTS:
            loc = loc[1:]
        field = ".".join(loc) or "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


async def agrilink_exception_handler(request: Request, exc: AgriLinkException) -> JSONResponse:
    logger.info(
        f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
        extra={"status_code": exc.status_code, "error_code": exc.error_code, "path": request.url.path},
    )
    return error_response(request, exc.status_code, exc.error_code, exc.message)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = collect_validation_errors(exc)
    logger.info(
        f"Validation failed on {request.method} {request.url.path}",
        extra={"path": request.url.path, "fields": sorted(errors)},
    )
    return error_response(request, 400, "VALIDATION_ERROR", "Validation failed", validation_errors=errors)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(
        f"Constraint violation on {request.method} {request.url.path}: {exc.orig}",
        extra={"path": request.url.path},
    )
    return error_response(
        request, 409, "CONSTRAINT_VIOLATION", "The request conflicts with existing data"
    )
