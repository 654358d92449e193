"""
Builder for the JSON error body shared by every handler.
"""

from typing import Dict, List, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from agrilink.core.database import utc_now
from agrilink.core.models.io import ErrorResponse


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    validation_errors: Optional[Dict[str, List[str]]] = None,
    error_id: Optional[str] = None,
) -> JSONResponse:
    body = ErrorResponse(
        status=status_code,
        error=error,
        message=message,
        path=request.url.path,
        timestamp=utc_now(),
        validation_errors=validation_errors,
        error_id=error_id,
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body.model_dump(exclude_none=True)))
