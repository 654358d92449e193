"""
Envelope and paging schemas shared by every API endpoint.

Business endpoints answer with ``ApiResponse[T]``; failures are rendered by
the server's exception handlers as ``ErrorResponse``.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from agrilink.core.database.repositories.base import Page

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform ``{success, message, data}`` envelope."""

    success: bool = Field(default=True, description="Whether the call succeeded")
    message: Optional[str] = Field(default=None, description="Human readable outcome")
    data: Optional[T] = Field(default=None, description="Response payload")

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "ApiResponse":
        return cls(success=True, message=message, data=data)


class PageResponse(BaseModel, Generic[T]):
    """A zero-based page of results."""

    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool

    @classmethod
    def from_page(cls, page: Page, convert: Optional[Callable[[Any], Any]] = None) -> "PageResponse":
        return cls(
            content=[convert(item) for item in page.content] if convert else list(page.content),
            page=page.page,
            size=page.size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            first=page.first,
            last=page.last,
        )


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    success: bool = False
    status: int
    error: str = Field(description="Machine readable error code")
    message: str
    path: str
    timestamp: datetime
    validation_errors: Optional[Dict[str, List[str]]] = None
    error_id: Optional[str] = None
