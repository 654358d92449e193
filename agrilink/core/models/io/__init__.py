"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- common: response envelope, paging and error body
- auth, farms, iot, marketplace, orders, notifications, users: per-service schemas
"""

from .common import ApiResponse, ErrorResponse, PageResponse

__all__ = ["ApiResponse", "ErrorResponse", "PageResponse"]
