"""
Query parameters shared by the paged endpoints.
"""

from typing import Annotated

from fastapi import Query

from agrilink.server.core import constant

PageParam = Annotated[int, Query(ge=0, description="Zero-based page index")]
SizeParam = Annotated[
    int, Query(ge=1, le=constant.MAX_PAGE_SIZE, description=f"Page size (max {constant.MAX_PAGE_SIZE})")
]
DEFAULT_PAGE = 0
DEFAULT_SIZE = constant.DEFAULT_PAGE_SIZE
