"""
Health Check Endpoints.

Plain status endpoints used for monitoring and deployment verification.
"""

from fastapi import APIRouter

from agrilink import __version__
from agrilink.server.core import constant

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok"}


@router.get(
    "/",
    summary="Service Banner",
    description="Identify the running service and its version.",
    response_description="Banner object.",
)
async def banner():
    return {"service": constant.PROJECT_NAME, "version": __version__, "docs": f"{constant.API_V1_STR}/docs"}
