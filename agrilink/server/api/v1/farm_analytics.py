"""
Farm Analytics Endpoints.
"""

import uuid

from fastapi import APIRouter

from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.farms import DashboardSummary, FarmAnalytics
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import FarmAnalyticsServiceDep

router = APIRouter()


@router.get(
    "/farms/{farm_id}",
    response_model=ApiResponse[FarmAnalytics],
    summary="Farm Analytics",
    description="Crop distribution, status breakdown, area utilisation, yield statistics and monthly activity for one farm.",
    responses={
        403: {"description": "Farm belongs to another farmer"},
        404: {"description": "Farm not found"},
    },
)
async def get_farm_analytics(farm_id: uuid.UUID, user: CurrentUserDep, service: FarmAnalyticsServiceDep):
    return ApiResponse.ok(await service.get_farm_analytics(farm_id, user.id))


@router.get(
    "/dashboard",
    response_model=ApiResponse[DashboardSummary],
    summary="Farmer Dashboard",
    description="Totals across all of the caller's farms, upcoming activities and recent harvests.",
)
async def get_dashboard(user: CurrentUserDep, service: FarmAnalyticsServiceDep):
    return ApiResponse.ok(await service.get_dashboard_summary(user.id))
