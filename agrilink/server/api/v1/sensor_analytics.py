"""
Sensor Analytics Endpoint.

Dashboard snapshot of a farmer's devices: counts, per-device summaries,
24 hour hourly histories, current conditions and active alerts.
"""

from fastapi import APIRouter

from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.iot import SensorAnalytics
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import SensorAnalyticsServiceDep

router = APIRouter()


@router.get(
    "/sensors",
    response_model=ApiResponse[SensorAnalytics],
    summary="Sensor Analytics",
    description="Aggregate the caller's sensor data for the IoT dashboard.",
    response_description="Sensor analytics snapshot.",
)
async def get_sensor_analytics(user: CurrentUserDep, service: SensorAnalyticsServiceDep):
    """
    Build the sensor dashboard.

    - **sensor_summaries**: one entry per device from its latest reading.
    - **temperature_history / humidity_history / soil_moisture_history**: hourly averages over the last 24 hours.
    - **current_conditions**: latest known values and an OPTIMAL / WARNING / CRITICAL status.
    - **active_alerts**: up to 10 unacknowledged alerts, newest first.
    """
    return ApiResponse.ok(await service.get_sensor_analytics(user.id))
