"""
Alert Endpoints.

Alerts are raised during telemetry ingestion; these endpoints list and
acknowledge them for the calling farmer.
"""

import uuid
from typing import List

from fastapi import APIRouter

from agrilink.core.models.io import ApiResponse, PageResponse
from agrilink.core.models.io.iot import AlertCount, AlertRead
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import AlertServiceDep, DeviceServiceDep

from .params import DEFAULT_PAGE, DEFAULT_SIZE, PageParam, SizeParam

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[PageResponse[AlertRead]],
    summary="List Alerts",
    description="Page through the caller's alerts, newest first.",
)
async def list_alerts(
    user: CurrentUserDep,
    service: AlertServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    result = await service.get_alerts_by_farmer(user.id, page, size)
    return ApiResponse.ok(PageResponse.from_page(result, AlertRead.model_validate))


@router.get(
    "/unacknowledged",
    response_model=ApiResponse[List[AlertRead]],
    summary="Unacknowledged Alerts",
)
async def list_unacknowledged_alerts(user: CurrentUserDep, service: AlertServiceDep):
    alerts = await service.get_unacknowledged_alerts(user.id)
    return ApiResponse.ok([AlertRead.model_validate(a) for a in alerts])


@router.get(
    "/count",
    response_model=ApiResponse[AlertCount],
    summary="Unacknowledged Alert Count",
)
async def count_unacknowledged_alerts(user: CurrentUserDep, service: AlertServiceDep):
    count = await service.get_unacknowledged_count(user.id)
    return ApiResponse.ok(AlertCount(unacknowledged=count))


@router.get(
    "/device/{device_id}",
    response_model=ApiResponse[PageResponse[AlertRead]],
    summary="Device Alerts",
    description="Page through the alerts raised by one of the caller's devices.",
)
async def list_device_alerts(
    device_id: uuid.UUID,
    user: CurrentUserDep,
    devices: DeviceServiceDep,
    service: AlertServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    await devices.get_device_for_owner(device_id, user.id)
    result = await service.get_alerts_by_device(device_id, page, size)
    return ApiResponse.ok(PageResponse.from_page(result, AlertRead.model_validate))


@router.post(
    "/{alert_id}/acknowledge",
    response_model=ApiResponse[AlertRead],
    summary="Acknowledge Alert",
    description="Mark an alert as acknowledged by the caller.",
    responses={404: {"description": "Alert not found"}},
)
async def acknowledge_alert(alert_id: uuid.UUID, user: CurrentUserDep, service: AlertServiceDep):
    alert = await service.acknowledge_alert(alert_id, user.id)
    return ApiResponse.ok(AlertRead.model_validate(alert), "Alert acknowledged")
