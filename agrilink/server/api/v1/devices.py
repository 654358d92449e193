"""
Device Endpoints.

Registration and lifecycle of a farmer's IoT devices, plus the alert rules
attached to each device.
"""

import uuid
from typing import List

from fastapi import APIRouter, Query, status

from agrilink.core.models.domain.enums import DeviceStatus
from agrilink.core.models.io import ApiResponse, PageResponse
from agrilink.core.models.io.iot import AlertRuleCreate, AlertRuleRead, DeviceCreate, DeviceRead
from agrilink.server.security import CurrentUserDep, FarmerDep
from agrilink.server.services.deps import AlertServiceDep, DeviceServiceDep

from .params import DEFAULT_PAGE, DEFAULT_SIZE, PageParam, SizeParam

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[DeviceRead],
    status_code=status.HTTP_201_CREATED,
    summary="Register Device",
    description="Register a new IoT device for the calling farmer. The device starts in the ACTIVE status.",
    response_description="The registered device.",
    responses={
        201: {"description": "Device registered"},
        400: {"description": "Serial number already registered"},
        403: {"description": "Caller is not a farmer"},
    },
)
async def register_device(request: DeviceCreate, user: FarmerDep, service: DeviceServiceDep):
    """
    Register a device.

    - **device_name**: Display name shown on dashboards.
    - **device_type**: One of SOIL_SENSOR, WEATHER_STATION, IRRIGATION_CONTROLLER, CAMERA, GPS_TRACKER.
    - **serial_number**: Optional manufacturer serial; must be unique.
    - **farm_id**: Optional farm the device is installed on.
    """
    device = await service.register_device(user.id, request)
    return ApiResponse.ok(DeviceRead.model_validate(device), "Device registered successfully")


@router.get(
    "",
    response_model=ApiResponse[List[DeviceRead]],
    summary="List My Devices",
    description="List every device owned by the caller.",
)
async def list_my_devices(user: CurrentUserDep, service: DeviceServiceDep):
    devices = await service.get_devices_by_farmer(user.id)
    return ApiResponse.ok([DeviceRead.model_validate(d) for d in devices])


@router.get(
    "/paged",
    response_model=ApiResponse[PageResponse[DeviceRead]],
    summary="List My Devices (Paged)",
    description="Page through the caller's devices, newest first.",
)
async def list_my_devices_paged(
    user: CurrentUserDep,
    service: DeviceServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    result = await service.get_devices_by_farmer_paged(user.id, page, size)
    return ApiResponse.ok(PageResponse.from_page(result, DeviceRead.model_validate))


@router.get(
    "/{device_id}",
    response_model=ApiResponse[DeviceRead],
    summary="Get Device",
    description="Retrieve one of the caller's devices.",
    responses={
        403: {"description": "Device belongs to another farmer"},
        404: {"description": "Device not found"},
    },
)
async def get_device(device_id: uuid.UUID, user: CurrentUserDep, service: DeviceServiceDep):
    device = await service.get_device_for_owner(device_id, user.id)
    return ApiResponse.ok(DeviceRead.model_validate(device))


@router.patch(
    "/{device_id}/status",
    response_model=ApiResponse[DeviceRead],
    summary="Update Device Status",
    description="Move a device to ACTIVE, OFFLINE, MAINTENANCE or DECOMMISSIONED.",
    responses={
        403: {"description": "Device belongs to another farmer"},
        404: {"description": "Device not found"},
    },
)
async def update_device_status(
    device_id: uuid.UUID,
    user: CurrentUserDep,
    service: DeviceServiceDep,
    new_status: DeviceStatus = Query(alias="status"),
):
    device = await service.update_device_status(device_id, new_status, user.id)
    return ApiResponse.ok(DeviceRead.model_validate(device), "Device status updated")


@router.delete(
    "/{device_id}",
    response_model=ApiResponse[DeviceRead],
    summary="Decommission Device",
    description="Decommission a device. The record is kept with status DECOMMISSIONED.",
)
async def decommission_device(device_id: uuid.UUID, user: CurrentUserDep, service: DeviceServiceDep):
    device = await service.decommission_device(device_id, user.id)
    return ApiResponse.ok(DeviceRead.model_validate(device), "Device decommissioned")


@router.post(
    "/{device_id}/alert-rules",
    response_model=ApiResponse[AlertRuleRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Alert Rule",
    description="Attach a threshold rule to a device. Every reading of the rule's metric is checked against it.",
    response_description="The created alert rule.",
    responses={
        403: {"description": "Device belongs to another farmer"},
        404: {"description": "Device not found"},
    },
)
async def create_alert_rule(
    device_id: uuid.UUID,
    request: AlertRuleCreate,
    user: CurrentUserDep,
    service: AlertServiceDep,
):
    """
    Create an alert rule.

    An alert is raised whenever a reading satisfies `value <condition> threshold_value`.

    - **metric_type**: Metric the rule watches.
    - **condition**: GREATER_THAN, GREATER_OR_EQUAL, LESS_THAN, LESS_OR_EQUAL or EQUALS.
    - **threshold_value**: Threshold compared against each reading.
    - **severity**: Severity copied onto raised alerts.
    """
    rule = await service.create_alert_rule(device_id, user.id, request)
    return ApiResponse.ok(AlertRuleRead.model_validate(rule), "Alert rule created")


@router.get(
    "/{device_id}/alert-rules",
    response_model=ApiResponse[List[AlertRuleRead]],
    summary="List Alert Rules",
    description="List the alert rules attached to one of the caller's devices.",
)
async def list_alert_rules(
    device_id: uuid.UUID,
    user: CurrentUserDep,
    devices: DeviceServiceDep,
    service: AlertServiceDep,
):
    await devices.get_device_for_owner(device_id, user.id)
    rules = await service.get_alert_rules_by_device(device_id)
    return ApiResponse.ok([AlertRuleRead.model_validate(r) for r in rules])
