"""
Telemetry Endpoints.

Ingestion of sensor readings and the time-series queries behind the device
charts. Ingestion evaluates the device's alert rules before answering, so
alerts raised by a reading are visible as soon as the POST returns.
"""

import uuid
from datetime import datetime
from typing import List

from fastapi import APIRouter, Body, Query, status

from agrilink.core.models.domain.enums import MetricType
from agrilink.core.models.io import ApiResponse, PageResponse
from agrilink.core.models.io.iot import MetricStatistics, TelemetryCreate, TelemetryRead
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import DeviceServiceDep, TelemetryServiceDep
from agrilink.server.services.telemetry import DEFAULT_LATEST_LIMIT

from .params import DEFAULT_PAGE, DEFAULT_SIZE, PageParam, SizeParam

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[TelemetryRead],
    status_code=status.HTTP_201_CREATED,
    summary="Ingest Reading",
    description=(
        "Store one sensor reading, stamp the device as seen and evaluate its enabled alert rules "
        "for the reading's metric."
    ),
    response_description="The stored reading.",
    responses={
        201: {"description": "Reading stored"},
        404: {"description": "Device not found"},
    },
)
async def ingest_telemetry(request: TelemetryCreate, user: CurrentUserDep, service: TelemetryServiceDep):
    """
    Ingest a telemetry reading.

    - **device_id**: Device that produced the reading.
    - **metric_type**: TEMPERATURE, HUMIDITY, SOIL_MOISTURE, SOIL_PH, LIGHT_INTENSITY, RAINFALL or WIND_SPEED.
    - **metric_value**: Measured value.
    - **unit**: Optional unit label.
    - **recorded_at**: Optional measurement time; defaults to the current UTC time.
    """
    reading = await service.ingest_telemetry(request)
    return ApiResponse.ok(TelemetryRead.model_validate(reading), "Telemetry ingested")


@router.post(
    "/batch",
    response_model=ApiResponse[List[TelemetryRead]],
    status_code=status.HTTP_201_CREATED,
    summary="Ingest Batch",
    description="Ingest several readings in order. Either all readings are stored or none are.",
)
async def ingest_batch(
    user: CurrentUserDep,
    service: TelemetryServiceDep,
    requests: List[TelemetryCreate] = Body(min_length=1),
):
    readings = await service.ingest_batch(requests)
    return ApiResponse.ok([TelemetryRead.model_validate(r) for r in readings], f"Ingested {len(readings)} readings")


@router.get(
    "/device/{device_id}",
    response_model=ApiResponse[PageResponse[TelemetryRead]],
    summary="Device Readings (Paged)",
    description="Page through a device's readings, newest first.",
)
async def get_device_telemetry(
    device_id: uuid.UUID,
    user: CurrentUserDep,
    devices: DeviceServiceDep,
    service: TelemetryServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    await devices.get_device_for_owner(device_id, user.id)
    result = await service.get_telemetry_by_device(device_id, page, size)
    return ApiResponse.ok(PageResponse.from_page(result, TelemetryRead.model_validate))


@router.get(
    "/device/{device_id}/range",
    response_model=ApiResponse[List[TelemetryRead]],
    summary="Device Readings in Range",
    description="All readings of a device recorded between `start` and `end` inclusive, newest first.",
)
async def get_device_telemetry_range(
    device_id: uuid.UUID,
    user: CurrentUserDep,
    devices: DeviceServiceDep,
    service: TelemetryServiceDep,
    start: datetime = Query(),
    end: datetime = Query(),
):
    await devices.get_device_for_owner(device_id, user.id)
    readings = await service.get_telemetry_by_device_and_time_range(device_id, start, end)
    return ApiResponse.ok([TelemetryRead.model_validate(r) for r in readings])


@router.get(
    "/device/{device_id}/metric/{metric_type}",
    response_model=ApiResponse[List[TelemetryRead]],
    summary="Metric Series",
    description="Readings of one metric between `start` and `end`, oldest first, ready for charting.",
)
async def get_device_metric_series(
    device_id: uuid.UUID,
    metric_type: MetricType,
    user: CurrentUserDep,
    devices: DeviceServiceDep,
    service: TelemetryServiceDep,
    start: datetime = Query(),
    end: datetime = Query(),
):
    await devices.get_device_for_owner(device_id, user.id)
    readings = await service.get_telemetry_by_device_and_metric_type(device_id, metric_type, start, end)
    return ApiResponse.ok([TelemetryRead.model_validate(r) for r in readings])


@router.get(
    "/device/{device_id}/latest",
    response_model=ApiResponse[List[TelemetryRead]],
    summary="Latest Readings",
)
async def get_latest_telemetry(
    device_id: uuid.UUID,
    user: CurrentUserDep,
    devices: DeviceServiceDep,
    service: TelemetryServiceDep,
    limit: int = Query(default=DEFAULT_LATEST_LIMIT, ge=1, le=100),
):
    await devices.get_device_for_owner(device_id, user.id)
    readings = await service.get_latest_telemetry(device_id, limit)
    return ApiResponse.ok([TelemetryRead.model_validate(r) for r in readings])


@router.get(
    "/device/{device_id}/stats/{metric_type}",
    response_model=ApiResponse[MetricStatistics],
    summary="Metric Statistics",
    description="Average, minimum, maximum and count of one metric over a window. Empty windows yield nulls.",
)
async def get_metric_statistics(
    device_id: uuid.UUID,
    metric_type: MetricType,
    user: CurrentUserDep,
    devices: DeviceServiceDep,
    service: TelemetryServiceDep,
    start: datetime = Query(),
    end: datetime = Query(),
):
    await devices.get_device_for_owner(device_id, user.id)
    stats = await service.get_metric_statistics(device_id, metric_type, start, end)
    return ApiResponse.ok(stats)
