"""
Telemetry ingestion and time-series queries.

``ingest_telemetry`` is the hot path of the IoT pipeline:

1. resolve the device
2. persist the reading
3. stamp the device's ``last_seen_at``
4. evaluate the device's alert rules for the reading's metric

All four steps share one transaction, so a reading and the alerts it raised
become visible together.
"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core import monitoring
from agrilink.core.database import as_naive_utc, utc_now
from agrilink.core.database.entities import Telemetry
from agrilink.core.database.repositories import Page, TelemetryRepository
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import MetricType
from agrilink.core.models.io.iot import MetricStatistics, TelemetryCreate

from .alerts import AlertService
from .devices import DeviceService

logger = get_logger(__name__)

DEFAULT_LATEST_LIMIT = 10


class TelemetryService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.telemetry = TelemetryRepository(session)
        self.device_service = DeviceService(session)
        self.alert_service = AlertService(session)

    async def ingest_telemetry(self, request: TelemetryCreate) -> Telemetry:
        reading = await self._ingest(request)
        await self.session.commit()
        return reading

    async def ingest_batch(self, requests: List[TelemetryCreate]) -> List[Telemetry]:
        """Ingest readings in the given order within a single transaction."""
        readings = [await self._ingest(request) for request in requests]
        await self.session.commit()
        logger.info(f"Ingested batch of {len(readings)} readings", extra={"batch_size": len(readings)})
        return readings

    async def _ingest(self, request: TelemetryCreate) -> Telemetry:
        device = await self.device_service.get_device(request.device_id)

        recorded_at = as_naive_utc(request.recorded_at) if request.recorded_at else utc_now()
        reading = Telemetry(
            device_id=device.id,
            metric_type=request.metric_type,
            metric_value=request.metric_value,
            unit=request.unit,
            recorded_at=recorded_at,
        )
        reading = await self.telemetry.create(reading)
        await self.device_service.update_last_seen(device.id, commit=False)

        alerts = await self.alert_service.check_alert_rules(device, request.metric_type, request.metric_value)

        logger.debug(
            f"Ingested {request.metric_type.value}={request.metric_value} from device {device.id}",
            extra={
                "device_id": str(device.id),
                "metric_type": request.metric_type.value,
                "alerts_raised": len(alerts),
            },
        )
        monitoring.log_telemetry_ingest(
            str(device.id), request.metric_type.value, float(request.metric_value), len(alerts)
        )
        return reading

    async def get_telemetry_by_device(self, device_id: uuid.UUID, page: int, size: int) -> Page[Telemetry]:
        return await self.telemetry.find_by_device(device_id, page, size)

    async def get_telemetry_by_device_and_time_range(
        self, device_id: uuid.UUID, start: datetime, end: datetime
    ) -> List[Telemetry]:
        return await self.telemetry.find_by_device_and_time_range(device_id, as_naive_utc(start), as_naive_utc(end))

    async def get_telemetry_by_device_and_metric_type(
        self, device_id: uuid.UUID, metric_type: MetricType, start: datetime, end: datetime
    ) -> List[Telemetry]:
        return await self.telemetry.find_by_device_metric_and_time_range(
            device_id, metric_type, as_naive_utc(start), as_naive_utc(end)
        )

    async def get_latest_telemetry(self, device_id: uuid.UUID, limit: int = DEFAULT_LATEST_LIMIT) -> List[Telemetry]:
        return await self.telemetry.find_latest_by_device(device_id, limit)

    async def get_metric_statistics(
        self, device_id: uuid.UUID, metric_type: MetricType, start: datetime, end: datetime
    ) -> MetricStatistics:
        avg_value, min_value, max_value, count = await self.telemetry.metric_statistics(
            device_id, metric_type, as_naive_utc(start), as_naive_utc(end)
        )
        return MetricStatistics(
            device_id=device_id,
            metric_type=metric_type,
            start=start,
            end=end,
            average=float(avg_value) if avg_value is not None else None,
            minimum=float(min_value) if min_value is not None else None,
            maximum=float(max_value) if max_value is not None else None,
            count=count,
        )
