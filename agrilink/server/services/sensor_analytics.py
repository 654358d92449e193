"""
Sensor dashboard analytics.

Builds the farmer's sensor overview: device status counts, the latest reading
of every device, 24 hour hourly-averaged charts, current field conditions and
the open alerts.
"""

import uuid
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database import utc_now
from agrilink.core.database.entities import Device, Telemetry
from agrilink.core.database.repositories import AlertRepository, DeviceRepository, TelemetryRepository
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import DeviceStatus, MetricType
from agrilink.core.models.io.iot import (
    ActiveAlertSummary,
    ChartDataPoint,
    CurrentConditions,
    SensorAnalytics,
    SensorSummary,
)

logger = get_logger(__name__)

DISPLAY_TIME_FORMAT = "%b %d, %H:%M"
HISTORY_WINDOW = timedelta(hours=24)
CONDITION_SAMPLE_SIZE = 5
MAX_ACTIVE_ALERTS = 10
UNKNOWN_DEVICE = "Unknown Device"

TWO_PLACES = Decimal("0.01")

# Temperature bands in °C
CRITICAL_HIGH_TEMP = Decimal("35")
CRITICAL_LOW_TEMP = Decimal("5")
WARNING_HIGH_TEMP = Decimal("30")
WARNING_LOW_TEMP = Decimal("10")
LOW_SOIL_MOISTURE = Decimal("20")


def bucket_hourly(readings: List[Telemetry], metric_type: Optional[MetricType] = None) -> List[ChartDataPoint]:
    """Average readings per ``HH:00`` bucket, rounded half up to 2 places, sorted by key."""
    buckets: Dict[str, List[Decimal]] = defaultdict(list)
    for reading in readings:
        buckets[reading.recorded_at.strftime("%H:00")].append(Decimal(reading.metric_value))

    points = []
    for hour in sorted(buckets):
        values = buckets[hour]
        average = (sum(values) / Decimal(len(values))).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        points.append(ChartDataPoint(time=hour, value=float(average), metric_type=metric_type))
    return points


def overall_status(temperature: Optional[Decimal], soil_moisture: Optional[Decimal]) -> str:
    status = "OPTIMAL"
    if temperature is not None:
        if temperature > CRITICAL_HIGH_TEMP or temperature < CRITICAL_LOW_TEMP:
            status = "CRITICAL"
        elif temperature > WARNING_HIGH_TEMP or temperature < WARNING_LOW_TEMP:
            status = "WARNING"
    if status == "OPTIMAL" and soil_moisture is not None and soil_moisture < LOW_SOIL_MOISTURE:
        status = "WARNING"
    return status


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class SensorAnalyticsService:
    def __init__(self, session: AsyncSession) -> None:
        self.devices = DeviceRepository(session)
        self.telemetry = TelemetryRepository(session)
        self.alerts = AlertRepository(session)

    async def get_sensor_analytics(self, farmer_id: uuid.UUID, now: Optional[datetime] = None) -> SensorAnalytics:
        now = now or utc_now()
        devices = await self.devices.find_by_farmer(farmer_id)

        analytics = SensorAnalytics(
            total_devices=len(devices),
            online_devices=sum(1 for d in devices if d.status == DeviceStatus.ACTIVE),
            offline_devices=sum(1 for d in devices if d.status == DeviceStatus.OFFLINE),
            alerting_devices=sum(1 for d in devices if d.status == DeviceStatus.MAINTENANCE),
        )
        analytics.sensor_summaries = [await self._summarise(device) for device in devices]

        since = now - HISTORY_WINDOW
        analytics.temperature_history = await self._history(farmer_id, MetricType.TEMPERATURE, since, now)
        analytics.humidity_history = await self._history(farmer_id, MetricType.HUMIDITY, since, now)
        analytics.soil_moisture_history = await self._history(farmer_id, MetricType.SOIL_MOISTURE, since, now)

        analytics.current_conditions = await self._current_conditions(devices)

        names = {device.id: device.device_name for device in devices}
        open_alerts = await self.alerts.find_unacknowledged_by_farmer(farmer_id)
        analytics.active_alerts = [
            ActiveAlertSummary(
                id=alert.id,
                device_id=alert.device_id,
                device_name=names.get(alert.device_id, UNKNOWN_DEVICE),
                alert_type=alert.alert_type,
                severity=alert.severity,
                message=alert.message,
                triggered_at=alert.created_at.strftime(DISPLAY_TIME_FORMAT),
                acknowledged=alert.acknowledged,
            )
            for alert in open_alerts[:MAX_ACTIVE_ALERTS]
        ]

        unacknowledged = await self.alerts.count_unacknowledged_by_farmer(farmer_id)
        analytics.total_alerts_today = unacknowledged
        analytics.total_alerts_this_week = unacknowledged

        logger.debug(
            f"Built sensor analytics for farmer {farmer_id}: {len(devices)} devices, {unacknowledged} open alerts",
            extra={"farmer_id": str(farmer_id)},
        )
        return analytics

    async def _summarise(self, device: Device) -> SensorSummary:
        summary = SensorSummary(
            device_id=device.id,
            device_name=device.device_name,
            device_type=device.device_type,
            status=device.status,
        )
        latest = await self.telemetry.find_latest_by_device(device.id, 1)
        if latest:
            reading = latest[0]
            summary.last_reading = float(reading.metric_value)
            summary.last_metric_type = reading.metric_type
            summary.unit = reading.unit
            summary.last_updated = reading.recorded_at.strftime(DISPLAY_TIME_FORMAT)
        return summary

    async def _history(
        self, farmer_id: uuid.UUID, metric_type: MetricType, since: datetime, now: datetime
    ) -> List[ChartDataPoint]:
        readings = await self.telemetry.find_by_farmer_metric_and_time_range(farmer_id, metric_type, since, now)
        return bucket_hourly(readings, metric_type)

    async def _current_conditions(self, devices: List[Device]) -> CurrentConditions:
        """First value per metric across each device's most recent readings."""
        values: Dict[MetricType, Decimal] = {}
        for device in devices:
            for reading in await self.telemetry.find_latest_by_device(device.id, CONDITION_SAMPLE_SIZE):
                if reading.metric_type not in values:
                    values[reading.metric_type] = Decimal(reading.metric_value)

        temperature = values.get(MetricType.TEMPERATURE)
        soil_moisture = values.get(MetricType.SOIL_MOISTURE)
        return CurrentConditions(
            temperature=_as_float(temperature),
            humidity=_as_float(values.get(MetricType.HUMIDITY)),
            soil_moisture=_as_float(soil_moisture),
            soil_ph=_as_float(values.get(MetricType.SOIL_PH)),
            light_intensity=_as_float(values.get(MetricType.LIGHT_INTENSITY)),
            rainfall=_as_float(values.get(MetricType.RAINFALL)),
            wind_speed=_as_float(values.get(MetricType.WIND_SPEED)),
            overall_status=overall_status(temperature, soil_moisture),
        )
