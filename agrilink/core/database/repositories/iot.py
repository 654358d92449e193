"""
IoT repositories.

Data access for devices, telemetry readings, alert rules and alerts. The
telemetry finders mirror the read paths of the sensor dashboard: newest
first for "latest" views, oldest first for charted series.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.models.domain.enums import MetricType

from ..entities.iot import Alert, AlertRule, Device, Telemetry
from .base import Page, SQLModelRepository


class DeviceRepository(SQLModelRepository[Device]):
    """Repository for registered devices."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Device)

    async def get_by_serial_number(self, serial_number: str) -> Optional[Device]:
        stmt = select(Device).where(Device.serial_number == serial_number)
        return await self.fetch_one(stmt)

    async def find_by_farmer(self, farmer_id: uuid.UUID) -> List[Device]:
        """All devices of a farmer, oldest registration first."""
        stmt = select(Device).where(Device.farmer_id == farmer_id).order_by(Device.created_at.asc())
        return await self.fetch_all(stmt)

    async def find_by_farmer_paged(self, farmer_id: uuid.UUID, page: int, size: int) -> Page[Device]:
        stmt = select(Device).where(Device.farmer_id == farmer_id).order_by(Device.created_at.desc())
        return await self.paginate(stmt, page, size)


class TelemetryRepository(SQLModelRepository[Telemetry]):
    """Repository for time-series sensor readings."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Telemetry)

    async def find_by_device(self, device_id: uuid.UUID, page: int, size: int) -> Page[Telemetry]:
        stmt = select(Telemetry).where(Telemetry.device_id == device_id).order_by(Telemetry.recorded_at.desc())
        return await self.paginate(stmt, page, size)

    async def find_by_device_and_time_range(
        self, device_id: uuid.UUID, start: datetime, end: datetime
    ) -> List[Telemetry]:
        """Readings of a device inside ``[start, end]``, newest first."""
        stmt = (
            select(Telemetry)
            .where(
                Telemetry.device_id == device_id,
                Telemetry.recorded_at >= start,
                Telemetry.recorded_at <= end,
            )
            .order_by(Telemetry.recorded_at.desc())
        )
        return await self.fetch_all(stmt)

    async def find_by_device_metric_and_time_range(
        self, device_id: uuid.UUID, metric_type: MetricType, start: datetime, end: datetime
    ) -> List[Telemetry]:
        """Readings of one metric inside ``[start, end]``, oldest first."""
        stmt = (
            select(Telemetry)
            .where(
                Telemetry.device_id == device_id,
                Telemetry.metric_type == metric_type,
                Telemetry.recorded_at >= start,
                Telemetry.recorded_at <= end,
            )
            .order_by(Telemetry.recorded_at.asc())
        )
        return await self.fetch_all(stmt)

    async def find_latest_by_device(self, device_id: uuid.UUID, limit: int) -> List[Telemetry]:
        stmt = (
            select(Telemetry)
            .where(Telemetry.device_id == device_id)
            .order_by(Telemetry.recorded_at.desc())
            .limit(limit)
        )
        return await self.fetch_all(stmt)

    async def find_by_farmer_metric_and_time_range(
        self, farmer_id: uuid.UUID, metric_type: MetricType, start: datetime, end: datetime
    ) -> List[Telemetry]:
        """Readings of one metric across every device of a farmer, oldest first."""
        stmt = (
            select(Telemetry)
            .join(Device, Device.id == Telemetry.device_id)
            .where(
                Device.farmer_id == farmer_id,
                Telemetry.metric_type == metric_type,
                Telemetry.recorded_at >= start,
                Telemetry.recorded_at <= end,
            )
            .order_by(Telemetry.recorded_at.asc())
        )
        return await self.fetch_all(stmt)

    async def metric_statistics(
        self, device_id: uuid.UUID, metric_type: MetricType, start: datetime, end: datetime
    ) -> tuple[Optional[Decimal], Optional[Decimal], Optional[Decimal], int]:
        """Return ``(avg, min, max, count)`` for one metric in a time window."""
        stmt = select(
            func.avg(Telemetry.metric_value),
            func.min(Telemetry.metric_value),
            func.max(Telemetry.metric_value),
            func.count(Telemetry.id),
        ).where(
            Telemetry.device_id == device_id,
            Telemetry.metric_type == metric_type,
            Telemetry.recorded_at >= start,
            Telemetry.recorded_at <= end,
        )
        result = await self.session.execute(stmt)
        avg_value, min_value, max_value, count = result.one()
        return avg_value, min_value, max_value, int(count or 0)


class AlertRuleRepository(SQLModelRepository[AlertRule]):
    """Repository for per-device threshold rules."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AlertRule)

    async def find_enabled_by_device_and_metric(
        self, device_id: uuid.UUID, metric_type: MetricType
    ) -> List[AlertRule]:
        stmt = (
            select(AlertRule)
            .where(
                AlertRule.device_id == device_id,
                AlertRule.metric_type == metric_type,
                AlertRule.enabled.is_(True),
            )
            .order_by(AlertRule.created_at.asc())
        )
        return await self.fetch_all(stmt)

    async def find_by_device(self, device_id: uuid.UUID) -> List[AlertRule]:
        stmt = select(AlertRule).where(AlertRule.device_id == device_id).order_by(AlertRule.created_at.asc())
        return await self.fetch_all(stmt)


class AlertRepository(SQLModelRepository[Alert]):
    """Repository for raised alerts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Alert)

    async def find_by_farmer(self, farmer_id: uuid.UUID, page: int, size: int) -> Page[Alert]:
        stmt = select(Alert).where(Alert.farmer_id == farmer_id).order_by(Alert.created_at.desc())
        return await self.paginate(stmt, page, size)

    async def find_unacknowledged_by_farmer(self, farmer_id: uuid.UUID) -> List[Alert]:
        stmt = (
            select(Alert)
            .where(Alert.farmer_id == farmer_id, Alert.acknowledged.is_(False))
            .order_by(Alert.created_at.desc())
        )
        return await self.fetch_all(stmt)

    async def count_unacknowledged_by_farmer(self, farmer_id: uuid.UUID) -> int:
        stmt = select(func.count(Alert.id)).where(Alert.farmer_id == farmer_id, Alert.acknowledged.is_(False))
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def find_by_device(self, device_id: uuid.UUID, page: int, size: int) -> Page[Alert]:
        stmt = select(Alert).where(Alert.device_id == device_id).order_by(Alert.created_at.desc())
        return await self.paginate(stmt, page, size)
