"""Unit tests for the timestamp columns of the ORM entities.

Every ``*_at`` column stores naive UTC. The columns are declared as plain
``DateTime`` so naive values bind on every supported SQLModel release.
"""

import uuid
from datetime import datetime

import pytest
from sqlalchemy import DateTime, select

from agrilink.core.database import Base, utc_now
from agrilink.core.database import entities  # noqa: F401
from agrilink.core.database.entities import Device
from agrilink.core.models.domain.enums import DeviceType

TIMESTAMP_COLUMNS = [
    column for table in Base.metadata.tables.values() for column in table.columns if column.name.endswith("_at")
]


class TestTimestampColumnTypes:
    def test_timestamp_columns_are_discovered(self):
        names = {f"{column.table.name}.{column.name}" for column in TIMESTAMP_COLUMNS}

        assert {"devices.created_at", "telemetry.recorded_at", "alerts.acknowledged_at"} <= names

    @pytest.mark.parametrize("column", TIMESTAMP_COLUMNS, ids=lambda c: f"{c.table.name}.{c.name}")
    def test_column_is_naive_datetime(self, column):
        assert type(column.type) is DateTime
        assert column.type.timezone is False


class TestNaiveRoundTrip:
    async def test_naive_timestamps_persist(self, session):
        seen = datetime(2026, 5, 1, 6, 30)
        device = Device(
            farmer_id=uuid.uuid4(),
            device_name="Gate Sensor",
            device_type=DeviceType.SOIL_SENSOR,
            last_seen_at=seen,
        )
        session.add(device)
        await session.commit()

        stored = (await session.execute(select(Device).where(Device.id == device.id))).scalar_one()

        assert stored.last_seen_at == seen
        assert stored.last_seen_at.tzinfo is None
        assert stored.created_at <= utc_now()
