"""Unit tests for telemetry ingestion and alert rule evaluation.

Ingestion is exercised against an in-memory SQLite database so the reading,
the device's last-seen stamp and the raised alerts are checked together.
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from agrilink.core.database.repositories import AlertRepository
from agrilink.core.exceptions import ResourceNotFoundException
from agrilink.core.models.domain.enums import AlertCondition, AlertSeverity, MetricType
from agrilink.core.models.io.iot import AlertRuleCreate, TelemetryCreate
from agrilink.server.services.alerts import AlertService, evaluate_condition, format_decimal
from agrilink.server.services.telemetry import TelemetryService


class TestEvaluateCondition:
    """Tests for the rule comparison table."""

    @pytest.mark.parametrize(
        "condition,value,threshold,expected",
        [
            (AlertCondition.GREATER_THAN, "35.5", "35", True),
            (AlertCondition.GREATER_THAN, "35", "35", False),
            (AlertCondition.GREATER_OR_EQUAL, "35", "35", True),
            (AlertCondition.LESS_THAN, "4.9", "5", True),
            (AlertCondition.LESS_OR_EQUAL, "5", "5", True),
            (AlertCondition.EQUALS, "7.00", "7", True),
            (AlertCondition.EQUALS, "7.01", "7", False),
        ],
    )
    def test_comparison(self, condition, value, threshold, expected):
        assert evaluate_condition(condition, Decimal(value), Decimal(threshold)) is expected

    def test_format_decimal_strips_trailing_zeros(self):
        assert format_decimal(Decimal("35.0000")) == "35"
        assert format_decimal(Decimal("6.5000")) == "6.5"


class TestTelemetryIngest:
    """Tests for TelemetryService.ingest_telemetry."""

    async def _rule(self, session, device, farmer_id, condition, threshold, severity=AlertSeverity.WARNING, **kwargs):
        return await AlertService(session).create_alert_rule(
            device.id,
            farmer_id,
            AlertRuleCreate(
                metric_type=kwargs.get("metric_type", MetricType.TEMPERATURE),
                condition=condition,
                threshold_value=Decimal(threshold),
                severity=severity,
                enabled=kwargs.get("enabled", True),
            ),
        )

    async def test_ingest_persists_reading_and_stamps_last_seen(self, session, make_device):
        farmer_id = uuid.uuid4()
        device = await make_device(farmer_id)
        assert device.last_seen_at is None

        reading = await TelemetryService(session).ingest_telemetry(
            TelemetryCreate(device_id=device.id, metric_type=MetricType.HUMIDITY, metric_value=Decimal("61.5"), unit="%")
        )

        assert reading.id is not None
        assert reading.recorded_at is not None
        await session.refresh(device)
        assert device.last_seen_at is not None

    async def test_ingest_unknown_device_raises_not_found(self, session):
        with pytest.raises(ResourceNotFoundException):
            await TelemetryService(session).ingest_telemetry(
                TelemetryCreate(device_id=uuid.uuid4(), metric_type=MetricType.TEMPERATURE, metric_value=Decimal("20"))
            )

    async def test_matching_rule_raises_alert_with_message(self, session, make_device):
        farmer_id = uuid.uuid4()
        device = await make_device(farmer_id, name="North Field Sensor")
        await self._rule(session, device, farmer_id, AlertCondition.GREATER_THAN, "35", AlertSeverity.CRITICAL)

        await TelemetryService(session).ingest_telemetry(
            TelemetryCreate(device_id=device.id, metric_type=MetricType.TEMPERATURE, metric_value=Decimal("38.2"))
        )

        alerts = await AlertRepository(session).find_unacknowledged_by_farmer(farmer_id)
        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.farmer_id == farmer_id
        assert alert.message == "TEMPERATURE reading 38.2 > threshold 35 on North Field Sensor"
        assert Decimal(alert.metric_value) == Decimal("38.2")

    async def test_each_matching_rule_raises_its_own_alert(self, session, make_device):
        farmer_id = uuid.uuid4()
        device = await make_device(farmer_id)
        await self._rule(session, device, farmer_id, AlertCondition.GREATER_THAN, "30")
        await self._rule(session, device, farmer_id, AlertCondition.GREATER_THAN, "35", AlertSeverity.CRITICAL)
        await self._rule(session, device, farmer_id, AlertCondition.LESS_THAN, "5")

        await TelemetryService(session).ingest_telemetry(
            TelemetryCreate(device_id=device.id, metric_type=MetricType.TEMPERATURE, metric_value=Decimal("36"))
        )

        assert await AlertRepository(session).count_unacknowledged_by_farmer(farmer_id) == 2

    async def test_disabled_rule_and_other_metric_are_ignored(self, session, make_device):
        farmer_id = uuid.uuid4()
        device = await make_device(farmer_id)
        await self._rule(session, device, farmer_id, AlertCondition.GREATER_THAN, "30", enabled=False)
        await self._rule(
            session, device, farmer_id, AlertCondition.GREATER_THAN, "30", metric_type=MetricType.HUMIDITY
        )

        await TelemetryService(session).ingest_telemetry(
            TelemetryCreate(device_id=device.id, metric_type=MetricType.TEMPERATURE, metric_value=Decimal("40"))
        )

        assert await AlertRepository(session).count_unacknowledged_by_farmer(farmer_id) == 0

    async def test_batch_ingest_keeps_order(self, session, make_device):
        farmer_id = uuid.uuid4()
        device = await make_device(farmer_id)
        values = ["10", "11", "12"]

        readings = await TelemetryService(session).ingest_batch(
            [
                TelemetryCreate(device_id=device.id, metric_type=MetricType.SOIL_MOISTURE, metric_value=Decimal(v))
                for v in values
            ]
        )

        assert [format_decimal(r.metric_value) for r in readings] == values


class TestTelemetryQueries:
    """Tests for the time-series query helpers."""

    async def test_latest_and_statistics(self, session, make_device):
        farmer_id = uuid.uuid4()
        device = await make_device(farmer_id)
        service = TelemetryService(session)
        base = datetime(2026, 5, 1, 8, 0, 0)
        for offset, value in enumerate(["20", "24", "28"]):
            await service.ingest_telemetry(
                TelemetryCreate(
                    device_id=device.id,
                    metric_type=MetricType.TEMPERATURE,
                    metric_value=Decimal(value),
                    recorded_at=base + timedelta(minutes=offset * 10),
                )
            )

        latest = await service.get_latest_telemetry(device.id, limit=2)
        assert [format_decimal(r.metric_value) for r in latest] == ["28", "24"]

        stats = await service.get_metric_statistics(
            device.id, MetricType.TEMPERATURE, base - timedelta(hours=1), base + timedelta(hours=1)
        )
        assert stats.count == 3
        assert stats.minimum == 20.0
        assert stats.maximum == 28.0
        assert stats.average == pytest.approx(24.0)

    async def test_statistics_without_readings(self, session, make_device):
        device = await make_device(uuid.uuid4())
        now = datetime(2026, 5, 1, 8, 0, 0)

        stats = await TelemetryService(session).get_metric_statistics(
            device.id, MetricType.HUMIDITY, now - timedelta(hours=1), now
        )

        assert stats.count == 0
        assert stats.average is None

    async def test_time_range_is_inclusive(self, session, make_device):
        device = await make_device(uuid.uuid4())
        service = TelemetryService(session)
        start = datetime(2026, 5, 1, 8, 0, 0)
        end = start + timedelta(hours=1)
        for recorded_at in (start, end, end + timedelta(seconds=1)):
            await service.ingest_telemetry(
                TelemetryCreate(
                    device_id=device.id,
                    metric_type=MetricType.RAINFALL,
                    metric_value=Decimal("1"),
                    recorded_at=recorded_at,
                )
            )

        readings = await service.get_telemetry_by_device_and_time_range(device.id, start, end)

        assert len(readings) == 2
