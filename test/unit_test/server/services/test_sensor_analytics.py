"""Unit tests for the farmer sensor dashboard."""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from agrilink.core.database.entities import Alert
from agrilink.core.models.domain.enums import AlertCondition, AlertSeverity, AlertType, DeviceStatus, MetricType
from agrilink.core.models.io.iot import AlertRuleCreate, TelemetryCreate
from agrilink.server.services.alerts import AlertService
from agrilink.server.services.sensor_analytics import SensorAnalyticsService, bucket_hourly, overall_status
from agrilink.server.services.telemetry import TelemetryService


def _reading(hour: int, minute: int, value: str):
    return SimpleNamespace(recorded_at=datetime(2026, 5, 1, hour, minute), metric_value=Decimal(value))


class TestBucketHourly:
    def test_averages_per_hour_sorted(self):
        points = bucket_hourly(
            [_reading(14, 5, "20"), _reading(9, 0, "10"), _reading(14, 45, "21"), _reading(9, 59, "11")]
        )

        assert [(p.time, p.value) for p in points] == [("09:00", 10.5), ("14:00", 20.5)]

    def test_rounds_half_up(self):
        points = bucket_hourly([_reading(1, 0, "1.005")])

        assert points[0].value == 1.01

    def test_empty(self):
        assert bucket_hourly([]) == []


class TestOverallStatus:
    @pytest.mark.parametrize(
        "temperature,moisture,expected",
        [
            (None, None, "OPTIMAL"),
            ("22", "45", "OPTIMAL"),
            ("36", None, "CRITICAL"),
            ("4", None, "CRITICAL"),
            ("31", None, "WARNING"),
            ("9", None, "WARNING"),
            ("22", "15", "WARNING"),
            ("36", "15", "CRITICAL"),
            ("35", "20", "WARNING"),
        ],
    )
    def test_bands(self, temperature, moisture, expected):
        temp = Decimal(temperature) if temperature else None
        soil = Decimal(moisture) if moisture else None
        assert overall_status(temp, soil) == expected


class TestSensorAnalyticsService:
    async def test_dashboard_for_farmer(self, session, make_device):
        farmer_id = uuid.uuid4()
        sensor = await make_device(farmer_id, name="Sensor A")
        await make_device(farmer_id, name="Sensor B", status=DeviceStatus.OFFLINE)
        await make_device(farmer_id, name="Sensor C", status=DeviceStatus.MAINTENANCE)
        await make_device(uuid.uuid4(), name="Someone else's")

        await AlertService(session).create_alert_rule(
            sensor.id,
            farmer_id,
            AlertRuleCreate(
                metric_type=MetricType.TEMPERATURE,
                condition=AlertCondition.GREATER_THAN,
                threshold_value=Decimal("35"),
                severity=AlertSeverity.CRITICAL,
            ),
        )

        now = datetime(2026, 5, 1, 12, 30)
        telemetry = TelemetryService(session)
        for minutes_ago, metric, value in (
            (90, MetricType.TEMPERATURE, "30"),
            (80, MetricType.TEMPERATURE, "32"),
            (20, MetricType.TEMPERATURE, "37"),
            (10, MetricType.SOIL_MOISTURE, "40"),
        ):
            await telemetry.ingest_telemetry(
                TelemetryCreate(
                    device_id=sensor.id,
                    metric_type=metric,
                    metric_value=Decimal(value),
                    recorded_at=now - timedelta(minutes=minutes_ago),
                )
            )

        analytics = await SensorAnalyticsService(session).get_sensor_analytics(farmer_id, now=now)

        assert analytics.total_devices == 3
        assert analytics.online_devices == 1
        assert analytics.offline_devices == 1
        assert analytics.alerting_devices == 1

        summary = next(s for s in analytics.sensor_summaries if s.device_name == "Sensor A")
        assert summary.last_reading == 40.0
        assert summary.last_metric_type == MetricType.SOIL_MOISTURE
        assert summary.last_updated == "May 01, 12:20"
        idle = next(s for s in analytics.sensor_summaries if s.device_name == "Sensor B")
        assert idle.last_updated == "N/A"

        assert [(p.time, p.value) for p in analytics.temperature_history] == [("11:00", 31.0), ("12:00", 37.0)]
        assert analytics.humidity_history == []

        assert analytics.current_conditions.temperature == 37.0
        assert analytics.current_conditions.soil_moisture == 40.0
        assert analytics.current_conditions.overall_status == "CRITICAL"

        assert len(analytics.active_alerts) == 1
        assert analytics.active_alerts[0].device_name == "Sensor A"
        assert analytics.total_alerts_today == 1
        assert analytics.total_alerts_this_week == 1

    async def test_farmer_without_devices(self, session):
        analytics = await SensorAnalyticsService(session).get_sensor_analytics(uuid.uuid4())

        assert analytics.total_devices == 0
        assert analytics.sensor_summaries == []
        assert analytics.current_conditions.overall_status == "OPTIMAL"

    async def test_weather_metrics_reach_current_conditions(self, session, make_device):
        farmer_id = uuid.uuid4()
        station = await make_device(farmer_id, name="Weather Station")
        now = datetime(2026, 5, 1, 12, 0)
        telemetry = TelemetryService(session)
        for minutes_ago, metric, value in (
            (30, MetricType.RAINFALL, "12.5"),
            (20, MetricType.WIND_SPEED, "7"),
            (10, MetricType.RAINFALL, "14"),
        ):
            await telemetry.ingest_telemetry(
                TelemetryCreate(
                    device_id=station.id,
                    metric_type=metric,
                    metric_value=Decimal(value),
                    recorded_at=now - timedelta(minutes=minutes_ago),
                )
            )

        conditions = (await SensorAnalyticsService(session).get_sensor_analytics(farmer_id, now=now)).current_conditions

        assert conditions.rainfall == 14.0
        assert conditions.wind_speed == 7.0
        assert conditions.temperature is None
        assert conditions.overall_status == "OPTIMAL"

    async def test_history_points_carry_metric_type(self, session, make_device):
        farmer_id = uuid.uuid4()
        sensor = await make_device(farmer_id)
        now = datetime(2026, 5, 1, 12, 0)
        await TelemetryService(session).ingest_telemetry(
            TelemetryCreate(
                device_id=sensor.id,
                metric_type=MetricType.HUMIDITY,
                metric_value=Decimal("55"),
                recorded_at=now - timedelta(minutes=5),
            )
        )

        analytics = await SensorAnalyticsService(session).get_sensor_analytics(farmer_id, now=now)

        assert [(p.time, p.metric_type) for p in analytics.humidity_history] == [("11:00", MetricType.HUMIDITY)]

    async def test_same_hour_on_consecutive_days_shares_a_bucket(self, session, make_device):
        farmer_id = uuid.uuid4()
        sensor = await make_device(farmer_id)
        now = datetime(2026, 5, 2, 9, 30)
        telemetry = TelemetryService(session)
        for recorded_at, value in ((datetime(2026, 5, 1, 9, 40), "20"), (datetime(2026, 5, 2, 9, 20), "24")):
            await telemetry.ingest_telemetry(
                TelemetryCreate(
                    device_id=sensor.id,
                    metric_type=MetricType.TEMPERATURE,
                    metric_value=Decimal(value),
                    recorded_at=recorded_at,
                )
            )

        analytics = await SensorAnalyticsService(session).get_sensor_analytics(farmer_id, now=now)

        assert [(p.time, p.value) for p in analytics.temperature_history] == [("09:00", 22.0)]


class TestActiveAlerts:
    async def _raise_alert(self, session, device, farmer_id, message, created_at):
        alert = Alert(
            device_id=device.id,
            farmer_id=farmer_id,
            severity=AlertSeverity.WARNING,
            message=message,
            created_at=created_at,
        )
        session.add(alert)
        await session.commit()
        return alert

    async def test_capped_at_ten_newest_first(self, session, make_device):
        farmer_id = uuid.uuid4()
        sensor = await make_device(farmer_id, name="Sensor A")
        start = datetime(2026, 5, 1, 0, 0)
        for i in range(12):
            await self._raise_alert(session, sensor, farmer_id, f"alert {i}", start + timedelta(minutes=i))

        analytics = await SensorAnalyticsService(session).get_sensor_analytics(
            farmer_id, now=start + timedelta(hours=1)
        )

        assert [a.message for a in analytics.active_alerts] == [f"alert {i}" for i in range(11, 1, -1)]
        assert analytics.total_alerts_today == 12
        first = analytics.active_alerts[0]
        assert first.alert_type == AlertType.THRESHOLD_EXCEEDED
        assert first.acknowledged is False
        assert first.triggered_at == "May 01, 00:11"

    async def test_alert_on_foreign_device_uses_unknown_name(self, session, make_device):
        farmer_id = uuid.uuid4()
        await make_device(farmer_id, name="Own Sensor")
        foreign = await make_device(uuid.uuid4(), name="Neighbour Sensor")
        await self._raise_alert(session, foreign, farmer_id, "stray alert", datetime(2026, 5, 1, 8, 0))

        analytics = await SensorAnalyticsService(session).get_sensor_analytics(
            farmer_id, now=datetime(2026, 5, 1, 9, 0)
        )

        assert [(a.message, a.device_name) for a in analytics.active_alerts] == [("stray alert", "Unknown Device")]
