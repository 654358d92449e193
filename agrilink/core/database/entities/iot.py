"""
IoT entity models.

This module contains the database entities of the sensor pipeline: the
registered devices, the time series of readings they report, the threshold
rules attached to them, and the alerts those rules raise.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Index
from sqlmodel import DateTime, Field, Text

from agrilink.core.models.domain.enums import (
    AlertCondition,
    AlertSeverity,
    AlertType,
    DeviceStatus,
    DeviceType,
    MetricType,
)

from ..base import Base, TimestampedBase, utc_now


class Device(TimestampedBase, table=True):
    """A sensor or controller owned by a farmer.

    Table: devices
    """

    __tablename__ = "devices"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    farmer_id: uuid.UUID = Field(index=True, description="Owning farmer (user id)")
    farm_id: Optional[uuid.UUID] = Field(default=None, index=True, description="Farm the device is installed on")

    device_name: str = Field(max_length=128)
    device_type: DeviceType
    serial_number: Optional[str] = Field(default=None, max_length=128, unique=True)
    firmware_version: Optional[str] = Field(default=None, max_length=64)
    status: DeviceStatus = Field(default=DeviceStatus.ACTIVE, index=True)
    last_seen_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Device(id={self.id}, name={self.device_name}, status={self.status})"


class Telemetry(Base, table=True):
    """A single timestamped reading reported by a device.

    Table: telemetry
    """

    __tablename__ = "telemetry"
    __table_args__ = (
        Index("ix_telemetry_device_recorded_at", "device_id", "recorded_at"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    device_id: uuid.UUID = Field(foreign_key="devices.id", index=True)
    metric_type: MetricType = Field(index=True)
    metric_value: Decimal = Field(max_digits=14, decimal_places=4)
    unit: Optional[str] = Field(default=None, max_length=32)
    recorded_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Telemetry(device_id={self.device_id}, {self.metric_type}={self.metric_value})"


class AlertRule(TimestampedBase, table=True):
    """Threshold condition evaluated against every reading of one metric on one device.

    Table: alert_rules
    """

    __tablename__ = "alert_rules"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    device_id: uuid.UUID = Field(foreign_key="devices.id", index=True)
    metric_type: MetricType
    condition: AlertCondition
    threshold_value: Decimal = Field(max_digits=14, decimal_places=4)
    severity: AlertSeverity = Field(default=AlertSeverity.WARNING)
    enabled: bool = Field(default=True, index=True)

    def __repr__(self) -> str:
        return (
            f"AlertRule(id={self.id}, {self.metric_type} {self.condition} {self.threshold_value}, "
            f"enabled={self.enabled})"
        )


class Alert(Base, table=True):
    """An alert raised for a farmer, usually by a matching AlertRule.

    Table: alerts
    """

    __tablename__ = "alerts"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    device_id: uuid.UUID = Field(foreign_key="devices.id", index=True)
    farmer_id: uuid.UUID = Field(index=True)

    alert_type: AlertType = Field(default=AlertType.THRESHOLD_EXCEEDED)
    severity: AlertSeverity
    message: str = Field(sa_type=Text)

    metric_type: Optional[MetricType] = Field(default=None)
    metric_value: Optional[Decimal] = Field(default=None, max_digits=14, decimal_places=4)
    threshold_value: Optional[Decimal] = Field(default=None, max_digits=14, decimal_places=4)

    acknowledged: bool = Field(default=False, index=True)
    acknowledged_by: Optional[uuid.UUID] = Field(default=None)
    acknowledged_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Alert(id={self.id}, severity={self.severity}, acknowledged={self.acknowledged})"
