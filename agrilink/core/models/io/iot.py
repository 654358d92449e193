"""
IoT I/O models for API requests and responses.

Request models take ``Decimal`` readings so threshold comparisons stay exact;
response models expose plain floats.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from agrilink.core.models.domain.enums import (
    AlertCondition,
    AlertSeverity,
    AlertType,
    DeviceStatus,
    DeviceType,
    MetricType,
)


class DeviceCreate(BaseModel):
    """Schema for registering a device."""

    device_name: str = Field(min_length=1, max_length=128, description="Display name of the device")
    device_type: DeviceType
    serial_number: Optional[str] = Field(default=None, max_length=128, description="Manufacturer serial number")
    firmware_version: Optional[str] = Field(default=None, max_length=64)
    farm_id: Optional[uuid.UUID] = Field(default=None, description="Farm the device is installed on")


class DeviceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    farmer_id: uuid.UUID
    farm_id: Optional[uuid.UUID] = None
    device_name: str
    device_type: DeviceType
    serial_number: Optional[str] = None
    firmware_version: Optional[str] = None
    status: DeviceStatus
    last_seen_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TelemetryCreate(BaseModel):
    """A single reading pushed by a device."""

    device_id: uuid.UUID
    metric_type: MetricType
    metric_value: Decimal = Field(max_digits=14, decimal_places=4, description="Measured value")
    unit: Optional[str] = Field(default=None, max_length=32, examples=["°C", "%"])
    recorded_at: Optional[datetime] = Field(default=None, description="Measurement time; defaults to now (UTC)")


class TelemetryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    device_id: uuid.UUID
    metric_type: MetricType
    metric_value: float
    unit: Optional[str] = None
    recorded_at: datetime


class MetricStatistics(BaseModel):
    """Aggregate of one metric over a time window. Values are null without data."""

    device_id: uuid.UUID
    metric_type: MetricType
    start: datetime
    end: datetime
    average: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    count: int = 0


class AlertRuleCreate(BaseModel):
    metric_type: MetricType
    condition: AlertCondition
    threshold_value: Decimal = Field(max_digits=14, decimal_places=4)
    severity: AlertSeverity = AlertSeverity.WARNING
    enabled: bool = True


class AlertRuleUpdate(BaseModel):
    metric_type: Optional[MetricType] = None
    condition: Optional[AlertCondition] = None
    threshold_value: Optional[Decimal] = Field(default=None, max_digits=14, decimal_places=4)
    severity: Optional[AlertSeverity] = None
    enabled: Optional[bool] = None


class AlertRuleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    device_id: uuid.UUID
    metric_type: MetricType
    condition: AlertCondition
    threshold_value: float
    severity: AlertSeverity
    enabled: bool
    created_at: datetime
    updated_at: datetime


class AlertRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    device_id: uuid.UUID
    farmer_id: uuid.UUID
    alert_type: AlertType
    severity: AlertSeverity
    message: str
    metric_type: Optional[MetricType] = None
    metric_value: Optional[float] = None
    threshold_value: Optional[float] = None
    acknowledged: bool
    acknowledged_by: Optional[uuid.UUID] = None
    acknowledged_at: Optional[datetime] = None
    created_at: datetime


class AlertCount(BaseModel):
    unacknowledged: int


# =====================================================================
# Sensor dashboard
# =====================================================================


class SensorSummary(BaseModel):
    """Latest known state of one device."""

    device_id: uuid.UUID
    device_name: str
    device_type: DeviceType
    status: DeviceStatus
    last_reading: Optional[float] = None
    last_metric_type: Optional[MetricType] = None
    unit: Optional[str] = None
    last_updated: str = "N/A"
    battery_level: Optional[int] = None


class ChartDataPoint(BaseModel):
    """Hourly average for the dashboard charts; ``time`` is ``HH:00``."""

    time: str
    value: float
    metric_type: Optional[MetricType] = None


class CurrentConditions(BaseModel):
    temperature: Optional[float] = None
    temperature_unit: str = "°C"
    humidity: Optional[float] = None
    soil_moisture: Optional[float] = None
    soil_ph: Optional[float] = None
    light_intensity: Optional[float] = None
    rainfall: Optional[float] = None
    wind_speed: Optional[float] = None
    overall_status: str = "OPTIMAL"


class ActiveAlertSummary(BaseModel):
    id: uuid.UUID
    device_id: uuid.UUID
    device_name: str
    alert_type: AlertType
    severity: AlertSeverity
    message: str
    triggered_at: str
    acknowledged: bool = False


class SensorAnalytics(BaseModel):
    """Everything the farmer's sensor dashboard renders in one call."""

    total_devices: int = 0
    online_devices: int = 0
    offline_devices: int = 0
    alerting_devices: int = 0
    sensor_summaries: List[SensorSummary] = Field(default_factory=list)
    temperature_history: List[ChartDataPoint] = Field(default_factory=list)
    humidity_history: List[ChartDataPoint] = Field(default_factory=list)
    soil_moisture_history: List[ChartDataPoint] = Field(default_factory=list)
    current_conditions: CurrentConditions = Field(default_factory=CurrentConditions)
    active_alerts: List[ActiveAlertSummary] = Field(default_factory=list)
    total_alerts_today: int = 0
    total_alerts_this_week: int = 0
