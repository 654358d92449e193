"""Domain level enums and value types."""

from .enums import (
    AlertCondition,
    AlertSeverity,
    AlertType,
    AreaUnit,
    CropPlanStatus,
    DeviceStatus,
    DeviceType,
    ListingStatus,
    MetricType,
    NotificationChannel,
    NotificationStatus,
    NotificationType,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProfileStatus,
    UserRole,
)

__all__ = [
    "AlertCondition",
    "AlertSeverity",
    "AlertType",
    "AreaUnit",
    "CropPlanStatus",
    "DeviceStatus",
    "DeviceType",
    "ListingStatus",
    "MetricType",
    "NotificationChannel",
    "NotificationStatus",
    "NotificationType",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "ProfileStatus",
    "UserRole",
]
