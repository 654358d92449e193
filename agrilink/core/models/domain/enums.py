"""Domain enums shared by entities, services and API schemas."""

from enum import Enum

# =====================================================================
# Auth / user
# =====================================================================


class UserRole(str, Enum):
    """Roles a user account can hold. A JWT carries them as ``ROLE_<name>``."""

    FARMER = "FARMER"
    CUSTOMER = "CUSTOMER"
    BUYER = "BUYER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class ProfileStatus(str, Enum):
    """Approval lifecycle of farmer and manager profiles."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# =====================================================================
# Farm
# =====================================================================


class AreaUnit(str, Enum):
    HECTARE = "HECTARE"
    ACRE = "ACRE"
    SQUARE_METER = "SQUARE_METER"


class CropPlanStatus(str, Enum):
    """Lifecycle of a crop planted on a field."""

    PLANNED = "PLANNED"
    PLANTED = "PLANTED"
    GROWING = "GROWING"
    HARVESTED = "HARVESTED"
    FAILED = "FAILED"


# =====================================================================
# IoT
# =====================================================================


class DeviceType(str, Enum):
    SOIL_SENSOR = "SOIL_SENSOR"
    WEATHER_STATION = "WEATHER_STATION"
    IRRIGATION_CONTROLLER = "IRRIGATION_CONTROLLER"
    CAMERA = "CAMERA"
    GPS_TRACKER = "GPS_TRACKER"


class DeviceStatus(str, Enum):
    """
    Operational state of a device.

    MAINTENANCE is reported as "alerting" on the sensor dashboard;
    DECOMMISSIONED is the terminal state used instead of deleting rows.
    """

    ACTIVE = "ACTIVE"
    OFFLINE = "OFFLINE"
    MAINTENANCE = "MAINTENANCE"
    DECOMMISSIONED = "DECOMMISSIONED"


class MetricType(str, Enum):
    """Kinds of measurement a sensor reading can carry."""

    TEMPERATURE = "TEMPERATURE"
    HUMIDITY = "HUMIDITY"
    SOIL_MOISTURE = "SOIL_MOISTURE"
    SOIL_PH = "SOIL_PH"
    LIGHT_INTENSITY = "LIGHT_INTENSITY"
    RAINFALL = "RAINFALL"
    WIND_SPEED = "WIND_SPEED"


class AlertType(str, Enum):
    THRESHOLD_EXCEEDED = "THRESHOLD_EXCEEDED"
    DEVICE_OFFLINE = "DEVICE_OFFLINE"
    LOW_BATTERY = "LOW_BATTERY"
    SYSTEM = "SYSTEM"


class AlertSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class AlertCondition(str, Enum):
    """Comparison applied as ``reading <op> threshold``."""

    GREATER_THAN = "GREATER_THAN"
    GREATER_OR_EQUAL = "GREATER_OR_EQUAL"
    LESS_THAN = "LESS_THAN"
    LESS_OR_EQUAL = "LESS_OR_EQUAL"
    EQUALS = "EQUALS"

    @property
    def symbol(self) -> str:
        return _CONDITION_SYMBOLS[self]


_CONDITION_SYMBOLS = {
    AlertCondition.GREATER_THAN: ">",
    AlertCondition.GREATER_OR_EQUAL: ">=",
    AlertCondition.LESS_THAN: "<",
    AlertCondition.LESS_OR_EQUAL: "<=",
    AlertCondition.EQUALS: "==",
}


# =====================================================================
# Marketplace
# =====================================================================


class ListingStatus(str, Enum):
    """Listings start as DRAFT and only ACTIVE ones are searchable."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


# =====================================================================
# Orders and payments
# =====================================================================


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    CARD = "CARD"
    UPI = "UPI"
    NET_BANKING = "NET_BANKING"
    WALLET = "WALLET"
    COD = "COD"
    MOCK = "MOCK"


# =====================================================================
# Notifications
# =====================================================================


class NotificationType(str, Enum):
    ORDER = "ORDER"
    LISTING = "LISTING"
    IOT = "IOT"
    WEATHER = "WEATHER"
    MARKETING = "MARKETING"
    SYSTEM = "SYSTEM"


class NotificationChannel(str, Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"
    PUSH = "PUSH"
    IN_APP = "IN_APP"


class NotificationStatus(str, Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"
    READ = "READ"
