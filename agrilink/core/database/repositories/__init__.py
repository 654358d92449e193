"""
Repositories for the centralized database layer.

Each repository wraps one entity and takes the request-scoped AsyncSession.
Repositories flush but never commit; the calling service owns the
transaction.
"""

from .auth import PasswordResetTokenRepository, UserRepository
from .base import AsyncBaseRepository, Page, QueryBuilder, SQLModelRepository
from .farms import CropPlanRepository, FarmRepository, FieldRepository
from .iot import AlertRepository, AlertRuleRepository, DeviceRepository, TelemetryRepository
from .marketplace import (
    CategoryRepository,
    ListingImageRepository,
    ListingRepository,
    ListingSearchCriteria,
    ReviewRepository,
    SellerRatingRepository,
    WishlistRepository,
)
from .notifications import (
    ConversationRepository,
    MessageRepository,
    NotificationPreferenceRepository,
    NotificationRepository,
)
from .orders import (
    CartItemRepository,
    CartRepository,
    OrderItemRepository,
    OrderRepository,
    OrderStatusHistoryRepository,
    PaymentRepository,
)
from .users import (
    AddressRepository,
    CustomerProfileRepository,
    FarmerProfileRepository,
    FollowedFarmerRepository,
    ManagerProfileRepository,
)

__all__ = [
    "AddressRepository",
    "AlertRepository",
    "AlertRuleRepository",
    "AsyncBaseRepository",
    "CartItemRepository",
    "CartRepository",
    "CategoryRepository",
    "ConversationRepository",
    "CropPlanRepository",
    "CustomerProfileRepository",
    "DeviceRepository",
    "FarmRepository",
    "FarmerProfileRepository",
    "FieldRepository",
    "FollowedFarmerRepository",
    "ListingImageRepository",
    "ListingRepository",
    "ListingSearchCriteria",
    "ManagerProfileRepository",
    "MessageRepository",
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "OrderItemRepository",
    "OrderRepository",
    "OrderStatusHistoryRepository",
    "Page",
    "PasswordResetTokenRepository",
    "PaymentRepository",
    "QueryBuilder",
    "ReviewRepository",
    "SQLModelRepository",
    "SellerRatingRepository",
    "TelemetryRepository",
    "UserRepository",
    "WishlistRepository",
]
