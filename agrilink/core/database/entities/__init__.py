"""
Database entity models, grouped by service domain.

Importing this package registers every table on ``Base.metadata``.
"""

from .auth import PasswordResetToken, User
from .farms import CropPlan, Farm, FarmField
from .iot import Alert, AlertRule, Device, Telemetry
from .marketplace import Category, Listing, ListingImage, Review, SellerRating, WishlistItem
from .notifications import Conversation, Message, Notification, NotificationPreference
from .orders import Cart, CartItem, Order, OrderItem, OrderStatusHistory, Payment
from .users import Address, CustomerProfile, FarmerProfile, FollowedFarmer, ManagerProfile

__all__ = [
    "Address",
    "Alert",
    "AlertRule",
    "Cart",
    "CartItem",
    "Category",
    "Conversation",
    "CropPlan",
    "CustomerProfile",
    "Device",
    "Farm",
    "FarmField",
    "FarmerProfile",
    "FollowedFarmer",
    "Listing",
    "ListingImage",
    "ManagerProfile",
    "Message",
    "Notification",
    "NotificationPreference",
    "Order",
    "OrderItem",
    "OrderStatusHistory",
    "Payment",
    "PasswordResetToken",
    "Review",
    "SellerRating",
    "Telemetry",
    "User",
    "WishlistItem",
]
