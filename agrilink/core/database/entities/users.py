"""
User profile entity models.

Profiles extend the bare auth account with role specific details. Farmer and
manager profiles go through an approval workflow before they are trusted.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import DateTime, Field, Text

from agrilink.core.models.domain.enums import ProfileStatus

from ..base import Base, TimestampedBase, utc_now


class ApprovalFields(TimestampedBase):
    """Columns shared by profiles that need manager/admin approval."""

    status: ProfileStatus = Field(default=ProfileStatus.PENDING, index=True)
    approved_by: Optional[uuid.UUID] = Field(default=None)
    approved_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    rejection_reason: Optional[str] = Field(default=None, sa_type=Text)

    @property
    def is_approved(self) -> bool:
        return self.status == ProfileStatus.APPROVED

    def approve(self, approver_id: uuid.UUID) -> None:
        self.status = ProfileStatus.APPROVED
        self.approved_by = approver_id
        self.approved_at = utc_now()
        self.rejection_reason = None

    def reject(self, reason: Optional[str]) -> None:
        self.status = ProfileStatus.REJECTED
        self.rejection_reason = reason
        self.approved_by = None
        self.approved_at = None


class FarmerProfile(ApprovalFields, table=True):
    """Table: farmer_profiles"""

    __tablename__ = "farmer_profiles"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(unique=True, index=True)
    name: Optional[str] = Field(default=None, max_length=255)
    username: Optional[str] = Field(default=None, max_length=64, unique=True)
    phone: Optional[str] = Field(default=None, max_length=32)
    age: Optional[int] = Field(default=None)
    profile_photo: Optional[str] = Field(default=None, max_length=1024)
    city: Optional[str] = Field(default=None, max_length=128)
    state: Optional[str] = Field(default=None, max_length=128)
    country: Optional[str] = Field(default=None, max_length=128)
    farm_name: Optional[str] = Field(default=None, max_length=255)
    crop_types: Optional[str] = Field(default=None, max_length=512)
    farm_photo: Optional[str] = Field(default=None, max_length=1024)
    farm_bio: Optional[str] = Field(default=None, sa_type=Text)
    certificates: Optional[str] = Field(default=None, sa_type=Text)

    @property
    def is_profile_complete(self) -> bool:
        required = (self.name, self.username, self.phone, self.city, self.farm_name, self.crop_types)
        return all(value for value in required)

    def __repr__(self) -> str:
        return f"FarmerProfile(user_id={self.user_id}, status={self.status})"


class ManagerProfile(ApprovalFields, table=True):
    """Table: manager_profiles"""

    __tablename__ = "manager_profiles"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(unique=True, index=True)
    name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    department: Optional[str] = Field(default=None, max_length=128)
    region: Optional[str] = Field(default=None, max_length=128)

    def __repr__(self) -> str:
        return f"ManagerProfile(user_id={self.user_id}, status={self.status})"


class CustomerProfile(TimestampedBase, table=True):
    """Table: customer_profiles"""

    __tablename__ = "customer_profiles"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(unique=True, index=True)
    name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    profile_photo: Optional[str] = Field(default=None, max_length=1024)
    preferences: Optional[str] = Field(default=None, sa_type=Text)


class Address(TimestampedBase, table=True):
    """A delivery address. At most one per user is the default.

    Table: addresses
    """

    __tablename__ = "addresses"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)
    label: Optional[str] = Field(default=None, max_length=64)
    full_name: str = Field(max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    address_line1: str = Field(max_length=255)
    address_line2: Optional[str] = Field(default=None, max_length=255)
    city: str = Field(max_length=128)
    state: Optional[str] = Field(default=None, max_length=128)
    postal_code: Optional[str] = Field(default=None, max_length=20)
    country: str = Field(default="India", max_length=128)
    is_default: bool = Field(default=False)


class FollowedFarmer(Base, table=True):
    """Table: followed_farmers"""

    __tablename__ = "followed_farmers"
    __table_args__ = (
        UniqueConstraint("customer_id", "farmer_id", name="uq_followed_farmers_pair"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    customer_id: uuid.UUID = Field(index=True)
    farmer_id: uuid.UUID = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
