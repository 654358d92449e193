"""
User profile I/O models.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from agrilink.core.models.domain.enums import ProfileStatus


class FarmerProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    username: Optional[str] = Field(default=None, min_length=3, max_length=64)
    phone: Optional[str] = Field(default=None, max_length=32)
    age: Optional[int] = Field(default=None, ge=0, le=150)
    profile_photo: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    farm_name: Optional[str] = None
    crop_types: Optional[str] = None
    farm_photo: Optional[str] = None
    farm_bio: Optional[str] = None
    certificates: Optional[str] = None


class FarmerProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[int] = None
    profile_photo: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    farm_name: Optional[str] = None
    crop_types: Optional[str] = None
    farm_photo: Optional[str] = None
    farm_bio: Optional[str] = None
    certificates: Optional[str] = None
    status: ProfileStatus
    approved_by: Optional[uuid.UUID] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    is_profile_complete: bool = False
    created_at: datetime
    updated_at: datetime


class ManagerProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    department: Optional[str] = None
    region: Optional[str] = None


class ManagerProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    region: Optional[str] = None
    status: ProfileStatus
    approved_by: Optional[uuid.UUID] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CustomerProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    profile_photo: Optional[str] = None
    preferences: Optional[str] = None


class CustomerProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: Optional[str] = None
    phone: Optional[str] = None
    profile_photo: Optional[str] = None
    preferences: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ApprovalRequest(BaseModel):
    approved: bool
    reason: Optional[str] = Field(default=None, description="Required context when rejecting")


class ApprovalStatus(BaseModel):
    approved: bool


class AddressCreate(BaseModel):
    label: Optional[str] = Field(default=None, max_length=64, examples=["Home"])
    full_name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = None
    address_line1: str = Field(min_length=1, max_length=255)
    address_line2: Optional[str] = None
    city: str = Field(min_length=1, max_length=128)
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = "India"
    is_default: bool = False


class AddressUpdate(BaseModel):
    label: Optional[str] = None
    full_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    address_line1: Optional[str] = Field(default=None, min_length=1)
    address_line2: Optional[str] = None
    city: Optional[str] = Field(default=None, min_length=1)
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    is_default: Optional[bool] = None


class AddressRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    label: Optional[str] = None
    full_name: str
    phone: Optional[str] = None
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str
    is_default: bool
    created_at: datetime


class FollowRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: uuid.UUID
    farmer_id: uuid.UUID
    created_at: datetime


class FollowStatus(BaseModel):
    following: bool


class FollowerCount(BaseModel):
    count: int
