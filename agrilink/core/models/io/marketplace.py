"""
Marketplace I/O models: listings, reviews, categories and wishlists.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from agrilink.core.models.domain.enums import ListingStatus


class ListingCreate(BaseModel):
    """Schema for posting a listing. New listings start as DRAFT."""

    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    crop_type: Optional[str] = Field(default=None, max_length=128)
    category_id: Optional[uuid.UUID] = None
    farm_id: Optional[uuid.UUID] = None
    quantity: Decimal = Field(gt=0)
    quantity_unit: str = "KG"
    price_per_unit: Decimal = Field(gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    minimum_order: Optional[Decimal] = Field(default=None, gt=0)
    harvest_date: Optional[date] = None
    available_from: Optional[date] = None
    available_until: Optional[date] = None
    location: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    organic_certified: bool = False
    quality_grade: Optional[str] = Field(default=None, max_length=16)
    image_urls: List[str] = Field(default_factory=list, description="The first image becomes the primary one")


class ListingUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    crop_type: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    quantity: Optional[Decimal] = Field(default=None, ge=0)
    quantity_unit: Optional[str] = None
    price_per_unit: Optional[Decimal] = Field(default=None, gt=0)
    minimum_order: Optional[Decimal] = Field(default=None, gt=0)
    harvest_date: Optional[date] = None
    available_from: Optional[date] = None
    available_until: Optional[date] = None
    location: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    organic_certified: Optional[bool] = None
    quality_grade: Optional[str] = None
    image_urls: Optional[List[str]] = Field(default=None, description="Replaces every image when given")


class ListingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    seller_id: uuid.UUID
    farm_id: Optional[uuid.UUID] = None
    category_id: Optional[uuid.UUID] = None
    title: str
    description: Optional[str] = None
    crop_type: Optional[str] = None
    quantity: float
    quantity_unit: str
    price_per_unit: float
    currency: str
    minimum_order: Optional[float] = None
    harvest_date: Optional[date] = None
    available_from: Optional[date] = None
    available_until: Optional[date] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    organic_certified: bool
    quality_grade: Optional[str] = None
    status: ListingStatus
    view_count: int
    average_rating: float
    review_count: int
    image_urls: List[str] = Field(default_factory=list)
    primary_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ListingSearchParams(BaseModel):
    """Query parameters of ``GET /listings/search``."""

    keyword: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    crop_types: List[str] = Field(default_factory=list)
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    location: Optional[str] = None
    organic_only: bool = False
    quality_grade: Optional[str] = None
    seller_id: Optional[uuid.UUID] = None
    min_quantity: Optional[Decimal] = None
    max_quantity: Optional[Decimal] = None
    min_rating: Optional[Decimal] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_km: Optional[float] = Field(default=None, gt=0)
    sort_by: str = Field(default="created_at", pattern="^(created_at|price|rating|views)$")
    sort_direction: str = Field(default="desc", pattern="^(asc|desc)$")


class ReviewCreate(BaseModel):
    listing_id: uuid.UUID
    order_id: Optional[uuid.UUID] = None
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = Field(default=None, max_length=255)
    comment: Optional[str] = None


class ReviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    listing_id: uuid.UUID
    reviewer_id: uuid.UUID
    seller_id: uuid.UUID
    order_id: Optional[uuid.UUID] = None
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    is_verified_purchase: bool
    helpful_count: int
    created_at: datetime


class RatingSummary(BaseModel):
    average_rating: float = 0.0
    total_reviews: int = 0
    distribution: Dict[int, int] = Field(default_factory=dict)


class SellerRatingRead(BaseModel):
    seller_id: uuid.UUID
    average_rating: float = 0.0
    total_reviews: int = 0
    distribution: Dict[int, int] = Field(default_factory=dict)


class CanReview(BaseModel):
    can_review: bool


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    description: Optional[str] = None
    parent_id: Optional[uuid.UUID] = None
    image_url: Optional[str] = None
    display_order: int = 0


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    parent_id: Optional[uuid.UUID] = None
    image_url: Optional[str] = None
    active: bool
    display_order: int
    product_count: int = 0


class WishlistItemRead(BaseModel):
    id: uuid.UUID
    listing_id: uuid.UUID
    added_at: datetime
    listing: Optional[ListingRead] = None


class WishlistStatus(BaseModel):
    in_wishlist: bool


class Count(BaseModel):
    count: int
