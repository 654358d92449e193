"""
Marketplace entity models.

Listings are produce offers posted by farmers. Buyers review listings, and
every review also feeds the seller's aggregate rating.
"""

import uuid
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import DateTime, Field, Text

from agrilink.core.models.domain.enums import ListingStatus

from ..base import Base, TimestampedBase, utc_now

TWO_PLACES = Decimal("0.01")

# Star rating -> SellerRating counter column
_STAR_FIELDS = {
    5: "five_star_count",
    4: "four_star_count",
    3: "three_star_count",
    2: "two_star_count",
    1: "one_star_count",
}


class Category(TimestampedBase, table=True):
    """Produce category; categories nest through ``parent_id``.

    Table: categories
    """

    __tablename__ = "categories"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(max_length=128, unique=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    parent_id: Optional[uuid.UUID] = Field(default=None, foreign_key="categories.id", index=True)
    image_url: Optional[str] = Field(default=None, max_length=1024)
    active: bool = Field(default=True)
    display_order: int = Field(default=0)

    def __repr__(self) -> str:
        return f"Category(id={self.id}, name={self.name})"


class Listing(TimestampedBase, table=True):
    """A produce offer.

    Table: listings
    """

    __tablename__ = "listings"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    seller_id: uuid.UUID = Field(index=True)
    farm_id: Optional[uuid.UUID] = Field(default=None)
    category_id: Optional[uuid.UUID] = Field(default=None, foreign_key="categories.id", index=True)

    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, sa_type=Text)
    crop_type: Optional[str] = Field(default=None, max_length=128, index=True)

    quantity: Decimal = Field(max_digits=12, decimal_places=2)
    quantity_unit: str = Field(default="KG", max_length=16)
    price_per_unit: Decimal = Field(max_digits=12, decimal_places=2)
    currency: str = Field(default="USD", max_length=3)
    minimum_order: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)

    harvest_date: Optional[date] = Field(default=None)
    available_from: Optional[date] = Field(default=None)
    available_until: Optional[date] = Field(default=None)

    location: Optional[str] = Field(default=None, max_length=255)
    latitude: Optional[float] = Field(default=None)
    longitude: Optional[float] = Field(default=None)

    organic_certified: bool = Field(default=False)
    quality_grade: Optional[str] = Field(default=None, max_length=16)

    status: ListingStatus = Field(default=ListingStatus.DRAFT, index=True)
    view_count: int = Field(default=0)
    average_rating: Decimal = Field(default=Decimal("0"), max_digits=3, decimal_places=2)
    review_count: int = Field(default=0)

    def __repr__(self) -> str:
        return f"Listing(id={self.id}, title={self.title}, status={self.status})"


class ListingImage(Base, table=True):
    """Picture attached to a listing. The first one uploaded is primary.

    Table: listing_images
    """

    __tablename__ = "listing_images"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    listing_id: uuid.UUID = Field(foreign_key="listings.id", index=True)
    image_url: str = Field(max_length=1024)
    is_primary: bool = Field(default=False)
    sort_order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class Review(TimestampedBase, table=True):
    """A buyer's rating of a listing.

    Table: reviews
    """

    __tablename__ = "reviews"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    listing_id: uuid.UUID = Field(foreign_key="listings.id", index=True)
    reviewer_id: uuid.UUID = Field(index=True)
    seller_id: uuid.UUID = Field(index=True)
    order_id: Optional[uuid.UUID] = Field(default=None)
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = Field(default=None, max_length=255)
    comment: Optional[str] = Field(default=None, sa_type=Text)
    is_verified_purchase: bool = Field(default=False)
    helpful_count: int = Field(default=0)
    is_visible: bool = Field(default=True)

    def __repr__(self) -> str:
        return f"Review(id={self.id}, listing_id={self.listing_id}, rating={self.rating})"


class SellerRating(TimestampedBase, table=True):
    """Running aggregate of every visible review a seller has received.

    Table: seller_ratings
    """

    __tablename__ = "seller_ratings"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    seller_id: uuid.UUID = Field(unique=True, index=True)
    total_reviews: int = Field(default=0)
    average_rating: Decimal = Field(default=Decimal("0"), max_digits=3, decimal_places=2)
    five_star_count: int = Field(default=0)
    four_star_count: int = Field(default=0)
    three_star_count: int = Field(default=0)
    two_star_count: int = Field(default=0)
    one_star_count: int = Field(default=0)

    def add_rating(self, rating: int) -> None:
        attr = _STAR_FIELDS[rating]
        setattr(self, attr, getattr(self, attr) + 1)
        self.total_reviews += 1
        self.recalculate_average()

    def remove_rating(self, rating: int) -> None:
        attr = _STAR_FIELDS[rating]
        setattr(self, attr, max(0, getattr(self, attr) - 1))
        self.total_reviews = max(0, self.total_reviews - 1)
        self.recalculate_average()

    def distribution(self) -> dict[int, int]:
        return {stars: getattr(self, attr) for stars, attr in _STAR_FIELDS.items()}

    def recalculate_average(self) -> None:
        if self.total_reviews == 0:
            self.average_rating = Decimal("0")
            return
        weighted = sum(stars * count for stars, count in self.distribution().items())
        self.average_rating = (Decimal(weighted) / Decimal(self.total_reviews)).quantize(
            TWO_PLACES, rounding=ROUND_HALF_UP
        )

    def __repr__(self) -> str:
        return f"SellerRating(seller_id={self.seller_id}, average={self.average_rating}, total={self.total_reviews})"


class WishlistItem(Base, table=True):
    """A listing bookmarked by a user.

    Table: wishlist_items
    """

    __tablename__ = "wishlist_items"
    __table_args__ = (
        UniqueConstraint("user_id", "listing_id", name="uq_wishlist_user_listing"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)
    listing_id: uuid.UUID = Field(foreign_key="listings.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
