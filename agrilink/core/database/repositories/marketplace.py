"""
Marketplace repositories: categories, listings, reviews, seller ratings and wishlists.

``ListingRepository.search`` builds the single dynamic query behind the
storefront search box and filter panel.
"""

import math
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.models.domain.enums import ListingStatus

from ..entities.marketplace import Category, Listing, ListingImage, Review, SellerRating, WishlistItem
from .base import Page, SQLModelRepository

KM_PER_DEGREE = 111.0


@dataclass
class ListingSearchCriteria:
    """Optional filters for :meth:`ListingRepository.search`; unset filters are ignored."""

    keyword: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    crop_types: List[str] = field(default_factory=list)
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
    radius_km: Optional[float] = None
    sort_by: str = "created_at"
    sort_direction: str = "desc"


_SORT_COLUMNS = {
    "created_at": Listing.created_at,
    "price": Listing.price_per_unit,
    "rating": Listing.average_rating,
    "views": Listing.view_count,
}


class CategoryRepository(SQLModelRepository[Category]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Category)

    async def get_by_name(self, name: str) -> Optional[Category]:
        return await self.fetch_one(select(Category).where(Category.name == name))

    async def find_active(self) -> List[Category]:
        stmt = select(Category).where(Category.active.is_(True)).order_by(Category.display_order, Category.name)
        return await self.fetch_all(stmt)

    async def find_roots(self) -> List[Category]:
        stmt = (
            select(Category)
            .where(Category.active.is_(True), Category.parent_id.is_(None))
            .order_by(Category.display_order, Category.name)
        )
        return await self.fetch_all(stmt)

    async def find_children(self, parent_id: uuid.UUID) -> List[Category]:
        stmt = (
            select(Category)
            .where(Category.active.is_(True), Category.parent_id == parent_id)
            .order_by(Category.display_order, Category.name)
        )
        return await self.fetch_all(stmt)

    async def active_listing_counts(self) -> Dict[uuid.UUID, int]:
        """Number of ACTIVE listings per category id."""
        stmt = (
            select(Listing.category_id, func.count(Listing.id))
            .where(Listing.status == ListingStatus.ACTIVE, Listing.category_id.is_not(None))
            .group_by(Listing.category_id)
        )
        result = await self.session.execute(stmt)
        return {category_id: int(count) for category_id, count in result.all()}


class ListingRepository(SQLModelRepository[Listing]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Listing)

    async def find_by_status(self, status: ListingStatus, page: int, size: int) -> Page[Listing]:
        stmt = select(Listing).where(Listing.status == status).order_by(Listing.created_at.desc())
        return await self.paginate(stmt, page, size)

    async def find_by_seller(self, seller_id: uuid.UUID, page: int, size: int) -> Page[Listing]:
        stmt = select(Listing).where(Listing.seller_id == seller_id).order_by(Listing.created_at.desc())
        return await self.paginate(stmt, page, size)

    async def find_active_by_category(self, category_id: uuid.UUID, page: int, size: int) -> Page[Listing]:
        stmt = (
            select(Listing)
            .where(Listing.category_id == category_id, Listing.status == ListingStatus.ACTIVE)
            .order_by(Listing.created_at.desc())
        )
        return await self.paginate(stmt, page, size)

    async def find_top_rated(self, limit: int) -> List[Listing]:
        stmt = (
            select(Listing)
            .where(Listing.status == ListingStatus.ACTIVE)
            .order_by(Listing.average_rating.desc(), Listing.review_count.desc())
            .limit(limit)
        )
        return await self.fetch_all(stmt)

    async def find_recent(self, limit: int) -> List[Listing]:
        stmt = (
            select(Listing)
            .where(Listing.status == ListingStatus.ACTIVE)
            .order_by(Listing.created_at.desc())
            .limit(limit)
        )
        return await self.fetch_all(stmt)

    async def search(self, criteria: ListingSearchCriteria, page: int, size: int) -> Page[Listing]:
        """Search ACTIVE listings.

        The geo filter is a bounding box around ``(latitude, longitude)``: one
        degree of latitude is taken as 111 km and the longitude span is
        widened by ``1 / cos(latitude)``.
        """
        conditions = [Listing.status == ListingStatus.ACTIVE]

        if criteria.keyword:
            pattern = f"%{criteria.keyword.lower()}%"
            conditions.append(
                or_(
                    func.lower(Listing.title).like(pattern),
                    func.lower(Listing.description).like(pattern),
                    func.lower(Listing.crop_type).like(pattern),
                )
            )
        if criteria.category_id is not None:
            conditions.append(Listing.category_id == criteria.category_id)
        if criteria.crop_types:
            conditions.append(Listing.crop_type.in_(criteria.crop_types))
        if criteria.min_price is not None:
            conditions.append(Listing.price_per_unit >= criteria.min_price)
        if criteria.max_price is not None:
            conditions.append(Listing.price_per_unit <= criteria.max_price)
        if criteria.location:
            conditions.append(func.lower(Listing.location).like(f"%{criteria.location.lower()}%"))
        if criteria.organic_only:
            conditions.append(Listing.organic_certified.is_(True))
        if criteria.quality_grade:
            conditions.append(Listing.quality_grade == criteria.quality_grade)
        if criteria.seller_id is not None:
            conditions.append(Listing.seller_id == criteria.seller_id)
        if criteria.min_quantity is not None:
            conditions.append(Listing.quantity >= criteria.min_quantity)
        if criteria.max_quantity is not None:
            conditions.append(Listing.quantity <= criteria.max_quantity)
        if criteria.min_rating is not None:
            conditions.append(Listing.average_rating >= criteria.min_rating)
        if criteria.latitude is not None and criteria.longitude is not None and criteria.radius_km:
            lat_delta = criteria.radius_km / KM_PER_DEGREE
            cos_lat = math.cos(math.radians(criteria.latitude)) or 1e-6
            lon_delta = criteria.radius_km / (KM_PER_DEGREE * abs(cos_lat))
            conditions.append(
                and_(
                    Listing.latitude.is_not(None),
                    Listing.longitude.is_not(None),
                    Listing.latitude.between(criteria.latitude - lat_delta, criteria.latitude + lat_delta),
                    Listing.longitude.between(criteria.longitude - lon_delta, criteria.longitude + lon_delta),
                )
            )

        column = _SORT_COLUMNS.get(criteria.sort_by, Listing.created_at)
        order = column.asc() if criteria.sort_direction.lower() == "asc" else column.desc()
        stmt = select(Listing).where(*conditions).order_by(order)
        return await self.paginate(stmt, page, size)


class ListingImageRepository(SQLModelRepository[ListingImage]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ListingImage)

    async def find_by_listing(self, listing_id: uuid.UUID) -> List[ListingImage]:
        stmt = select(ListingImage).where(ListingImage.listing_id == listing_id).order_by(ListingImage.sort_order)
        return await self.fetch_all(stmt)

    async def find_by_listings(self, listing_ids: List[uuid.UUID]) -> Dict[uuid.UUID, List[ListingImage]]:
        if not listing_ids:
            return {}
        stmt = (
            select(ListingImage)
            .where(ListingImage.listing_id.in_(listing_ids))
            .order_by(ListingImage.listing_id, ListingImage.sort_order)
        )
        images: Dict[uuid.UUID, List[ListingImage]] = {}
        for image in await self.fetch_all(stmt):
            images.setdefault(image.listing_id, []).append(image)
        return images

    async def delete_by_listing(self, listing_id: uuid.UUID) -> None:
        for image in await self.find_by_listing(listing_id):
            await self.session.delete(image)
        await self.session.flush()


class ReviewRepository(SQLModelRepository[Review]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Review)

    async def exists_for_listing_and_reviewer(self, listing_id: uuid.UUID, reviewer_id: uuid.UUID) -> bool:
        stmt = select(Review.id).where(Review.listing_id == listing_id, Review.reviewer_id == reviewer_id)
        return (await self.session.execute(stmt)).first() is not None

    async def exists_for_order(self, listing_id: uuid.UUID, reviewer_id: uuid.UUID, order_id: uuid.UUID) -> bool:
        stmt = select(Review.id).where(
            Review.listing_id == listing_id,
            Review.reviewer_id == reviewer_id,
            Review.order_id == order_id,
        )
        return (await self.session.execute(stmt)).first() is not None

    async def find_visible_by_listing(self, listing_id: uuid.UUID, page: int, size: int) -> Page[Review]:
        stmt = (
            select(Review)
            .where(Review.listing_id == listing_id, Review.is_visible.is_(True))
            .order_by(Review.created_at.desc())
        )
        return await self.paginate(stmt, page, size)

    async def find_visible_by_seller(self, seller_id: uuid.UUID, page: int, size: int) -> Page[Review]:
        stmt = (
            select(Review)
            .where(Review.seller_id == seller_id, Review.is_visible.is_(True))
            .order_by(Review.created_at.desc())
        )
        return await self.paginate(stmt, page, size)

    async def rating_stats(self, listing_id: uuid.UUID) -> tuple[Optional[Decimal], int]:
        """Average and count of visible ratings for a listing."""
        stmt = select(func.avg(Review.rating), func.count(Review.id)).where(
            Review.listing_id == listing_id, Review.is_visible.is_(True)
        )
        avg_rating, count = (await self.session.execute(stmt)).one()
        return (Decimal(str(avg_rating)) if avg_rating is not None else None), int(count or 0)

    async def rating_distribution(self, listing_id: uuid.UUID) -> Dict[int, int]:
        stmt = (
            select(Review.rating, func.count(Review.id))
            .where(Review.listing_id == listing_id, Review.is_visible.is_(True))
            .group_by(Review.rating)
        )
        distribution = {stars: 0 for stars in range(1, 6)}
        for rating, count in (await self.session.execute(stmt)).all():
            distribution[int(rating)] = int(count)
        return distribution


class SellerRatingRepository(SQLModelRepository[SellerRating]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SellerRating)

    async def get_by_seller(self, seller_id: uuid.UUID) -> Optional[SellerRating]:
        return await self.fetch_one(select(SellerRating).where(SellerRating.seller_id == seller_id))


class WishlistRepository(SQLModelRepository[WishlistItem]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WishlistItem)

    async def get_item(self, user_id: uuid.UUID, listing_id: uuid.UUID) -> Optional[WishlistItem]:
        stmt = select(WishlistItem).where(WishlistItem.user_id == user_id, WishlistItem.listing_id == listing_id)
        return await self.fetch_one(stmt)

    async def find_by_user(self, user_id: uuid.UUID) -> List[WishlistItem]:
        stmt = select(WishlistItem).where(WishlistItem.user_id == user_id).order_by(WishlistItem.created_at.desc())
        return await self.fetch_all(stmt)

    async def count_by_user(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count(WishlistItem.id)).where(WishlistItem.user_id == user_id)
        return int((await self.session.execute(stmt)).scalar_one())
