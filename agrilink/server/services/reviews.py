"""
Listing reviews and seller ratings.

Each review changes two aggregates: the listing's average/count, recomputed
from its visible reviews, and the seller's running SellerRating.
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import Review, SellerRating
from agrilink.core.database.repositories import Page, ReviewRepository, SellerRatingRepository
from agrilink.core.exceptions import BadRequestException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.io.marketplace import RatingSummary, ReviewCreate, SellerRatingRead

from .listings import ListingService

logger = get_logger(__name__)

TWO_PLACES = Decimal("0.01")


class ReviewService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.reviews = ReviewRepository(session)
        self.seller_ratings = SellerRatingRepository(session)
        self.listing_service = ListingService(session)

    async def create_review(self, reviewer_id: uuid.UUID, request: ReviewCreate) -> Review:
        listing = await self.listing_service.get_listing_entity(request.listing_id)
        if listing.seller_id == reviewer_id:
            raise BadRequestException("You cannot review your own listing")

        if request.order_id is not None:
            if await self.reviews.exists_for_order(listing.id, reviewer_id, request.order_id):
                raise BadRequestException("You have already reviewed this listing for this order")
        elif await self.reviews.exists_for_listing_and_reviewer(listing.id, reviewer_id):
            raise BadRequestException("You have already reviewed this listing")

        review = await self.reviews.create(
            Review(
                listing_id=listing.id,
                reviewer_id=reviewer_id,
                seller_id=listing.seller_id,
                order_id=request.order_id,
                rating=request.rating,
                title=request.title,
                comment=request.comment,
                is_verified_purchase=request.order_id is not None,
            )
        )
        await self._refresh_listing_rating(listing.id)

        seller_rating = await self._get_or_create_seller_rating(listing.seller_id)
        seller_rating.add_rating(review.rating)
        await self.seller_ratings.update(seller_rating)

        await self.session.commit()
        logger.info(
            f"Review {review.id} ({review.rating}*) created for listing {listing.id}",
            extra={"review_id": str(review.id), "listing_id": str(listing.id)},
        )
        return review

    async def _refresh_listing_rating(self, listing_id: uuid.UUID) -> None:
        average, count = await self.reviews.rating_stats(listing_id)
        if average is not None:
            average = average.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        await self.listing_service.update_rating(listing_id, average, count, commit=False)

    async def _get_or_create_seller_rating(self, seller_id: uuid.UUID) -> SellerRating:
        rating = await self.seller_ratings.get_by_seller(seller_id)
        if rating is None:
            rating = await self.seller_ratings.create(SellerRating(seller_id=seller_id))
        return rating

    async def get_reviews_for_listing(self, listing_id: uuid.UUID, page: int, size: int) -> Page[Review]:
        return await self.reviews.find_visible_by_listing(listing_id, page, size)

    async def get_reviews_by_seller(self, seller_id: uuid.UUID, page: int, size: int) -> Page[Review]:
        return await self.reviews.find_visible_by_seller(seller_id, page, size)

    async def get_rating_summary(self, listing_id: uuid.UUID) -> RatingSummary:
        average, count = await self.reviews.rating_stats(listing_id)
        rounded = average.quantize(TWO_PLACES, rounding=ROUND_HALF_UP) if average is not None else Decimal("0")
        return RatingSummary(
            average_rating=float(rounded),
            total_reviews=count,
            distribution=await self.reviews.rating_distribution(listing_id),
        )

    async def get_seller_rating(self, seller_id: uuid.UUID) -> SellerRatingRead:
        rating: Optional[SellerRating] = await self.seller_ratings.get_by_seller(seller_id)
        if rating is None:
            return SellerRatingRead(seller_id=seller_id, distribution={stars: 0 for stars in range(1, 6)})
        return SellerRatingRead(
            seller_id=seller_id,
            average_rating=float(rating.average_rating),
            total_reviews=rating.total_reviews,
            distribution=rating.distribution(),
        )

    async def mark_helpful(self, review_id: uuid.UUID) -> Review:
        review = await self._get_review(review_id)
        review.helpful_count += 1
        await self.reviews.update(review)
        await self.session.commit()
        return review

    async def delete_review(self, review_id: uuid.UUID, user_id: uuid.UUID) -> None:
        review = await self._get_review(review_id)
        if review.reviewer_id != user_id:
            raise BadRequestException("You can only delete your own reviews")

        listing_id, seller_id, stars = review.listing_id, review.seller_id, review.rating
        await self.reviews.delete(review_id)
        await self._refresh_listing_rating(listing_id)

        seller_rating = await self.seller_ratings.get_by_seller(seller_id)
        if seller_rating is not None:
            seller_rating.remove_rating(stars)
            await self.seller_ratings.update(seller_rating)

        await self.session.commit()
        logger.info(f"Review {review_id} deleted", extra={"review_id": str(review_id)})

    async def can_review(self, listing_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        listing = await self.listing_service.get_listing_entity(listing_id)
        if listing.seller_id == user_id:
            return False
        return not await self.reviews.exists_for_listing_and_reviewer(listing_id, user_id)

    async def _get_review(self, review_id: uuid.UUID) -> Review:
        review = await self.reviews.get_by_id(review_id)
        if review is None:
            raise ResourceNotFoundException("Review", "id", review_id)
        return review
