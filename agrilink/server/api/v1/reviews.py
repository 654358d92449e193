"""
Review Endpoints.

Listing reviews and the seller ratings aggregated from them.
"""

import uuid

from fastapi import APIRouter, status

from agrilink.core.models.io import ApiResponse, PageResponse
from agrilink.core.models.io.marketplace import CanReview, RatingSummary, ReviewCreate, ReviewRead, SellerRatingRead
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import ReviewServiceDep

from .params import DEFAULT_PAGE, DEFAULT_SIZE, PageParam, SizeParam

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ReviewRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Review",
    description="Review a listing. The listing and seller ratings are recalculated.",
    responses={400: {"description": "Own listing, or already reviewed"}},
)
async def create_review(request: ReviewCreate, user: CurrentUserDep, service: ReviewServiceDep):
    """
    Create a review.

    - **listing_id**: Listing being reviewed.
    - **rating**: 1 to 5 stars.
    - **order_id**: Optional order; a review with an order is a verified purchase.
    """
    review = await service.create_review(user.id, request)
    return ApiResponse.ok(ReviewRead.model_validate(review), "Review submitted successfully")


@router.get("/listing/{listing_id}", response_model=ApiResponse[PageResponse[ReviewRead]], summary="Listing Reviews")
async def listing_reviews(
    listing_id: uuid.UUID,
    service: ReviewServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    result = await service.get_reviews_for_listing(listing_id, page, size)
    return ApiResponse.ok(PageResponse.from_page(result, ReviewRead.model_validate))


@router.get("/listing/{listing_id}/summary", response_model=ApiResponse[RatingSummary], summary="Listing Rating Summary")
async def listing_rating_summary(listing_id: uuid.UUID, service: ReviewServiceDep):
    return ApiResponse.ok(await service.get_rating_summary(listing_id))


@router.get("/seller/{seller_id}", response_model=ApiResponse[PageResponse[ReviewRead]], summary="Seller Reviews")
async def seller_reviews(
    seller_id: uuid.UUID,
    service: ReviewServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    result = await service.get_reviews_by_seller(seller_id, page, size)
    return ApiResponse.ok(PageResponse.from_page(result, ReviewRead.model_validate))


@router.get("/seller/{seller_id}/rating", response_model=ApiResponse[SellerRatingRead], summary="Seller Rating")
async def seller_rating(seller_id: uuid.UUID, service: ReviewServiceDep):
    return ApiResponse.ok(await service.get_seller_rating(seller_id))


@router.post("/{review_id}/helpful", response_model=ApiResponse[ReviewRead], summary="Mark Review Helpful")
async def mark_helpful(review_id: uuid.UUID, user: CurrentUserDep, service: ReviewServiceDep):
    review = await service.mark_helpful(review_id)
    return ApiResponse.ok(ReviewRead.model_validate(review))


@router.delete("/{review_id}", response_model=ApiResponse[None], summary="Delete Review")
async def delete_review(review_id: uuid.UUID, user: CurrentUserDep, service: ReviewServiceDep):
    await service.delete_review(review_id, user.id)
    return ApiResponse.ok(message="Review deleted successfully")


@router.get("/can-review/{listing_id}", response_model=ApiResponse[CanReview], summary="Can Review")
async def can_review(listing_id: uuid.UUID, user: CurrentUserDep, service: ReviewServiceDep):
    return ApiResponse.ok(CanReview(can_review=await service.can_review(listing_id, user.id)))
