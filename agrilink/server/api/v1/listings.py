"""
Listing Endpoints.

Produce listings offered by farmers. Reads are public; creating and
managing listings requires the FARMER role and ownership.
"""

import uuid
from typing import Annotated, List

from fastapi import APIRouter, Query, status

from agrilink.core.models.io import ApiResponse, PageResponse
from agrilink.core.models.io.marketplace import ListingCreate, ListingRead, ListingSearchParams, ListingUpdate
from agrilink.server.security import CurrentUserDep, FarmerDep
from agrilink.server.services.deps import ListingServiceDep

from .params import DEFAULT_PAGE, DEFAULT_SIZE, PageParam, SizeParam

router = APIRouter()

DEFAULT_SHOWCASE_LIMIT = 10


@router.post(
    "",
    response_model=ApiResponse[ListingRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Listing",
    description="Create a DRAFT listing. The first image becomes the primary image.",
    response_description="The created listing.",
    responses={403: {"description": "Caller is not a farmer"}},
)
async def create_listing(request: ListingCreate, user: FarmerDep, service: ListingServiceDep):
    """
    Create a listing.

    - **title** / **description** / **crop_type**: What is being sold.
    - **quantity** / **quantity_unit** / **price_per_unit**: Stock and pricing.
    - **minimum_order**: Smallest quantity a buyer may order.
    - **image_urls**: Ordered image URLs; the first is primary.
    - **latitude** / **longitude**: Optional coordinates used by the radius search.

    The listing stays hidden from the marketplace until it is published.
    """
    listing = await service.create_listing(user.id, request)
    return ApiResponse.ok(listing, "Listing created successfully")


@router.get(
    "",
    response_model=ApiResponse[PageResponse[ListingRead]],
    summary="Active Listings",
    description="Page through ACTIVE listings, newest first.",
)
async def list_active_listings(
    service: ListingServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    return ApiResponse.ok(PageResponse.from_page(await service.get_active_listings(page, size)))


@router.get(
    "/search",
    response_model=ApiResponse[PageResponse[ListingRead]],
    summary="Search Listings",
    description="Filter ACTIVE listings by keyword, category, price, quantity, rating, quality and distance.",
)
async def search_listings(
    params: Annotated[ListingSearchParams, Query()],
    service: ListingServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    """
    Search the marketplace.

    - **keyword**: Case-insensitive match on title, description or crop type.
    - **crop_types**: Repeat the parameter to match any of several crops.
    - **latitude** / **longitude** / **radius_km**: Bounding-box distance filter.
    - **sort_by**: created_at, price, rating or views.
    - **sort_direction**: asc or desc.
    """
    return ApiResponse.ok(PageResponse.from_page(await service.search_listings(params, page, size)))


@router.get("/top", response_model=ApiResponse[List[ListingRead]], summary="Top Rated Listings")
async def top_listings(service: ListingServiceDep, limit: int = Query(default=DEFAULT_SHOWCASE_LIMIT, ge=1, le=50)):
    return ApiResponse.ok(await service.get_top_listings(limit))


@router.get("/recent", response_model=ApiResponse[List[ListingRead]], summary="Recent Listings")
async def recent_listings(service: ListingServiceDep, limit: int = Query(default=DEFAULT_SHOWCASE_LIMIT, ge=1, le=50)):
    return ApiResponse.ok(await service.get_recent_listings(limit))


@router.get(
    "/my",
    response_model=ApiResponse[PageResponse[ListingRead]],
    summary="My Listings",
    description="Page through the caller's listings in every status.",
)
async def my_listings(
    user: CurrentUserDep,
    service: ListingServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    return ApiResponse.ok(PageResponse.from_page(await service.get_listings_by_seller(user.id, page, size)))


@router.get("/seller/{seller_id}", response_model=ApiResponse[PageResponse[ListingRead]], summary="Seller Listings")
async def seller_listings(
    seller_id: uuid.UUID,
    service: ListingServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    return ApiResponse.ok(PageResponse.from_page(await service.get_listings_by_seller(seller_id, page, size)))


@router.get(
    "/category/{category_id}", response_model=ApiResponse[PageResponse[ListingRead]], summary="Category Listings"
)
async def category_listings(
    category_id: uuid.UUID,
    service: ListingServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    return ApiResponse.ok(PageResponse.from_page(await service.get_listings_by_category(category_id, page, size)))


@router.get(
    "/{listing_id}",
    response_model=ApiResponse[ListingRead],
    summary="Get Listing",
    description="Retrieve a listing and count the view.",
    responses={404: {"description": "Listing not found"}},
)
async def get_listing(listing_id: uuid.UUID, service: ListingServiceDep):
    return ApiResponse.ok(await service.get_listing(listing_id))


@router.put(
    "/{listing_id}",
    response_model=ApiResponse[ListingRead],
    summary="Update Listing",
    responses={403: {"description": "Listing belongs to another seller"}},
)
async def update_listing(
    listing_id: uuid.UUID, request: ListingUpdate, user: CurrentUserDep, service: ListingServiceDep
):
    listing = await service.update_listing(listing_id, user.id, request)
    return ApiResponse.ok(listing, "Listing updated successfully")


@router.delete(
    "/{listing_id}",
    response_model=ApiResponse[None],
    summary="Delete Listing",
    description="Cancel a listing. The record is kept with status CANCELLED.",
)
async def delete_listing(listing_id: uuid.UUID, user: CurrentUserDep, service: ListingServiceDep):
    await service.delete_listing(listing_id, user.id)
    return ApiResponse.ok(message="Listing deleted successfully")


@router.post("/{listing_id}/publish", response_model=ApiResponse[ListingRead], summary="Publish Listing")
async def publish_listing(listing_id: uuid.UUID, user: CurrentUserDep, service: ListingServiceDep):
    listing = await service.publish_listing(listing_id, user.id)
    return ApiResponse.ok(listing, "Listing published successfully")
