"""
Wishlist Endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter

from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.marketplace import Count, WishlistItemRead, WishlistStatus
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import WishlistServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[List[WishlistItemRead]],
    summary="My Wishlist",
    description="List the caller's saved listings with their current listing details.",
)
async def get_wishlist(user: CurrentUserDep, service: WishlistServiceDep):
    return ApiResponse.ok(await service.get_wishlist(user.id))


@router.post(
    "/{listing_id}",
    response_model=ApiResponse[None],
    summary="Add to Wishlist",
    description="Save a listing. Saving an already saved listing is a no-op.",
    responses={404: {"description": "Listing not found"}},
)
async def add_to_wishlist(listing_id: uuid.UUID, user: CurrentUserDep, service: WishlistServiceDep):
    await service.add_to_wishlist(user.id, listing_id)
    return ApiResponse.ok(message="Added to wishlist")


@router.delete(
    "/{listing_id}",
    response_model=ApiResponse[None],
    summary="Remove from Wishlist",
    responses={404: {"description": "Listing is not in the wishlist"}},
)
async def remove_from_wishlist(listing_id: uuid.UUID, user: CurrentUserDep, service: WishlistServiceDep):
    await service.remove_from_wishlist(user.id, listing_id)
    return ApiResponse.ok(message="Removed from wishlist")


@router.get("/check/{listing_id}", response_model=ApiResponse[WishlistStatus], summary="Is In Wishlist")
async def check_wishlist(listing_id: uuid.UUID, user: CurrentUserDep, service: WishlistServiceDep):
    return ApiResponse.ok(WishlistStatus(in_wishlist=await service.is_in_wishlist(user.id, listing_id)))


@router.get("/count", response_model=ApiResponse[Count], summary="Wishlist Size")
async def wishlist_count(user: CurrentUserDep, service: WishlistServiceDep):
    return ApiResponse.ok(Count(count=await service.get_wishlist_count(user.id)))
