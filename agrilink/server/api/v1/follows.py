"""
Follow Endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, status

from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.users import FollowerCount, FollowRead, FollowStatus
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import FollowServiceDep

router = APIRouter()


@router.post(
    "/{farmer_id}",
    response_model=ApiResponse[FollowRead],
    status_code=status.HTTP_201_CREATED,
    summary="Follow Farmer",
    responses={400: {"description": "Following yourself, or already following"}},
)
async def follow_farmer(farmer_id: uuid.UUID, user: CurrentUserDep, service: FollowServiceDep):
    follow = await service.follow_farmer(user.id, farmer_id)
    return ApiResponse.ok(FollowRead.model_validate(follow), "Now following farmer")


@router.delete(
    "/{farmer_id}",
    response_model=ApiResponse[None],
    summary="Unfollow Farmer",
    responses={404: {"description": "Not following this farmer"}},
)
async def unfollow_farmer(farmer_id: uuid.UUID, user: CurrentUserDep, service: FollowServiceDep):
    await service.unfollow_farmer(user.id, farmer_id)
    return ApiResponse.ok(message="Unfollowed farmer")


@router.get("", response_model=ApiResponse[List[FollowRead]], summary="Followed Farmers")
async def followed_farmers(user: CurrentUserDep, service: FollowServiceDep):
    return ApiResponse.ok([FollowRead.model_validate(f) for f in await service.get_followed_farmers(user.id)])


@router.get("/followers", response_model=ApiResponse[List[FollowRead]], summary="My Followers")
async def my_followers(user: CurrentUserDep, service: FollowServiceDep):
    return ApiResponse.ok([FollowRead.model_validate(f) for f in await service.get_followers(user.id)])


@router.get("/{farmer_id}/status", response_model=ApiResponse[FollowStatus], summary="Is Following")
async def follow_status(farmer_id: uuid.UUID, user: CurrentUserDep, service: FollowServiceDep):
    return ApiResponse.ok(FollowStatus(following=await service.is_following(user.id, farmer_id)))


@router.get("/{farmer_id}/count", response_model=ApiResponse[FollowerCount], summary="Follower Count")
async def follower_count(farmer_id: uuid.UUID, user: CurrentUserDep, service: FollowServiceDep):
    return ApiResponse.ok(FollowerCount(count=await service.get_follower_count(farmer_id)))
