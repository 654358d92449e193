"""
Profile Endpoints.

Self-service profiles for farmers, managers and customers, and the staff
approval queue for farmer and manager profiles.
"""

import uuid

from fastapi import APIRouter

from agrilink.core.models.io import ApiResponse, PageResponse
from agrilink.core.models.io.marketplace import Count
from agrilink.core.models.io.users import (
    ApprovalRequest,
    ApprovalStatus,
    CustomerProfileRead,
    CustomerProfileUpdate,
    FarmerProfileRead,
    FarmerProfileUpdate,
    ManagerProfileRead,
    ManagerProfileUpdate,
)
from agrilink.server.security import CurrentUserDep, StaffDep
from agrilink.server.services.deps import (
    CustomerProfileServiceDep,
    FarmerProfileServiceDep,
    ManagerProfileServiceDep,
)

from .params import DEFAULT_PAGE, DEFAULT_SIZE, PageParam, SizeParam

farmer_router = APIRouter()
manager_router = APIRouter()
customer_router = APIRouter()
admin_router = APIRouter()


@farmer_router.get(
    "/me",
    response_model=ApiResponse[FarmerProfileRead],
    summary="My Farmer Profile",
    description="Return the caller's farmer profile, creating an empty PENDING one on first access.",
)
async def get_my_farmer_profile(user: CurrentUserDep, service: FarmerProfileServiceDep):
    return ApiResponse.ok(FarmerProfileRead.model_validate(await service.get_or_create_profile(user.id)))


@farmer_router.put(
    "/me",
    response_model=ApiResponse[FarmerProfileRead],
    summary="Update My Farmer Profile",
    description="Partially update the caller's farmer profile. A rejected profile is resubmitted for approval.",
    responses={400: {"description": "Username is already taken"}},
)
async def update_my_farmer_profile(
    request: FarmerProfileUpdate, user: CurrentUserDep, service: FarmerProfileServiceDep
):
    """
    Update the farmer profile.

    The profile counts as complete once **name**, **username**, **phone**, **city**,
    **farm_name** and **crop_types** are all set.
    """
    profile = await service.update_profile(user.id, request)
    return ApiResponse.ok(FarmerProfileRead.model_validate(profile), "Profile updated successfully")


@farmer_router.get(
    "/approved/{user_id}",
    response_model=ApiResponse[ApprovalStatus],
    summary="Is Farmer Approved",
)
async def is_farmer_approved(user_id: uuid.UUID, user: CurrentUserDep, service: FarmerProfileServiceDep):
    return ApiResponse.ok(ApprovalStatus(approved=await service.is_approved(user_id)))


@farmer_router.get(
    "/{user_id}",
    response_model=ApiResponse[FarmerProfileRead],
    summary="Get Farmer Profile",
    responses={404: {"description": "Profile not found"}},
)
async def get_farmer_profile(user_id: uuid.UUID, user: CurrentUserDep, service: FarmerProfileServiceDep):
    return ApiResponse.ok(FarmerProfileRead.model_validate(await service.get_profile(user_id)))


@manager_router.get("/me", response_model=ApiResponse[ManagerProfileRead], summary="My Manager Profile")
async def get_my_manager_profile(user: CurrentUserDep, service: ManagerProfileServiceDep):
    return ApiResponse.ok(ManagerProfileRead.model_validate(await service.get_or_create_profile(user.id)))


@manager_router.put("/me", response_model=ApiResponse[ManagerProfileRead], summary="Update My Manager Profile")
async def update_my_manager_profile(
    request: ManagerProfileUpdate, user: CurrentUserDep, service: ManagerProfileServiceDep
):
    profile = await service.update_profile(user.id, request)
    return ApiResponse.ok(ManagerProfileRead.model_validate(profile), "Profile updated successfully")


@customer_router.get("/me", response_model=ApiResponse[CustomerProfileRead], summary="My Customer Profile")
async def get_my_customer_profile(user: CurrentUserDep, service: CustomerProfileServiceDep):
    return ApiResponse.ok(CustomerProfileRead.model_validate(await service.get_or_create_profile(user.id)))


@customer_router.put("/me", response_model=ApiResponse[CustomerProfileRead], summary="Update My Customer Profile")
async def update_my_customer_profile(
    request: CustomerProfileUpdate, user: CurrentUserDep, service: CustomerProfileServiceDep
):
    profile = await service.update_profile(user.id, request)
    return ApiResponse.ok(CustomerProfileRead.model_validate(profile), "Profile updated successfully")


@admin_router.get(
    "/farmers/pending",
    response_model=ApiResponse[PageResponse[FarmerProfileRead]],
    summary="Pending Farmer Profiles",
    description="Farmer profiles awaiting approval. Requires the MANAGER or ADMIN role.",
)
async def pending_farmer_profiles(
    user: StaffDep,
    service: FarmerProfileServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    result = await service.get_pending_profiles(page, size)
    return ApiResponse.ok(PageResponse.from_page(result, FarmerProfileRead.model_validate))


@admin_router.get("/farmers/pending/count", response_model=ApiResponse[Count], summary="Pending Farmer Count")
async def pending_farmer_count(user: StaffDep, service: FarmerProfileServiceDep):
    return ApiResponse.ok(Count(count=await service.get_pending_count()))


@admin_router.post(
    "/farmers/{profile_id}/approval",
    response_model=ApiResponse[FarmerProfileRead],
    summary="Approve or Reject Farmer",
    description="Approve a farmer profile, or reject it with a reason.",
    responses={404: {"description": "Profile not found"}},
)
async def decide_farmer_profile(
    profile_id: uuid.UUID, request: ApprovalRequest, user: StaffDep, service: FarmerProfileServiceDep
):
    profile = await service.approve_or_reject(profile_id, request, user.id)
    message = "Farmer profile approved" if request.approved else "Farmer profile rejected"
    return ApiResponse.ok(FarmerProfileRead.model_validate(profile), message)


@admin_router.get(
    "/managers/pending",
    response_model=ApiResponse[PageResponse[ManagerProfileRead]],
    summary="Pending Manager Profiles",
)
async def pending_manager_profiles(
    user: StaffDep,
    service: ManagerProfileServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    result = await service.get_pending_profiles(page, size)
    return ApiResponse.ok(PageResponse.from_page(result, ManagerProfileRead.model_validate))


@admin_router.post(
    "/managers/{profile_id}/approval",
    response_model=ApiResponse[ManagerProfileRead],
    summary="Approve or Reject Manager",
)
async def decide_manager_profile(
    profile_id: uuid.UUID, request: ApprovalRequest, user: StaffDep, service: ManagerProfileServiceDep
):
    profile = await service.approve_or_reject(profile_id, request, user.id)
    message = "Manager profile approved" if request.approved else "Manager profile rejected"
    return ApiResponse.ok(ManagerProfileRead.model_validate(profile), message)
