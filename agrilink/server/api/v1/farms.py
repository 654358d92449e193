"""
Farm Endpoints.

Farms, their fields and the crop plans grown on each field. Every mutation
is restricted to the farm's owner.
"""

import uuid
from typing import List

from fastapi import APIRouter, Query, status

from agrilink.core.models.domain.enums import CropPlanStatus
from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.farms import (
    CropPlanCreate,
    CropPlanRead,
    CropPlanUpdate,
    FarmCreate,
    FarmOnboardingRequest,
    FarmRead,
    FarmUpdate,
    FieldCreate,
    FieldRead,
    FieldUpdate,
    HarvestRecord,
)
from agrilink.server.security import CurrentUserDep, FarmerDep
from agrilink.server.services.deps import FarmServiceDep

farms_router = APIRouter()
fields_router = APIRouter()
crop_plans_router = APIRouter()


@farms_router.post(
    "",
    response_model=ApiResponse[FarmRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Farm",
    description="Create a farm owned by the calling farmer.",
    responses={403: {"description": "Caller is not a farmer"}},
)
async def create_farm(request: FarmCreate, user: FarmerDep, service: FarmServiceDep):
    """
    Create a farm.

    - **name**: Farm name.
    - **location**: Free-form location, e.g. "Nashik, Maharashtra".
    - **crop_types**: Comma separated crops grown on the farm.
    - **total_area** / **area_unit**: Size of the farm; the unit defaults to HECTARE.
    """
    farm = await service.create_farm(user.id, request)
    return ApiResponse.ok(FarmRead.model_validate(farm), "Farm created successfully")


@farms_router.get("", response_model=ApiResponse[List[FarmRead]], summary="List My Farms")
async def list_my_farms(user: CurrentUserDep, service: FarmServiceDep):
    return ApiResponse.ok([FarmRead.model_validate(f) for f in await service.get_farms_by_farmer(user.id)])


@farms_router.get(
    "/all",
    response_model=ApiResponse[List[FarmRead]],
    summary="List Active Farms",
    description="List every active farm on the platform.",
)
async def list_active_farms(user: CurrentUserDep, service: FarmServiceDep):
    return ApiResponse.ok([FarmRead.model_validate(f) for f in await service.get_all_active_farms()])


@farms_router.post(
    "/onboarding",
    response_model=ApiResponse[FarmRead],
    status_code=status.HTTP_201_CREATED,
    summary="Onboard Farm",
    description="Create the first farm during farmer onboarding from the onboarding form fields.",
)
async def onboard_farm(request: FarmOnboardingRequest, user: FarmerDep, service: FarmServiceDep):
    farm = await service.onboard_farm(user.id, request)
    return ApiResponse.ok(FarmRead.model_validate(farm), "Farm onboarding completed")


@farms_router.get(
    "/{farm_id}",
    response_model=ApiResponse[FarmRead],
    summary="Get Farm",
    responses={404: {"description": "Farm not found"}},
)
async def get_farm(farm_id: uuid.UUID, user: CurrentUserDep, service: FarmServiceDep):
    return ApiResponse.ok(FarmRead.model_validate(await service.get_farm(farm_id)))


@farms_router.put(
    "/{farm_id}",
    response_model=ApiResponse[FarmRead],
    summary="Update Farm",
    responses={
        403: {"description": "Farm belongs to another farmer"},
        404: {"description": "Farm not found"},
    },
)
async def update_farm(farm_id: uuid.UUID, request: FarmUpdate, user: CurrentUserDep, service: FarmServiceDep):
    farm = await service.update_farm(farm_id, user.id, request)
    return ApiResponse.ok(FarmRead.model_validate(farm), "Farm updated successfully")


@farms_router.delete("/{farm_id}", response_model=ApiResponse[None], summary="Delete Farm")
async def delete_farm(farm_id: uuid.UUID, user: CurrentUserDep, service: FarmServiceDep):
    await service.delete_farm(farm_id, user.id)
    return ApiResponse.ok(message="Farm deleted successfully")


@farms_router.post(
    "/{farm_id}/fields",
    response_model=ApiResponse[FieldRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Field",
)
async def create_field(farm_id: uuid.UUID, request: FieldCreate, user: CurrentUserDep, service: FarmServiceDep):
    field = await service.create_field(farm_id, user.id, request)
    return ApiResponse.ok(FieldRead.model_validate(field), "Field created successfully")


@farms_router.get("/{farm_id}/fields", response_model=ApiResponse[List[FieldRead]], summary="List Fields")
async def list_fields(farm_id: uuid.UUID, user: CurrentUserDep, service: FarmServiceDep):
    return ApiResponse.ok([FieldRead.model_validate(f) for f in await service.get_fields_by_farm(farm_id)])


@fields_router.put("/{field_id}", response_model=ApiResponse[FieldRead], summary="Update Field")
async def update_field(field_id: uuid.UUID, request: FieldUpdate, user: CurrentUserDep, service: FarmServiceDep):
    field = await service.update_field(field_id, user.id, request)
    return ApiResponse.ok(FieldRead.model_validate(field), "Field updated successfully")


@fields_router.delete("/{field_id}", response_model=ApiResponse[None], summary="Delete Field")
async def delete_field(field_id: uuid.UUID, user: CurrentUserDep, service: FarmServiceDep):
    await service.delete_field(field_id, user.id)
    return ApiResponse.ok(message="Field deleted successfully")


@fields_router.post(
    "/{field_id}/crop-plans",
    response_model=ApiResponse[CropPlanRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Crop Plan",
    description="Plan a crop on a field. The plan starts as PLANNED unless a status is given.",
)
async def create_crop_plan(
    field_id: uuid.UUID, request: CropPlanCreate, user: CurrentUserDep, service: FarmServiceDep
):
    plan = await service.create_crop_plan(field_id, user.id, request)
    return ApiResponse.ok(CropPlanRead.model_validate(plan), "Crop plan created successfully")


@fields_router.get("/{field_id}/crop-plans", response_model=ApiResponse[List[CropPlanRead]], summary="List Crop Plans")
async def list_crop_plans(field_id: uuid.UUID, user: CurrentUserDep, service: FarmServiceDep):
    return ApiResponse.ok([CropPlanRead.model_validate(p) for p in await service.get_crop_plans_by_field(field_id)])


@crop_plans_router.put("/{plan_id}", response_model=ApiResponse[CropPlanRead], summary="Update Crop Plan")
async def update_crop_plan(
    plan_id: uuid.UUID, request: CropPlanUpdate, user: CurrentUserDep, service: FarmServiceDep
):
    plan = await service.update_crop_plan(plan_id, user.id, request)
    return ApiResponse.ok(CropPlanRead.model_validate(plan), "Crop plan updated successfully")


@crop_plans_router.patch("/{plan_id}/status", response_model=ApiResponse[CropPlanRead], summary="Update Crop Plan Status")
async def update_crop_plan_status(
    plan_id: uuid.UUID,
    user: CurrentUserDep,
    service: FarmServiceDep,
    new_status: CropPlanStatus = Query(alias="status"),
):
    plan = await service.update_status(plan_id, user.id, new_status)
    return ApiResponse.ok(CropPlanRead.model_validate(plan), "Crop plan status updated")


@crop_plans_router.post(
    "/{plan_id}/harvest",
    response_model=ApiResponse[CropPlanRead],
    summary="Record Harvest",
    description="Record the actual yield and mark the plan HARVESTED. The harvest date defaults to today.",
)
async def record_harvest(plan_id: uuid.UUID, request: HarvestRecord, user: CurrentUserDep, service: FarmServiceDep):
    plan = await service.record_harvest(plan_id, user.id, request)
    return ApiResponse.ok(CropPlanRead.model_validate(plan), "Harvest recorded successfully")


@crop_plans_router.delete("/{plan_id}", response_model=ApiResponse[None], summary="Delete Crop Plan")
async def delete_crop_plan(plan_id: uuid.UUID, user: CurrentUserDep, service: FarmServiceDep):
    await service.delete_crop_plan(plan_id, user.id)
    return ApiResponse.ok(message="Crop plan deleted successfully")
