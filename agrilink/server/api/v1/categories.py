"""
Category Endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, status

from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.marketplace import CategoryCreate, CategoryRead
from agrilink.server.security import StaffDep
from agrilink.server.services.deps import CategoryServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[CategoryRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    description="Create a product category. Requires the MANAGER or ADMIN role.",
    responses={
        400: {"description": "Category already exists"},
        403: {"description": "Caller is not staff"},
    },
)
async def create_category(request: CategoryCreate, user: StaffDep, service: CategoryServiceDep):
    return ApiResponse.ok(await service.create_category(request), "Category created successfully")


@router.get(
    "",
    response_model=ApiResponse[List[CategoryRead]],
    summary="List Categories",
    description="List active categories with the number of ACTIVE listings in each.",
)
async def list_categories(service: CategoryServiceDep):
    return ApiResponse.ok(await service.get_all_categories())


@router.get("/root", response_model=ApiResponse[List[CategoryRead]], summary="Root Categories")
async def root_categories(service: CategoryServiceDep):
    return ApiResponse.ok(await service.get_root_categories())


@router.get(
    "/{category_id}",
    response_model=ApiResponse[CategoryRead],
    summary="Get Category",
    responses={404: {"description": "Category not found"}},
)
async def get_category(category_id: uuid.UUID, service: CategoryServiceDep):
    return ApiResponse.ok(await service.get_category(category_id))


@router.get("/{category_id}/subcategories", response_model=ApiResponse[List[CategoryRead]], summary="Subcategories")
async def subcategories(category_id: uuid.UUID, service: CategoryServiceDep):
    return ApiResponse.ok(await service.get_subcategories(category_id))
