"""
Address Endpoints.
"""

import uuid
from typing import List

from fastapi import APIRouter, status

from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.users import AddressCreate, AddressRead, AddressUpdate
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import AddressServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[AddressRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add Address",
    description="Add a delivery address. The first address, or one flagged `is_default`, becomes the default.",
)
async def create_address(request: AddressCreate, user: CurrentUserDep, service: AddressServiceDep):
    address = await service.create_address(user.id, request)
    return ApiResponse.ok(AddressRead.model_validate(address), "Address added successfully")


@router.get(
    "",
    response_model=ApiResponse[List[AddressRead]],
    summary="My Addresses",
    description="The caller's addresses, default first.",
)
async def list_addresses(user: CurrentUserDep, service: AddressServiceDep):
    return ApiResponse.ok([AddressRead.model_validate(a) for a in await service.get_addresses(user.id)])


@router.get(
    "/{address_id}",
    response_model=ApiResponse[AddressRead],
    summary="Get Address",
    responses={404: {"description": "Address not found"}},
)
async def get_address(address_id: uuid.UUID, user: CurrentUserDep, service: AddressServiceDep):
    return ApiResponse.ok(AddressRead.model_validate(await service.get_address(address_id, user.id)))


@router.put("/{address_id}", response_model=ApiResponse[AddressRead], summary="Update Address")
async def update_address(address_id: uuid.UUID, request: AddressUpdate, user: CurrentUserDep, service: AddressServiceDep):
    address = await service.update_address(address_id, user.id, request)
    return ApiResponse.ok(AddressRead.model_validate(address), "Address updated successfully")


@router.delete(
    "/{address_id}",
    response_model=ApiResponse[None],
    summary="Delete Address",
    description="Delete an address. Deleting the default promotes the next address.",
)
async def delete_address(address_id: uuid.UUID, user: CurrentUserDep, service: AddressServiceDep):
    await service.delete_address(address_id, user.id)
    return ApiResponse.ok(message="Address deleted successfully")


@router.patch("/{address_id}/default", response_model=ApiResponse[AddressRead], summary="Set Default Address")
async def set_default_address(address_id: uuid.UUID, user: CurrentUserDep, service: AddressServiceDep):
    address = await service.set_default_address(address_id, user.id)
    return ApiResponse.ok(AddressRead.model_validate(address), "Default address updated")
