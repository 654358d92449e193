"""
Delivery address book. Each user has at most one default address.
"""

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import Address
from agrilink.core.database.repositories import AddressRepository
from agrilink.core.exceptions import ResourceNotFoundException
from agrilink.core.models.io.users import AddressCreate, AddressUpdate


class AddressService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.addresses = AddressRepository(session)

    async def create_address(self, user_id: uuid.UUID, request: AddressCreate) -> Address:
        is_first = await self.addresses.count_by_user(user_id) == 0
        make_default = request.is_default or is_first
        if make_default and not is_first:
            await self.addresses.clear_default(user_id)
        address = await self.addresses.create(
            Address(**request.model_dump(exclude={"is_default"}), user_id=user_id, is_default=make_default)
        )
        await self.session.commit()
        return address

    async def get_addresses(self, user_id: uuid.UUID) -> List[Address]:
        return await self.addresses.find_by_user(user_id)

    async def get_address(self, address_id: uuid.UUID, user_id: uuid.UUID) -> Address:
        address = await self.addresses.get_by_id(address_id)
        if address is None or address.user_id != user_id:
            raise ResourceNotFoundException("Address", "id", address_id)
        return address

    async def update_address(self, address_id: uuid.UUID, user_id: uuid.UUID, request: AddressUpdate) -> Address:
        address = await self.get_address(address_id, user_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if changes.pop("is_default", False) and not address.is_default:
            await self.addresses.clear_default(user_id)
            address.is_default = True
        for key, value in changes.items():
            setattr(address, key, value)
        await self.addresses.update(address)
        await self.session.commit()
        return address

    async def delete_address(self, address_id: uuid.UUID, user_id: uuid.UUID) -> None:
        address = await self.get_address(address_id, user_id)
        was_default = address.is_default
        await self.addresses.delete(address.id)
        if was_default:
            remaining = await self.addresses.find_by_user(user_id)
            if remaining:
                remaining[0].is_default = True
                await self.addresses.update(remaining[0])
        await self.session.commit()

    async def set_default_address(self, address_id: uuid.UUID, user_id: uuid.UUID) -> Address:
        address = await self.get_address(address_id, user_id)
        await self.addresses.clear_default(user_id)
        address.is_default = True
        await self.addresses.update(address)
        await self.session.commit()
        return address
