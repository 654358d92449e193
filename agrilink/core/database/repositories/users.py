"""
User profile repositories: farmer/manager/customer profiles, addresses and follows.
"""

import uuid
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.models.domain.enums import ProfileStatus

from ..entities.users import Address, CustomerProfile, FarmerProfile, FollowedFarmer, ManagerProfile
from .base import Page, SQLModelRepository


class FarmerProfileRepository(SQLModelRepository[FarmerProfile]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FarmerProfile)

    async def get_by_user(self, user_id: uuid.UUID) -> Optional[FarmerProfile]:
        return await self.fetch_one(select(FarmerProfile).where(FarmerProfile.user_id == user_id))

    async def exists_by_username(self, username: str) -> bool:
        stmt = select(FarmerProfile.id).where(FarmerProfile.username == username)
        return (await self.session.execute(stmt)).first() is not None

    async def find_by_status_paged(self, status: ProfileStatus, page: int, size: int) -> Page[FarmerProfile]:
        stmt = select(FarmerProfile).where(FarmerProfile.status == status).order_by(FarmerProfile.created_at.asc())
        return await self.paginate(stmt, page, size)

    async def find_by_status(self, status: ProfileStatus) -> List[FarmerProfile]:
        stmt = select(FarmerProfile).where(FarmerProfile.status == status).order_by(FarmerProfile.created_at.asc())
        return await self.fetch_all(stmt)

    async def count_by_status(self, status: ProfileStatus) -> int:
        stmt = select(func.count(FarmerProfile.id)).where(FarmerProfile.status == status)
        return int((await self.session.execute(stmt)).scalar_one())


class ManagerProfileRepository(SQLModelRepository[ManagerProfile]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ManagerProfile)

    async def get_by_user(self, user_id: uuid.UUID) -> Optional[ManagerProfile]:
        return await self.fetch_one(select(ManagerProfile).where(ManagerProfile.user_id == user_id))

    async def find_by_status_paged(self, status: ProfileStatus, page: int, size: int) -> Page[ManagerProfile]:
        stmt = (
            select(ManagerProfile).where(ManagerProfile.status == status).order_by(ManagerProfile.created_at.asc())
        )
        return await self.paginate(stmt, page, size)

    async def count_by_status(self, status: ProfileStatus) -> int:
        stmt = select(func.count(ManagerProfile.id)).where(ManagerProfile.status == status)
        return int((await self.session.execute(stmt)).scalar_one())


class CustomerProfileRepository(SQLModelRepository[CustomerProfile]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CustomerProfile)

    async def get_by_user(self, user_id: uuid.UUID) -> Optional[CustomerProfile]:
        return await self.fetch_one(select(CustomerProfile).where(CustomerProfile.user_id == user_id))


class AddressRepository(SQLModelRepository[Address]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Address)

    async def find_by_user(self, user_id: uuid.UUID) -> List[Address]:
        """Addresses of a user, default first then newest."""
        stmt = (
            select(Address)
            .where(Address.user_id == user_id)
            .order_by(Address.is_default.desc(), Address.created_at.desc())
        )
        return await self.fetch_all(stmt)

    async def count_by_user(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count(Address.id)).where(Address.user_id == user_id)
        return int((await self.session.execute(stmt)).scalar_one())

    async def clear_default(self, user_id: uuid.UUID) -> None:
        stmt = (
            update(Address)
            .where(Address.user_id == user_id, Address.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)


class FollowedFarmerRepository(SQLModelRepository[FollowedFarmer]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FollowedFarmer)

    async def get_follow(self, customer_id: uuid.UUID, farmer_id: uuid.UUID) -> Optional[FollowedFarmer]:
        stmt = select(FollowedFarmer).where(
            FollowedFarmer.customer_id == customer_id, FollowedFarmer.farmer_id == farmer_id
        )
        return await self.fetch_one(stmt)

    async def find_by_customer(self, customer_id: uuid.UUID) -> List[FollowedFarmer]:
        stmt = (
            select(FollowedFarmer)
            .where(FollowedFarmer.customer_id == customer_id)
            .order_by(FollowedFarmer.created_at.desc())
        )
        return await self.fetch_all(stmt)

    async def find_by_farmer(self, farmer_id: uuid.UUID) -> List[FollowedFarmer]:
        stmt = (
            select(FollowedFarmer)
            .where(FollowedFarmer.farmer_id == farmer_id)
            .order_by(FollowedFarmer.created_at.desc())
        )
        return await self.fetch_all(stmt)

    async def count_by_farmer(self, farmer_id: uuid.UUID) -> int:
        stmt = select(func.count(FollowedFarmer.id)).where(FollowedFarmer.farmer_id == farmer_id)
        return int((await self.session.execute(stmt)).scalar_one())
