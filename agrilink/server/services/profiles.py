"""
Profile services for farmers, managers and customers.

Farmer and manager profiles go through manager/admin approval; editing a
rejected profile puts it back into the PENDING queue.
"""

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import CustomerProfile, FarmerProfile, ManagerProfile
from agrilink.core.database.repositories import (
    CustomerProfileRepository,
    FarmerProfileRepository,
    ManagerProfileRepository,
    Page,
)
from agrilink.core.exceptions import BadRequestException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import ProfileStatus
from agrilink.core.models.io.users import (
    ApprovalRequest,
    CustomerProfileUpdate,
    FarmerProfileUpdate,
    ManagerProfileUpdate,
)

logger = get_logger(__name__)


def _reopen_if_rejected(profile: FarmerProfile | ManagerProfile) -> None:
    if profile.status == ProfileStatus.REJECTED:
        profile.status = ProfileStatus.PENDING
        profile.rejection_reason = None


def _apply_decision(profile: FarmerProfile | ManagerProfile, request: ApprovalRequest, approver_id: uuid.UUID) -> None:
    if request.approved:
        profile.approve(approver_id)
    else:
        profile.reject(request.reason)
    logger.info(
        f"{type(profile).__name__} {profile.id} {profile.status.value} by {approver_id}",
        extra={"profile_id": str(profile.id), "status": profile.status.value},
    )


class FarmerProfileService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.profiles = FarmerProfileRepository(session)

    async def get_or_create_profile(self, user_id: uuid.UUID) -> FarmerProfile:
        profile = await self.profiles.get_by_user(user_id)
        if profile is None:
            profile = await self.profiles.create(FarmerProfile(user_id=user_id))
            await self.session.commit()
            logger.info(f"Created farmer profile for user {user_id}")
        return profile

    async def get_profile(self, user_id: uuid.UUID) -> FarmerProfile:
        profile = await self.profiles.get_by_user(user_id)
        if profile is None:
            raise ResourceNotFoundException("FarmerProfile", "userId", user_id)
        return profile

    async def update_profile(self, user_id: uuid.UUID, request: FarmerProfileUpdate) -> FarmerProfile:
        profile = await self.profiles.get_by_user(user_id)
        if profile is None:
            profile = await self.profiles.create(FarmerProfile(user_id=user_id))

        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        username = changes.get("username")
        if username and username != profile.username and await self.profiles.exists_by_username(username):
            raise BadRequestException("Username is already taken")

        for key, value in changes.items():
            setattr(profile, key, value)
        _reopen_if_rejected(profile)
        await self.profiles.update(profile)
        await self.session.commit()
        return profile

    async def get_pending_profiles(self, page: int, size: int) -> Page[FarmerProfile]:
        return await self.profiles.find_by_status_paged(ProfileStatus.PENDING, page, size)

    async def get_pending_count(self) -> int:
        return await self.profiles.count_by_status(ProfileStatus.PENDING)

    async def get_by_status(self, status: ProfileStatus) -> List[FarmerProfile]:
        return await self.profiles.find_by_status(status)

    async def approve_or_reject(
        self, profile_id: uuid.UUID, request: ApprovalRequest, approver_id: uuid.UUID
    ) -> FarmerProfile:
        profile = await self.profiles.get_by_id(profile_id)
        if profile is None:
            raise ResourceNotFoundException("FarmerProfile", "id", profile_id)
        _apply_decision(profile, request, approver_id)
        await self.profiles.update(profile)
        await self.session.commit()
        return profile

    async def is_approved(self, user_id: uuid.UUID) -> bool:
        profile = await self.profiles.get_by_user(user_id)
        return profile is not None and profile.is_approved


class ManagerProfileService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.profiles = ManagerProfileRepository(session)

    async def get_or_create_profile(self, user_id: uuid.UUID) -> ManagerProfile:
        profile = await self.profiles.get_by_user(user_id)
        if profile is None:
            profile = await self.profiles.create(ManagerProfile(user_id=user_id))
            await self.session.commit()
            logger.info(f"Created manager profile for user {user_id}")
        return profile

    async def update_profile(self, user_id: uuid.UUID, request: ManagerProfileUpdate) -> ManagerProfile:
        profile = await self.profiles.get_by_user(user_id)
        if profile is None:
            profile = await self.profiles.create(ManagerProfile(user_id=user_id))
        for key, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(profile, key, value)
        _reopen_if_rejected(profile)
        await self.profiles.update(profile)
        await self.session.commit()
        return profile

    async def get_pending_profiles(self, page: int, size: int) -> Page[ManagerProfile]:
        return await self.profiles.find_by_status_paged(ProfileStatus.PENDING, page, size)

    async def get_pending_count(self) -> int:
        return await self.profiles.count_by_status(ProfileStatus.PENDING)

    async def approve_or_reject(
        self, profile_id: uuid.UUID, request: ApprovalRequest, approver_id: uuid.UUID
    ) -> ManagerProfile:
        profile = await self.profiles.get_by_id(profile_id)
        if profile is None:
            raise ResourceNotFoundException("ManagerProfile", "id", profile_id)
        _apply_decision(profile, request, approver_id)
        await self.profiles.update(profile)
        await self.session.commit()
        return profile

    async def is_approved(self, user_id: uuid.UUID) -> bool:
        profile = await self.profiles.get_by_user(user_id)
        return profile is not None and profile.is_approved


class CustomerProfileService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.profiles = CustomerProfileRepository(session)

    async def get_or_create_profile(self, user_id: uuid.UUID) -> CustomerProfile:
        profile = await self.profiles.get_by_user(user_id)
        if profile is None:
            profile = await self.profiles.create(CustomerProfile(user_id=user_id))
            await self.session.commit()
        return profile

    async def update_profile(self, user_id: uuid.UUID, request: CustomerProfileUpdate) -> CustomerProfile:
        profile = await self.profiles.get_by_user(user_id)
        if profile is None:
            profile = await self.profiles.create(CustomerProfile(user_id=user_id))
        for key, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(profile, key, value)
        await self.profiles.update(profile)
        await self.session.commit()
        return profile
