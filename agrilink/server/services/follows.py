"""
Customers following farmers.
"""

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import FollowedFarmer
from agrilink.core.database.repositories import FollowedFarmerRepository
from agrilink.core.exceptions import BadRequestException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger

logger = get_logger(__name__)


class FollowService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.follows = FollowedFarmerRepository(session)

    async def follow_farmer(self, customer_id: uuid.UUID, farmer_id: uuid.UUID) -> FollowedFarmer:
        if customer_id == farmer_id:
            raise BadRequestException("You cannot follow yourself")
        if await self.follows.get_follow(customer_id, farmer_id) is not None:
            raise BadRequestException("Already following this farmer")
        follow = await self.follows.create(FollowedFarmer(customer_id=customer_id, farmer_id=farmer_id))
        await self.session.commit()
        logger.info(f"User {customer_id} followed farmer {farmer_id}")
        return follow

    async def unfollow_farmer(self, customer_id: uuid.UUID, farmer_id: uuid.UUID) -> None:
        follow = await self.follows.get_follow(customer_id, farmer_id)
        if follow is None:
            raise ResourceNotFoundException("Follow", "farmerId", farmer_id)
        await self.follows.delete(follow.id)
        await self.session.commit()

    async def get_followed_farmers(self, customer_id: uuid.UUID) -> List[FollowedFarmer]:
        return await self.follows.find_by_customer(customer_id)

    async def get_followers(self, farmer_id: uuid.UUID) -> List[FollowedFarmer]:
        return await self.follows.find_by_farmer(farmer_id)

    async def is_following(self, customer_id: uuid.UUID, farmer_id: uuid.UUID) -> bool:
        return await self.follows.get_follow(customer_id, farmer_id) is not None

    async def get_follower_count(self, farmer_id: uuid.UUID) -> int:
        return await self.follows.count_by_farmer(farmer_id)
