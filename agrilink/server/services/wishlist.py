"""
Wishlist service.
"""

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import WishlistItem
from agrilink.core.database.repositories import WishlistRepository
from agrilink.core.exceptions import ResourceNotFoundException
from agrilink.core.models.io.marketplace import WishlistItemRead

from .listings import ListingService


class WishlistService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.items = WishlistRepository(session)
        self.listing_service = ListingService(session)

    async def add_to_wishlist(self, user_id: uuid.UUID, listing_id: uuid.UUID) -> WishlistItem:
        """Bookmark a listing; adding it twice returns the existing entry."""
        await self.listing_service.get_listing_entity(listing_id)
        existing = await self.items.get_item(user_id, listing_id)
        if existing is not None:
            return existing
        item = await self.items.create(WishlistItem(user_id=user_id, listing_id=listing_id))
        await self.session.commit()
        return item

    async def remove_from_wishlist(self, user_id: uuid.UUID, listing_id: uuid.UUID) -> None:
        item = await self.items.get_item(user_id, listing_id)
        if item is None:
            raise ResourceNotFoundException("WishlistItem", "listing_id", listing_id)
        await self.items.delete(item.id)
        await self.session.commit()

    async def get_wishlist(self, user_id: uuid.UUID) -> List[WishlistItemRead]:
        items = await self.items.find_by_user(user_id)
        listings = await self.listing_service.get_listings_by_ids([item.listing_id for item in items])
        return [
            WishlistItemRead(
                id=item.id,
                listing_id=item.listing_id,
                added_at=item.created_at,
                listing=listings.get(item.listing_id),
            )
            for item in items
        ]

    async def is_in_wishlist(self, user_id: uuid.UUID, listing_id: uuid.UUID) -> bool:
        return await self.items.get_item(user_id, listing_id) is not None

    async def get_wishlist_count(self, user_id: uuid.UUID) -> int:
        return await self.items.count_by_user(user_id)
