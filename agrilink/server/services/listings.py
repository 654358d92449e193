"""
Marketplace listing service.

Listings are created as DRAFT and only become searchable once published.
Deleting a listing cancels it so that orders and reviews keep their target.
"""

import uuid
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import Listing, ListingImage
from agrilink.core.database.repositories import (
    ListingImageRepository,
    ListingRepository,
    ListingSearchCriteria,
    Page,
)
from agrilink.core.exceptions import ForbiddenException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import ListingStatus
from agrilink.core.models.io.marketplace import ListingCreate, ListingRead, ListingSearchParams, ListingUpdate

logger = get_logger(__name__)

NOT_OWNER = "You can only update your own listings"


def to_listing_read(listing: Listing, images: List[ListingImage]) -> ListingRead:
    urls = [image.image_url for image in images]
    primary = next((image.image_url for image in images if image.is_primary), urls[0] if urls else None)
    return ListingRead.model_validate(listing).model_copy(update={"image_urls": urls, "primary_image_url": primary})


class ListingService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.listings = ListingRepository(session)
        self.images = ListingImageRepository(session)

    async def get_listing_entity(self, listing_id: uuid.UUID) -> Listing:
        listing = await self.listings.get_by_id(listing_id)
        if listing is None:
            raise ResourceNotFoundException("Listing", "id", listing_id)
        return listing

    async def _get_for_owner(self, listing_id: uuid.UUID, seller_id: uuid.UUID) -> Listing:
        listing = await self.get_listing_entity(listing_id)
        if listing.seller_id != seller_id:
            raise ForbiddenException(NOT_OWNER)
        return listing

    async def _read(self, listing: Listing) -> ListingRead:
        return to_listing_read(listing, await self.images.find_by_listing(listing.id))

    async def _read_page(self, page: Page[Listing]) -> Page[ListingRead]:
        images = await self.images.find_by_listings([listing.id for listing in page.content])
        return page.map(lambda listing: to_listing_read(listing, images.get(listing.id, [])))

    async def _read_many(self, listings: List[Listing]) -> List[ListingRead]:
        images = await self.images.find_by_listings([listing.id for listing in listings])
        return [to_listing_read(listing, images.get(listing.id, [])) for listing in listings]

    async def _store_images(self, listing_id: uuid.UUID, urls: List[str]) -> None:
        await self.images.create_all(
            [
                ListingImage(listing_id=listing_id, image_url=url, is_primary=index == 0, sort_order=index)
                for index, url in enumerate(urls)
            ]
        )

    async def create_listing(self, seller_id: uuid.UUID, request: ListingCreate) -> ListingRead:
        values = request.model_dump(exclude={"image_urls"})
        listing = await self.listings.create(Listing(seller_id=seller_id, status=ListingStatus.DRAFT, **values))
        await self._store_images(listing.id, request.image_urls)
        await self.session.commit()
        logger.info(
            f"Created listing {listing.id} '{listing.title}' for seller {seller_id}",
            extra={"listing_id": str(listing.id), "seller_id": str(seller_id)},
        )
        return await self._read(listing)

    async def get_listing(self, listing_id: uuid.UUID) -> ListingRead:
        """Return a listing and count the view."""
        listing = await self.get_listing_entity(listing_id)
        listing.view_count += 1
        await self.listings.update(listing)
        await self.session.commit()
        return await self._read(listing)

    async def search_listings(self, params: ListingSearchParams, page: int, size: int) -> Page[ListingRead]:
        criteria = ListingSearchCriteria(**params.model_dump())
        return await self._read_page(await self.listings.search(criteria, page, size))

    async def get_active_listings(self, page: int, size: int) -> Page[ListingRead]:
        return await self._read_page(await self.listings.find_by_status(ListingStatus.ACTIVE, page, size))

    async def get_listings_by_seller(self, seller_id: uuid.UUID, page: int, size: int) -> Page[ListingRead]:
        return await self._read_page(await self.listings.find_by_seller(seller_id, page, size))

    async def get_listings_by_category(self, category_id: uuid.UUID, page: int, size: int) -> Page[ListingRead]:
        return await self._read_page(await self.listings.find_active_by_category(category_id, page, size))

    async def get_top_listings(self, limit: int) -> List[ListingRead]:
        return await self._read_many(await self.listings.find_top_rated(limit))

    async def get_recent_listings(self, limit: int) -> List[ListingRead]:
        return await self._read_many(await self.listings.find_recent(limit))

    async def update_listing(self, listing_id: uuid.UUID, seller_id: uuid.UUID, request: ListingUpdate) -> ListingRead:
        listing = await self._get_for_owner(listing_id, seller_id)
        for key, value in request.model_dump(exclude_unset=True, exclude_none=True, exclude={"image_urls"}).items():
            setattr(listing, key, value)
        await self.listings.update(listing)
        if request.image_urls is not None:
            await self.images.delete_by_listing(listing.id)
            await self._store_images(listing.id, request.image_urls)
        await self.session.commit()
        return await self._read(listing)

    async def _set_status(self, listing_id: uuid.UUID, seller_id: uuid.UUID, status: ListingStatus) -> ListingRead:
        listing = await self._get_for_owner(listing_id, seller_id)
        listing.status = status
        await self.listings.update(listing)
        await self.session.commit()
        logger.info(f"Listing {listing_id} is now {status.value}", extra={"listing_id": str(listing_id)})
        return await self._read(listing)

    async def publish_listing(self, listing_id: uuid.UUID, seller_id: uuid.UUID) -> ListingRead:
        return await self._set_status(listing_id, seller_id, ListingStatus.ACTIVE)

    async def delete_listing(self, listing_id: uuid.UUID, seller_id: uuid.UUID) -> None:
        await self._set_status(listing_id, seller_id, ListingStatus.CANCELLED)

    async def mark_sold(self, listing_id: uuid.UUID, seller_id: uuid.UUID) -> ListingRead:
        return await self._set_status(listing_id, seller_id, ListingStatus.SOLD)

    async def update_rating(
        self, listing_id: uuid.UUID, average: Optional[Decimal], count: int, commit: bool = True
    ) -> Listing:
        listing = await self.get_listing_entity(listing_id)
        listing.average_rating = average if average is not None else Decimal("0")
        listing.review_count = count
        await self.listings.update(listing)
        if commit:
            await self.session.commit()
        return listing

    async def get_listings_by_ids(self, listing_ids: List[uuid.UUID]) -> Dict[uuid.UUID, ListingRead]:
        listings = [listing for listing in [await self.listings.get_by_id(i) for i in listing_ids] if listing]
        return {read.id: read for read in await self._read_many(listings)}
