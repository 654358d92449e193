"""
Shopping cart service.

A user has at most one cart, created on first access. Items are priced from
the listing at the time they are added.
"""

import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import Cart, CartItem
from agrilink.core.database.repositories import CartItemRepository, CartRepository, ListingImageRepository
from agrilink.core.exceptions import BadRequestException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import ListingStatus
from agrilink.core.models.io.orders import CartItemAdd, CartItemRead, CartRead

from .listings import ListingService

logger = get_logger(__name__)


class CartService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.carts = CartRepository(session)
        self.items = CartItemRepository(session)
        self.images = ListingImageRepository(session)
        self.listing_service = ListingService(session)

    async def _get_or_create_cart(self, user_id: uuid.UUID) -> Cart:
        cart = await self.carts.get_by_user(user_id)
        if cart is None:
            cart = await self.carts.create(Cart(user_id=user_id))
        return cart

    async def _read(self, cart: Cart) -> CartRead:
        items = await self.items.find_by_cart(cart.id)
        total = sum((item.subtotal for item in items), Decimal("0"))
        return CartRead(
            id=cart.id,
            user_id=cart.user_id,
            items=[CartItemRead.model_validate(item) for item in items],
            total_items=len(items),
            total_amount=float(total),
        )

    async def get_cart(self, user_id: uuid.UUID) -> CartRead:
        cart = await self._get_or_create_cart(user_id)
        await self.session.commit()
        return await self._read(cart)

    async def add_to_cart(self, user_id: uuid.UUID, request: CartItemAdd) -> CartRead:
        """Add a listing, merging the quantity when it is already in the cart."""
        listing = await self.listing_service.get_listing_entity(request.listing_id)
        if listing.status != ListingStatus.ACTIVE:
            raise BadRequestException("Listing is not available for purchase")

        cart = await self._get_or_create_cart(user_id)
        item = await self.items.get_by_cart_and_listing(cart.id, listing.id)
        if item is not None:
            item.quantity = item.quantity + request.quantity
            await self.items.update(item)
        else:
            images = await self.images.find_by_listing(listing.id)
            await self.items.create(
                CartItem(
                    cart_id=cart.id,
                    listing_id=listing.id,
                    seller_id=listing.seller_id,
                    listing_title=listing.title,
                    quantity=request.quantity,
                    unit=listing.quantity_unit,
                    unit_price=listing.price_per_unit,
                    image_url=images[0].image_url if images else None,
                )
            )
        await self.carts.update(cart)
        await self.session.commit()
        logger.info(
            f"Added {request.quantity} of listing {listing.id} to cart of user {user_id}",
            extra={"user_id": str(user_id), "listing_id": str(listing.id)},
        )
        return await self._read(cart)

    async def _get_owned_item(self, user_id: uuid.UUID, item_id: uuid.UUID) -> CartItem:
        cart = await self.carts.get_by_user(user_id)
        item = await self.items.get_by_id(item_id)
        if cart is None or item is None or item.cart_id != cart.id:
            raise ResourceNotFoundException("CartItem", "id", item_id)
        return item

    async def update_cart_item(self, user_id: uuid.UUID, item_id: uuid.UUID, quantity: Decimal) -> CartRead:
        """Set an item's quantity; zero or less removes it."""
        item = await self._get_owned_item(user_id, item_id)
        if quantity <= 0:
            await self.items.delete(item.id)
        else:
            item.quantity = quantity
            await self.items.update(item)
        await self.session.commit()
        return await self._read(await self._get_or_create_cart(user_id))

    async def remove_from_cart(self, user_id: uuid.UUID, item_id: uuid.UUID) -> CartRead:
        item = await self._get_owned_item(user_id, item_id)
        await self.items.delete(item.id)
        await self.session.commit()
        return await self._read(await self._get_or_create_cart(user_id))

    async def clear_cart(self, user_id: uuid.UUID, commit: bool = True) -> None:
        cart = await self.carts.get_by_user(user_id)
        if cart is None:
            return
        await self.items.delete_by_cart(cart.id)
        if commit:
            await self.session.commit()

    async def get_cart_count(self, user_id: uuid.UUID) -> int:
        cart = await self.carts.get_by_user(user_id)
        if cart is None:
            return 0
        return await self.items.count_by_cart(cart.id)
