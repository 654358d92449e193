"""
Order repositories: carts, orders, status history and payments.
"""

import uuid
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.models.domain.enums import OrderStatus

from ..entities.orders import Cart, CartItem, Order, OrderItem, OrderStatusHistory, Payment
from .base import Page, SQLModelRepository


class CartRepository(SQLModelRepository[Cart]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Cart)

    async def get_by_user(self, user_id: uuid.UUID) -> Optional[Cart]:
        return await self.fetch_one(select(Cart).where(Cart.user_id == user_id))


class CartItemRepository(SQLModelRepository[CartItem]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CartItem)

    async def find_by_cart(self, cart_id: uuid.UUID) -> List[CartItem]:
        stmt = select(CartItem).where(CartItem.cart_id == cart_id).order_by(CartItem.created_at.asc())
        return await self.fetch_all(stmt)

    async def get_by_cart_and_listing(self, cart_id: uuid.UUID, listing_id: uuid.UUID) -> Optional[CartItem]:
        stmt = select(CartItem).where(CartItem.cart_id == cart_id, CartItem.listing_id == listing_id)
        return await self.fetch_one(stmt)

    async def count_by_cart(self, cart_id: uuid.UUID) -> int:
        stmt = select(func.count(CartItem.id)).where(CartItem.cart_id == cart_id)
        return int((await self.session.execute(stmt)).scalar_one())

    async def delete_by_cart(self, cart_id: uuid.UUID) -> None:
        await self.session.execute(
            delete(CartItem).where(CartItem.cart_id == cart_id).execution_options(synchronize_session="fetch")
        )


class OrderRepository(SQLModelRepository[Order]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Order)

    async def get_by_number(self, order_number: str) -> Optional[Order]:
        return await self.fetch_one(select(Order).where(Order.order_number == order_number))

    async def find_by_buyer(self, buyer_id: uuid.UUID, page: int, size: int) -> Page[Order]:
        stmt = select(Order).where(Order.buyer_id == buyer_id).order_by(Order.created_at.desc())
        return await self.paginate(stmt, page, size)

    async def find_by_seller(self, seller_id: uuid.UUID, page: int, size: int) -> Page[Order]:
        stmt = select(Order).where(Order.seller_id == seller_id).order_by(Order.created_at.desc())
        return await self.paginate(stmt, page, size)

    async def find_by_seller_and_status(
        self, seller_id: uuid.UUID, status: OrderStatus, page: int, size: int
    ) -> Page[Order]:
        stmt = (
            select(Order)
            .where(Order.seller_id == seller_id, Order.status == status)
            .order_by(Order.created_at.desc())
        )
        return await self.paginate(stmt, page, size)

    async def find_all_by_seller(self, seller_id: uuid.UUID) -> List[Order]:
        return await self.fetch_all(select(Order).where(Order.seller_id == seller_id))


class OrderItemRepository(SQLModelRepository[OrderItem]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, OrderItem)

    async def find_by_order(self, order_id: uuid.UUID) -> List[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.created_at.asc())
        return await self.fetch_all(stmt)

    async def find_by_orders(self, order_ids: List[uuid.UUID]) -> Dict[uuid.UUID, List[OrderItem]]:
        if not order_ids:
            return {}
        items: Dict[uuid.UUID, List[OrderItem]] = {}
        for item in await self.fetch_all(select(OrderItem).where(OrderItem.order_id.in_(order_ids))):
            items.setdefault(item.order_id, []).append(item)
        return items


class OrderStatusHistoryRepository(SQLModelRepository[OrderStatusHistory]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, OrderStatusHistory)

    async def find_by_order(self, order_id: uuid.UUID) -> List[OrderStatusHistory]:
        stmt = (
            select(OrderStatusHistory)
            .where(OrderStatusHistory.order_id == order_id)
            .order_by(OrderStatusHistory.created_at.asc())
        )
        return await self.fetch_all(stmt)


class PaymentRepository(SQLModelRepository[Payment]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Payment)

    async def find_by_order(self, order_id: uuid.UUID) -> List[Payment]:
        stmt = select(Payment).where(Payment.order_id == order_id).order_by(Payment.created_at.desc())
        return await self.fetch_all(stmt)
