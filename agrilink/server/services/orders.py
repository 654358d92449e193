"""
Order service: checkout, direct orders, status workflow and seller analytics.

Pricing rule applied to every order:

- shipping is free from ``FREE_SHIPPING_THRESHOLD`` upwards, otherwise ``FLAT_SHIPPING_COST``
- tax is ``TAX_RATE`` of the subtotal, rounded half up to cents
- total = subtotal + shipping + tax
"""

import secrets
import time
import uuid
from collections import Counter
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database import utc_now
from agrilink.core.database.entities import Order, OrderItem, OrderStatusHistory
from agrilink.core.database.repositories import (
    CartItemRepository,
    CartRepository,
    OrderItemRepository,
    OrderRepository,
    OrderStatusHistoryRepository,
    Page,
)
from agrilink.core.exceptions import BadRequestException, ForbiddenException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import ListingStatus, OrderStatus
from agrilink.core.models.io.orders import (
    CheckoutRequest,
    OrderCreate,
    OrderItemRead,
    OrderRead,
    SalesAnalytics,
    ShippingDetails,
)
from agrilink.server.core.config import settings

from .cart import CartService
from .listings import ListingService

logger = get_logger(__name__)

TWO_PLACES = Decimal("0.01")

CANCELLABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED)
NON_REVENUE_STATUSES = (OrderStatus.CANCELLED, OrderStatus.REFUNDED)

_STATUS_TIMESTAMPS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


@dataclass
class OrderPricing:
    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def price_order(subtotal: Decimal) -> OrderPricing:
    shipping = Decimal("0") if subtotal >= settings.free_shipping_threshold else settings.flat_shipping_cost
    tax = (subtotal * settings.tax_rate).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return OrderPricing(subtotal=subtotal, shipping_cost=shipping, tax_amount=tax, total_amount=subtotal + shipping + tax)


def generate_order_number() -> str:
    """``ORD`` + epoch milliseconds + 4 random digits."""
    return f"ORD{int(time.time() * 1000)}{secrets.randbelow(10_000):04d}"


def to_order_read(order: Order, items: List[OrderItem]) -> OrderRead:
    return OrderRead.model_validate(order).model_copy(
        update={"items": [OrderItemRead.model_validate(item) for item in items]}
    )


class OrderService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.orders = OrderRepository(session)
        self.order_items = OrderItemRepository(session)
        self.history = OrderStatusHistoryRepository(session)
        self.carts = CartRepository(session)
        self.cart_items = CartItemRepository(session)
        self.cart_service = CartService(session)
        self.listing_service = ListingService(session)

    # -----------------------------------------------------------------
    # Placing orders
    # -----------------------------------------------------------------

    async def checkout(self, buyer_id: uuid.UUID, request: CheckoutRequest) -> OrderRead:
        """Turn the buyer's cart into one consolidated order and empty the cart."""
        cart = await self.carts.get_by_user(buyer_id)
        cart_items = await self.cart_items.find_by_cart(cart.id) if cart else []
        if not cart_items:
            raise BadRequestException("Cart is empty")

        lines = [
            {
                "listing_id": item.listing_id,
                "seller_id": item.seller_id,
                "listing_title": item.listing_title,
                "quantity": item.quantity,
                "unit": item.unit,
                "unit_price": item.unit_price,
                "subtotal": item.subtotal,
            }
            for item in cart_items
        ]
        order, items = await self._place_order(buyer_id, lines, request)
        await self.cart_service.clear_cart(buyer_id, commit=False)
        await self.session.commit()
        return to_order_read(order, items)

    async def create_order(self, buyer_id: uuid.UUID, request: OrderCreate) -> OrderRead:
        """Place an order for explicit listing quantities, bypassing the cart."""
        lines = []
        for requested in request.items:
            listing = await self.listing_service.get_listing_entity(requested.listing_id)
            if listing.status != ListingStatus.ACTIVE:
                raise BadRequestException("Listing is not available for purchase")
            lines.append(
                {
                    "listing_id": listing.id,
                    "seller_id": listing.seller_id,
                    "listing_title": listing.title,
                    "quantity": requested.quantity,
                    "unit": listing.quantity_unit,
                    "unit_price": listing.price_per_unit,
                    "subtotal": requested.quantity * listing.price_per_unit,
                }
            )
        order, items = await self._place_order(buyer_id, lines, request)
        await self.session.commit()
        return to_order_read(order, items)

    async def _place_order(
        self, buyer_id: uuid.UUID, lines: List[Dict[str, Any]], shipping: ShippingDetails
    ) -> Tuple[Order, List[OrderItem]]:
        pricing = price_order(sum((line["subtotal"] for line in lines), Decimal("0")))
        order = await self.orders.create(
            Order(
                order_number=generate_order_number(),
                buyer_id=buyer_id,
                seller_id=lines[0]["seller_id"],
                status=OrderStatus.PENDING,
                subtotal=pricing.subtotal,
                shipping_cost=pricing.shipping_cost,
                tax_amount=pricing.tax_amount,
                total_amount=pricing.total_amount,
                **shipping.model_dump(include=set(ShippingDetails.model_fields)),
            )
        )
        items = await self.order_items.create_all([OrderItem(order_id=order.id, **line) for line in lines])
        await self.history.create(
            OrderStatusHistory(order_id=order.id, status=OrderStatus.PENDING, notes="Order placed", changed_by=buyer_id)
        )
        logger.info(
            f"Order {order.order_number} placed by {buyer_id}: total {order.total_amount}",
            extra={"order_id": str(order.id), "buyer_id": str(buyer_id), "items": len(lines)},
        )
        return order, items

    # -----------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------

    async def get_order_entity(self, order_id: uuid.UUID) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise ResourceNotFoundException("Order", "id", order_id)
        return order

    async def _get_for_participant(self, order_id: uuid.UUID, user_id: uuid.UUID) -> Order:
        order = await self.get_order_entity(order_id)
        if user_id not in (order.buyer_id, order.seller_id):
            raise ForbiddenException("You do not have access to this order")
        return order

    async def get_order(self, order_id: uuid.UUID, user_id: uuid.UUID) -> OrderRead:
        order = await self._get_for_participant(order_id, user_id)
        return to_order_read(order, await self.order_items.find_by_order(order.id))

    async def get_order_by_number(self, order_number: str, user_id: uuid.UUID) -> OrderRead:
        order = await self.orders.get_by_number(order_number)
        if order is None:
            raise ResourceNotFoundException("Order", "order_number", order_number)
        return await self.get_order(order.id, user_id)

    async def _read_page(self, page: Page[Order]) -> Page[OrderRead]:
        items = await self.order_items.find_by_orders([order.id for order in page.content])
        return page.map(lambda order: to_order_read(order, items.get(order.id, [])))

    async def get_buyer_orders(self, buyer_id: uuid.UUID, page: int, size: int) -> Page[OrderRead]:
        return await self._read_page(await self.orders.find_by_buyer(buyer_id, page, size))

    async def get_seller_orders(self, seller_id: uuid.UUID, page: int, size: int) -> Page[OrderRead]:
        return await self._read_page(await self.orders.find_by_seller(seller_id, page, size))

    async def get_seller_orders_by_status(
        self, seller_id: uuid.UUID, status: OrderStatus, page: int, size: int
    ) -> Page[OrderRead]:
        return await self._read_page(await self.orders.find_by_seller_and_status(seller_id, status, page, size))

    async def get_order_history(self, order_id: uuid.UUID, user_id: uuid.UUID) -> List[OrderStatusHistory]:
        await self._get_for_participant(order_id, user_id)
        return await self.history.find_by_order(order_id)

    # -----------------------------------------------------------------
    # Status workflow
    # -----------------------------------------------------------------

    async def update_order_status(
        self, order_id: uuid.UUID, user_id: uuid.UUID, status: OrderStatus, notes: Optional[str] = None
    ) -> OrderRead:
        """Move an order to ``status``. Only the seller may, except that the buyer may cancel."""
        order = await self.get_order_entity(order_id)
        is_seller = user_id == order.seller_id
        is_buyer = user_id == order.buyer_id
        if not (is_seller or (status == OrderStatus.CANCELLED and is_buyer)):
            raise ForbiddenException("You are not allowed to change the status of this order")

        await self.apply_status(order, status, user_id, notes)
        await self.session.commit()
        return to_order_read(order, await self.order_items.find_by_order(order.id))

    async def apply_status(
        self, order: Order, status: OrderStatus, changed_by: Optional[uuid.UUID], notes: Optional[str]
    ) -> None:
        """Set the status, stamp its timestamp and append a history entry. The caller commits."""
        previous = order.status
        order.status = status
        timestamp_field = _STATUS_TIMESTAMPS.get(status)
        if timestamp_field:
            setattr(order, timestamp_field, utc_now())
        await self.orders.update(order)
        await self.history.create(OrderStatusHistory(order_id=order.id, status=status, notes=notes, changed_by=changed_by))
        logger.info(
            f"Order {order.order_number} {previous.value} -> {status.value}",
            extra={"order_id": str(order.id), "status": status.value},
        )

    async def cancel_order(self, order_id: uuid.UUID, user_id: uuid.UUID, reason: Optional[str]) -> OrderRead:
        order = await self._get_for_participant(order_id, user_id)
        if order.status not in CANCELLABLE_STATUSES:
            raise BadRequestException(f"Order cannot be cancelled in status {order.status.value}")
        order.cancellation_reason = reason
        await self.apply_status(order, OrderStatus.CANCELLED, user_id, reason)
        await self.session.commit()
        return to_order_read(order, await self.order_items.find_by_order(order.id))

    async def confirm_order(self, order_id: uuid.UUID, seller_id: uuid.UUID) -> OrderRead:
        return await self.update_order_status(order_id, seller_id, OrderStatus.CONFIRMED, "Order confirmed")

    async def ship_order(self, order_id: uuid.UUID, seller_id: uuid.UUID) -> OrderRead:
        return await self.update_order_status(order_id, seller_id, OrderStatus.SHIPPED, "Order shipped")

    async def deliver_order(self, order_id: uuid.UUID, seller_id: uuid.UUID) -> OrderRead:
        return await self.update_order_status(order_id, seller_id, OrderStatus.DELIVERED, "Order delivered")

    async def complete_order(self, order_id: uuid.UUID, seller_id: uuid.UUID) -> OrderRead:
        return await self.update_order_status(order_id, seller_id, OrderStatus.COMPLETED, "Order completed")

    # -----------------------------------------------------------------
    # Analytics
    # -----------------------------------------------------------------

    async def get_seller_sales_analytics(self, seller_id: uuid.UUID) -> SalesAnalytics:
        orders = await self.orders.find_all_by_seller(seller_id)
        revenue_orders = [order for order in orders if order.status not in NON_REVENUE_STATUSES]
        revenue = sum((Decimal(order.total_amount) for order in revenue_orders), Decimal("0"))
        average = revenue / len(revenue_orders) if revenue_orders else Decimal("0")
        return SalesAnalytics(
            total_orders=len(revenue_orders),
            total_revenue=float(revenue.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)),
            average_order_value=float(average.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)),
            pending_orders=sum(1 for order in orders if order.status == OrderStatus.PENDING),
            orders_by_status=dict(Counter(order.status.value for order in orders)),
        )
