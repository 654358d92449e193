"""
Order service entity models.

Covers the shopping cart, placed orders with their line items and status
history, and the payments recorded against orders.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import DateTime, Field, Text

from agrilink.core.models.domain.enums import OrderStatus, PaymentMethod, PaymentStatus

from ..base import Base, TimestampedBase, utc_now


class Cart(TimestampedBase, table=True):
    """One cart per user, created lazily.

    Table: carts
    """

    __tablename__ = "carts"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(unique=True, index=True)


class CartItem(TimestampedBase, table=True):
    """A listing in a cart, priced at the time it was added.

    Table: cart_items
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "listing_id", name="uq_cart_items_cart_listing"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    cart_id: uuid.UUID = Field(foreign_key="carts.id", index=True)
    listing_id: uuid.UUID
    seller_id: uuid.UUID
    listing_title: str = Field(max_length=255)
    quantity: Decimal = Field(max_digits=12, decimal_places=2)
    unit: str = Field(default="KG", max_length=16)
    unit_price: Decimal = Field(max_digits=12, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=1024)

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price


class Order(TimestampedBase, table=True):
    """A placed order.

    Table: orders
    """

    __tablename__ = "orders"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    order_number: str = Field(max_length=32, unique=True, index=True)
    buyer_id: uuid.UUID = Field(index=True)
    seller_id: uuid.UUID = Field(index=True)
    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)

    subtotal: Decimal = Field(max_digits=12, decimal_places=2)
    shipping_cost: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    tax_amount: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    total_amount: Decimal = Field(max_digits=12, decimal_places=2)
    currency: str = Field(default="USD", max_length=3)

    shipping_address: Optional[str] = Field(default=None, sa_type=Text)
    shipping_city: Optional[str] = Field(default=None, max_length=128)
    shipping_state: Optional[str] = Field(default=None, max_length=128)
    shipping_postal_code: Optional[str] = Field(default=None, max_length=20)
    shipping_phone: Optional[str] = Field(default=None, max_length=32)

    notes: Optional[str] = Field(default=None, sa_type=Text)
    cancellation_reason: Optional[str] = Field(default=None, sa_type=Text)

    confirmed_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    shipped_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    delivered_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    cancelled_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Order(number={self.order_number}, status={self.status}, total={self.total_amount})"


class OrderItem(Base, table=True):
    """A priced line of an order.

    Table: order_items
    """

    __tablename__ = "order_items"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    order_id: uuid.UUID = Field(foreign_key="orders.id", index=True)
    listing_id: uuid.UUID
    seller_id: uuid.UUID
    listing_title: str = Field(max_length=255)
    quantity: Decimal = Field(max_digits=12, decimal_places=2)
    unit: str = Field(default="KG", max_length=16)
    unit_price: Decimal = Field(max_digits=12, decimal_places=2)
    subtotal: Decimal = Field(max_digits=12, decimal_places=2)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class OrderStatusHistory(Base, table=True):
    """Audit trail of order status transitions.

    Table: order_status_history
    """

    __tablename__ = "order_status_history"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    order_id: uuid.UUID = Field(foreign_key="orders.id", index=True)
    status: OrderStatus
    notes: Optional[str] = Field(default=None, sa_type=Text)
    changed_by: Optional[uuid.UUID] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class Payment(TimestampedBase, table=True):
    """A payment attempt against an order.

    Table: payments
    """

    __tablename__ = "payments"
    __table_args__ = ({"extend_existing": True},)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    order_id: uuid.UUID = Field(foreign_key="orders.id", index=True)
    payer_id: uuid.UUID = Field(index=True)
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    currency: str = Field(default="USD", max_length=3)
    payment_method: PaymentMethod = Field(default=PaymentMethod.MOCK)
    status: PaymentStatus = Field(default=PaymentStatus.PENDING, index=True)
    transaction_id: Optional[str] = Field(default=None, max_length=64, unique=True)
    failure_reason: Optional[str] = Field(default=None, sa_type=Text)
    refund_reason: Optional[str] = Field(default=None, sa_type=Text)
    paid_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    refunded_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    def __repr__(self) -> str:
        return f"Payment(id={self.id}, status={self.status}, amount={self.amount})"
