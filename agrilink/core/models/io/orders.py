"""
Order service I/O models: cart, checkout, orders and payments.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from agrilink.core.models.domain.enums import OrderStatus, PaymentMethod, PaymentStatus


class CartItemAdd(BaseModel):
    listing_id: uuid.UUID
    quantity: Decimal = Field(gt=0)


class CartItemUpdate(BaseModel):
    quantity: Decimal = Field(description="A quantity of zero or less removes the item")


class CartItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    listing_id: uuid.UUID
    seller_id: uuid.UUID
    listing_title: str
    quantity: float
    unit: str
    unit_price: float
    subtotal: float
    image_url: Optional[str] = None


class CartRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    items: List[CartItemRead] = Field(default_factory=list)
    total_items: int = 0
    total_amount: float = 0.0


class ShippingDetails(BaseModel):
    shipping_address: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_state: Optional[str] = None
    shipping_postal_code: Optional[str] = None
    shipping_phone: Optional[str] = None
    notes: Optional[str] = None


class CheckoutRequest(ShippingDetails):
    """Turns the caller's cart into an order."""


class OrderItemCreate(BaseModel):
    listing_id: uuid.UUID
    quantity: Decimal = Field(gt=0)


class OrderCreate(ShippingDetails):
    items: List[OrderItemCreate] = Field(min_length=1)


class OrderItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    listing_id: uuid.UUID
    seller_id: uuid.UUID
    listing_title: str
    quantity: float
    unit: str
    unit_price: float
    subtotal: float


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    buyer_id: uuid.UUID
    seller_id: uuid.UUID
    status: OrderStatus
    subtotal: float
    shipping_cost: float
    tax_amount: float
    total_amount: float
    currency: str
    shipping_address: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_state: Optional[str] = None
    shipping_postal_code: Optional[str] = None
    shipping_phone: Optional[str] = None
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    items: List[OrderItemRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    notes: Optional[str] = None


class CancelOrderRequest(BaseModel):
    reason: Optional[str] = None


class OrderStatusHistoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    status: OrderStatus
    notes: Optional[str] = None
    changed_by: Optional[uuid.UUID] = None
    created_at: datetime


class SalesAnalytics(BaseModel):
    total_orders: int = 0
    total_revenue: float = 0.0
    average_order_value: float = 0.0
    pending_orders: int = 0
    orders_by_status: Dict[str, int] = Field(default_factory=dict)


class PaymentCreate(BaseModel):
    order_id: uuid.UUID
    amount: Decimal = Field(gt=0)
    payment_method: PaymentMethod = PaymentMethod.MOCK


class RefundRequest(BaseModel):
    reason: Optional[str] = None


class PaymentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_id: uuid.UUID
    payer_id: uuid.UUID
    amount: float
    currency: str
    payment_method: PaymentMethod
    status: PaymentStatus
    transaction_id: Optional[str] = None
    failure_reason: Optional[str] = None
    refund_reason: Optional[str] = None
    paid_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    created_at: datetime
