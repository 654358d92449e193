"""
Payments against orders through the built-in mock gateway.

The mock gateway approves every request that passes validation, so a payment
is recorded as COMPLETED immediately.
"""

import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database import utc_now
from agrilink.core.database.entities import Payment
from agrilink.core.database.repositories import PaymentRepository
from agrilink.core.exceptions import BadRequestException, ForbiddenException, ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import OrderStatus, PaymentStatus
from agrilink.core.models.io.orders import PaymentCreate

from .orders import OrderService

logger = get_logger(__name__)

PAYABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED)


def generate_transaction_id() -> str:
    return f"TXN-{uuid.uuid4().hex[:12].upper()}"


class PaymentService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.payments = PaymentRepository(session)
        self.order_service = OrderService(session)

    async def process_payment(self, payer_id: uuid.UUID, request: PaymentCreate) -> Payment:
        order = await self.order_service.get_order_entity(request.order_id)
        if order.buyer_id != payer_id:
            raise ForbiddenException("You can only pay for your own orders")
        if order.status not in PAYABLE_STATUSES:
            raise BadRequestException(f"Cannot process payment for order in status {order.status.value}")
        if request.amount != order.total_amount:
            raise BadRequestException("Payment amount does not match order total")

        payment = await self.payments.create(
            Payment(
                order_id=order.id,
                payer_id=payer_id,
                amount=request.amount,
                currency=order.currency,
                payment_method=request.payment_method,
                status=PaymentStatus.COMPLETED,
                transaction_id=generate_transaction_id(),
                paid_at=utc_now(),
            )
        )
        if order.status == OrderStatus.PENDING:
            await self.order_service.apply_status(order, OrderStatus.CONFIRMED, payer_id, "Payment received")
        await self.session.commit()
        logger.info(
            f"Payment {payment.transaction_id} of {payment.amount} completed for order {order.order_number}",
            extra={"payment_id": str(payment.id), "order_id": str(order.id)},
        )
        return payment

    async def get_payment(self, payment_id: uuid.UUID) -> Payment:
        payment = await self.payments.get_by_id(payment_id)
        if payment is None:
            raise ResourceNotFoundException("Payment", "id", payment_id)
        return payment

    async def get_payments_for_order(self, order_id: uuid.UUID) -> List[Payment]:
        return await self.payments.find_by_order(order_id)

    async def refund_payment(self, payment_id: uuid.UUID, user_id: uuid.UUID, reason: Optional[str]) -> Payment:
        payment = await self.get_payment(payment_id)
        order = await self.order_service.get_order_entity(payment.order_id)
        if user_id not in (payment.payer_id, order.seller_id):
            raise ForbiddenException("You are not allowed to refund this payment")
        if payment.status != PaymentStatus.COMPLETED:
            raise BadRequestException("Can only refund completed payments")

        payment.status = PaymentStatus.REFUNDED
        payment.refund_reason = reason
        payment.refunded_at = utc_now()
        await self.payments.update(payment)
        await self.order_service.apply_status(order, OrderStatus.REFUNDED, user_id, reason or "Payment refunded")
        await self.session.commit()
        logger.info(f"Payment {payment_id} refunded", extra={"payment_id": str(payment_id)})
        return payment
