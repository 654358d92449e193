"""
Payment Endpoints.

Payments go through the mock gateway, which settles synchronously. A
successful payment confirms the order; a refund marks it REFUNDED.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, status

from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.orders import PaymentCreate, PaymentRead, RefundRequest
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import OrderServiceDep, PaymentServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[PaymentRead],
    status_code=status.HTTP_201_CREATED,
    summary="Pay for Order",
    description="Pay a PENDING order in full. The order moves to CONFIRMED.",
    responses={
        400: {"description": "Order not payable, or amount does not match the order total"},
        403: {"description": "Caller is not the buyer"},
    },
)
async def process_payment(request: PaymentCreate, user: CurrentUserDep, service: PaymentServiceDep):
    """
    Process a payment.

    - **order_id**: Order being paid.
    - **amount**: Must equal the order's total amount.
    - **payment_method**: Gateway method; only MOCK settles.
    """
    payment = await service.process_payment(user.id, request)
    return ApiResponse.ok(PaymentRead.model_validate(payment), "Payment processed successfully")


@router.get(
    "/{payment_id}",
    response_model=ApiResponse[PaymentRead],
    summary="Get Payment",
    responses={404: {"description": "Payment not found"}},
)
async def get_payment(payment_id: uuid.UUID, user: CurrentUserDep, service: PaymentServiceDep, orders: OrderServiceDep):
    payment = await service.get_payment(payment_id)
    await orders.get_order(payment.order_id, user.id)
    return ApiResponse.ok(PaymentRead.model_validate(payment))


@router.get("/order/{order_id}", response_model=ApiResponse[List[PaymentRead]], summary="Order Payments")
async def order_payments(order_id: uuid.UUID, user: CurrentUserDep, service: PaymentServiceDep, orders: OrderServiceDep):
    await orders.get_order(order_id, user.id)
    payments = await service.get_payments_for_order(order_id)
    return ApiResponse.ok([PaymentRead.model_validate(p) for p in payments])


@router.post(
    "/{payment_id}/refund",
    response_model=ApiResponse[PaymentRead],
    summary="Refund Payment",
    description="Refund a COMPLETED payment. Allowed for the payer and the order's seller.",
)
async def refund_payment(
    payment_id: uuid.UUID,
    user: CurrentUserDep,
    service: PaymentServiceDep,
    request: Optional[RefundRequest] = None,
):
    payment = await service.refund_payment(payment_id, user.id, request.reason if request else None)
    return ApiResponse.ok(PaymentRead.model_validate(payment), "Payment refunded")
