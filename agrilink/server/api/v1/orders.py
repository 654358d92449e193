"""
Order Endpoints.

Checkout, direct orders and the order lifecycle:

    PENDING -> CONFIRMED -> PROCESSING -> SHIPPED -> DELIVERED -> COMPLETED

Sellers drive the lifecycle; buyers and sellers can cancel while the order
is PENDING or CONFIRMED.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Query, status

from agrilink.core.models.domain.enums import OrderStatus
from agrilink.core.models.io import ApiResponse, PageResponse
from agrilink.core.models.io.orders import (
    CancelOrderRequest,
    CheckoutRequest,
    OrderCreate,
    OrderRead,
    OrderStatusHistoryRead,
    OrderStatusUpdate,
    SalesAnalytics,
)
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import OrderServiceDep

from .params import DEFAULT_PAGE, DEFAULT_SIZE, PageParam, SizeParam

router = APIRouter()


@router.post(
    "/checkout",
    response_model=ApiResponse[OrderRead],
    status_code=status.HTTP_201_CREATED,
    summary="Checkout Cart",
    description="Turn the caller's cart into a single order, reserve stock and clear the cart.",
    response_description="The placed order.",
    responses={
        400: {"description": "Cart is empty, or a listing no longer has enough stock"},
    },
)
async def checkout(request: CheckoutRequest, user: CurrentUserDep, service: OrderServiceDep):
    """
    Checkout.

    Pricing:

    - **subtotal**: Sum of the item subtotals.
    - **shipping_cost**: Free when the subtotal reaches the free-shipping threshold, otherwise a flat fee.
    - **tax_amount**: Tax rate applied to the subtotal.
    - **total_amount**: subtotal + shipping + tax.
    """
    order = await service.checkout(user.id, request)
    return ApiResponse.ok(order, "Order placed successfully")


@router.post(
    "",
    response_model=ApiResponse[OrderRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Order",
    description="Place an order for explicit listing quantities without going through the cart.",
)
async def create_order(request: OrderCreate, user: CurrentUserDep, service: OrderServiceDep):
    order = await service.create_order(user.id, request)
    return ApiResponse.ok(order, "Order placed successfully")


@router.get(
    "/my",
    response_model=ApiResponse[PageResponse[OrderRead]],
    summary="My Orders",
    description="Orders placed by the caller, newest first.",
)
async def my_orders(
    user: CurrentUserDep,
    service: OrderServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    return ApiResponse.ok(PageResponse.from_page(await service.get_buyer_orders(user.id, page, size)))


@router.get(
    "/seller",
    response_model=ApiResponse[PageResponse[OrderRead]],
    summary="Seller Orders",
    description="Orders received by the caller as seller, newest first, optionally filtered by status.",
)
async def seller_orders(
    user: CurrentUserDep,
    service: OrderServiceDep,
    order_status: Optional[OrderStatus] = Query(default=None, alias="status"),
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    if order_status is not None:
        result = await service.get_seller_orders_by_status(user.id, order_status, page, size)
    else:
        result = await service.get_seller_orders(user.id, page, size)
    return ApiResponse.ok(PageResponse.from_page(result))


@router.get(
    "/seller/analytics",
    response_model=ApiResponse[SalesAnalytics],
    summary="Sales Analytics",
    description="Order counts, revenue, status breakdown and top products for the caller as seller.",
)
async def seller_analytics(user: CurrentUserDep, service: OrderServiceDep):
    return ApiResponse.ok(await service.get_seller_sales_analytics(user.id))


@router.get(
    "/number/{order_number}",
    response_model=ApiResponse[OrderRead],
    summary="Get Order by Number",
    responses={
        403: {"description": "Caller is neither buyer nor seller"},
        404: {"description": "Order not found"},
    },
)
async def get_order_by_number(order_number: str, user: CurrentUserDep, service: OrderServiceDep):
    return ApiResponse.ok(await service.get_order_by_number(order_number, user.id))


@router.get(
    "/{order_id}",
    response_model=ApiResponse[OrderRead],
    summary="Get Order",
    responses={
        403: {"description": "Caller is neither buyer nor seller"},
        404: {"description": "Order not found"},
    },
)
async def get_order(order_id: uuid.UUID, user: CurrentUserDep, service: OrderServiceDep):
    return ApiResponse.ok(await service.get_order(order_id, user.id))


@router.patch(
    "/{order_id}/status",
    response_model=ApiResponse[OrderRead],
    summary="Update Order Status",
    description="Set an order's status. Only the seller may, except CANCELLED which the buyer may also set.",
)
async def update_order_status(
    order_id: uuid.UUID, request: OrderStatusUpdate, user: CurrentUserDep, service: OrderServiceDep
):
    order = await service.update_order_status(order_id, user.id, request.status, request.notes)
    return ApiResponse.ok(order, "Order status updated")


@router.post(
    "/{order_id}/cancel",
    response_model=ApiResponse[OrderRead],
    summary="Cancel Order",
    description="Cancel a PENDING or CONFIRMED order and return its quantities to the listings.",
    responses={400: {"description": "Order can no longer be cancelled"}},
)
async def cancel_order(
    order_id: uuid.UUID,
    user: CurrentUserDep,
    service: OrderServiceDep,
    request: Optional[CancelOrderRequest] = None,
):
    order = await service.cancel_order(order_id, user.id, request.reason if request else None)
    return ApiResponse.ok(order, "Order cancelled")


@router.post("/{order_id}/confirm", response_model=ApiResponse[OrderRead], summary="Confirm Order")
async def confirm_order(order_id: uuid.UUID, user: CurrentUserDep, service: OrderServiceDep):
    return ApiResponse.ok(await service.confirm_order(order_id, user.id), "Order confirmed")


@router.post("/{order_id}/ship", response_model=ApiResponse[OrderRead], summary="Ship Order")
async def ship_order(order_id: uuid.UUID, user: CurrentUserDep, service: OrderServiceDep):
    return ApiResponse.ok(await service.ship_order(order_id, user.id), "Order shipped")


@router.post("/{order_id}/deliver", response_model=ApiResponse[OrderRead], summary="Deliver Order")
async def deliver_order(order_id: uuid.UUID, user: CurrentUserDep, service: OrderServiceDep):
    return ApiResponse.ok(await service.deliver_order(order_id, user.id), "Order delivered")


@router.post("/{order_id}/complete", response_model=ApiResponse[OrderRead], summary="Complete Order")
async def complete_order(order_id: uuid.UUID, user: CurrentUserDep, service: OrderServiceDep):
    return ApiResponse.ok(await service.complete_order(order_id, user.id), "Order completed")


@router.get(
    "/{order_id}/history",
    response_model=ApiResponse[List[OrderStatusHistoryRead]],
    summary="Order Status History",
    description="Status changes of an order, oldest first.",
)
async def order_history(order_id: uuid.UUID, user: CurrentUserDep, service: OrderServiceDep):
    history = await service.get_order_history(order_id, user.id)
    return ApiResponse.ok([OrderStatusHistoryRead.model_validate(h) for h in history])
