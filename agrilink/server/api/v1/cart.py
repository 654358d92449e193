"""
Cart Endpoints.

Each user has one cart. Adding a listing already in the cart increases its
quantity.
"""

import uuid

from fastapi import APIRouter

from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.marketplace import Count
from agrilink.core.models.io.orders import CartItemAdd, CartItemUpdate, CartRead
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import CartServiceDep

router = APIRouter()


@router.get("", response_model=ApiResponse[CartRead], summary="My Cart")
async def get_cart(user: CurrentUserDep, service: CartServiceDep):
    return ApiResponse.ok(await service.get_cart(user.id))


@router.post(
    "/items",
    response_model=ApiResponse[CartRead],
    summary="Add to Cart",
    description="Add an ACTIVE listing to the cart at its current price.",
    responses={
        400: {"description": "Listing not purchasable, or quantity below the minimum order"},
        404: {"description": "Listing not found"},
    },
)
async def add_to_cart(request: CartItemAdd, user: CurrentUserDep, service: CartServiceDep):
    """
    Add an item.

    - **listing_id**: Listing to buy.
    - **quantity**: Quantity in the listing's unit; must not exceed the available stock.
    """
    return ApiResponse.ok(await service.add_to_cart(user.id, request), "Item added to cart")


@router.put("/items/{item_id}", response_model=ApiResponse[CartRead], summary="Update Cart Item")
async def update_cart_item(item_id: uuid.UUID, request: CartItemUpdate, user: CurrentUserDep, service: CartServiceDep):
    return ApiResponse.ok(await service.update_cart_item(user.id, item_id, request.quantity), "Cart updated")


@router.delete("/items/{item_id}", response_model=ApiResponse[CartRead], summary="Remove Cart Item")
async def remove_cart_item(item_id: uuid.UUID, user: CurrentUserDep, service: CartServiceDep):
    return ApiResponse.ok(await service.remove_from_cart(user.id, item_id), "Item removed from cart")


@router.delete("", response_model=ApiResponse[None], summary="Clear Cart")
async def clear_cart(user: CurrentUserDep, service: CartServiceDep):
    await service.clear_cart(user.id)
    return ApiResponse.ok(message="Cart cleared")


@router.get("/count", response_model=ApiResponse[Count], summary="Cart Item Count")
async def cart_count(user: CurrentUserDep, service: CartServiceDep):
    return ApiResponse.ok(Count(count=await service.get_cart_count(user.id)))
