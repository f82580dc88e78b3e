"""API endpoints for the fertilizer cart."""

from decimal import Decimal

from fastapi import APIRouter, Response, status

from app.auth.dependencies import CurrentUser
from app.cart.dependencies import CartServiceDep
from app.cart.schemas import (
    AddToCartRequest,
    CartItemResponse,
    CartResponse,
    CartSummaryResponse,
    ClearCartResponse,
    UpdateCartItemRequest,
)
from app.points.dependencies import PointsServiceDep
from app.points.rules import calculate_points_discount, points_for_discount

router = APIRouter()


@router.get("", response_model=CartResponse)
def get_my_cart(
    cart_service: CartServiceDep,
    current_user: CurrentUser,
):
    """Get current user's cart items, most recently added first."""
    items = cart_service.get_user_cart_items(current_user.id)
    return CartResponse(
        items=[CartItemResponse.model_validate(i) for i in items],
        count=len(items),
        total_amount=sum((i.total_amount for i in items), Decimal("0.00")),
    )


@router.get("/summary", response_model=CartSummaryResponse)
def get_cart_summary(
    cart_service: CartServiceDep,
    points_service: PointsServiceDep,
    current_user: CurrentUser,
):
    """
    Get cart total and the maximum points discount for checkout.

    The discount is capped at 50% of the cart total and at
    LKR 3.00 per available point.
    """
    items = cart_service.get_user_cart_items(current_user.id)
    total = sum((i.total_amount for i in items), Decimal("0.00"))
    points = points_service.get_user_points(current_user.id)
    max_discount = calculate_points_discount(points, total)
    return CartSummaryResponse(
        total_amount=total,
        item_count=len(items),
        available_points=points,
        max_discount=max_discount,
        points_required=points_for_discount(max_discount),
    )


@router.post(
    "/items",
    response_model=CartItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_to_cart(
    data: AddToCartRequest,
    cart_service: CartServiceDep,
    current_user: CurrentUser,
):
    """Add a fertilizer to the cart at its current catalog price."""
    return cart_service.add_to_cart(current_user.id, data.fertilizer_id, data.quantity)


@router.patch(
    "/items/{cart_item_id}",
    response_model=CartItemResponse,
    responses={204: {"description": "Item removed because quantity was zero or less"}},
)
def update_cart_item(
    cart_item_id: int,
    data: UpdateCartItemRequest,
    cart_service: CartServiceDep,
    current_user: CurrentUser,
):
    """Change an item's quantity. Zero or less removes it."""
    item = cart_service.update_cart_item_quantity(current_user.id, cart_item_id, data.quantity)
    if item is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return item


@router.delete("/items/{cart_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_cart(
    cart_item_id: int,
    cart_service: CartServiceDep,
    current_user: CurrentUser,
):
    cart_service.remove_from_cart(current_user.id, cart_item_id)


@router.delete("", response_model=ClearCartResponse)
def clear_cart(
    cart_service: CartServiceDep,
    current_user: CurrentUser,
):
    """Remove every item from the cart."""
    return ClearCartResponse(removed=cart_service.clear_cart(current_user.id))
