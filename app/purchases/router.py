"""API endpoints for checkout and the user's fertilizer purchases."""

from decimal import Decimal

from fastapi import APIRouter, status

from app.auth.dependencies import CurrentUser
from app.purchases.dependencies import CheckoutServiceDep
from app.purchases.schemas import (
    BuyNowRequest,
    CheckoutRequest,
    CheckoutResponse,
    CustomerInfo,
    PurchaseListResponse,
    PurchaseResponse,
)
from app.purchases.service import CheckoutService

router = APIRouter()


def _customer_info(data: CheckoutRequest) -> CustomerInfo:
    return CustomerInfo(**data.model_dump(include=set(CustomerInfo.model_fields)))


def _checkout_response(
    checkout_service: CheckoutService, user_id: int, purchase_ids: list[int]
) -> CheckoutResponse:
    purchases = checkout_service.get_purchases_by_ids(user_id, purchase_ids)
    return CheckoutResponse(
        checkout_id=purchases[0].checkout_id,
        purchase_ids=purchase_ids,
        purchases=[PurchaseResponse.model_validate(p) for p in purchases],
        original_amount=sum((p.original_amount for p in purchases), Decimal("0.00")),
        points_discount=sum((p.points_discount for p in purchases), Decimal("0.00")),
        total_amount=sum((p.total_amount for p in purchases), Decimal("0.00")),
        points_balance=checkout_service.points.get_user_points(user_id),
    )


@router.post(
    "/checkout",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    data: CheckoutRequest,
    checkout_service: CheckoutServiceDep,
    current_user: CurrentUser,
):
    """
    Purchase every item in the cart.

    - Creates one pending purchase per cart item
    - Spreads the points discount across items in proportion to their totals
    - Debits the points used and empties the cart

    A discount above the balance value or 50% of the cart total is
    reduced to the allowed maximum.
    """
    purchase_ids = checkout_service.purchase_cart_items(
        current_user.id, _customer_info(data), data.points_discount
    )
    return _checkout_response(checkout_service, current_user.id, purchase_ids)


@router.post(
    "/buy",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
def buy_now(
    data: BuyNowRequest,
    checkout_service: CheckoutServiceDep,
    current_user: CurrentUser,
):
    """
    Buy a single catalog item without going through the cart.

    The points discount is capped the same way as at checkout, against
    this item's total. The cart is not changed.
    """
    purchase_id = checkout_service.purchase_fertilizer(
        current_user.id,
        data.fertilizer_id,
        data.quantity,
        _customer_info(data),
        data.points_discount,
    )
    return _checkout_response(checkout_service, current_user.id, [purchase_id])


@router.get("/me", response_model=PurchaseListResponse)
def get_my_purchases(
    checkout_service: CheckoutServiceDep,
    current_user: CurrentUser,
):
    """Get current user's purchases, newest first."""
    purchases = checkout_service.get_user_purchases(current_user.id)
    return PurchaseListResponse(
        purchases=[PurchaseResponse.model_validate(p) for p in purchases],
        count=len(purchases),
    )


@router.get("/{purchase_id}", response_model=PurchaseResponse)
def get_purchase(
    purchase_id: int,
    checkout_service: CheckoutServiceDep,
    current_user: CurrentUser,
):
    return checkout_service.get_purchase(current_user.id, purchase_id)


@router.post("/{purchase_id}/cancel", response_model=PurchaseResponse)
def cancel_purchase(
    purchase_id: int,
    checkout_service: CheckoutServiceDep,
    current_user: CurrentUser,
):
    """Cancel a pending purchase. Points spent on its discount are not returned."""
    return checkout_service.cancel_purchase(current_user.id, purchase_id)
