"""User-facing endpoints for eco-points."""

from decimal import Decimal

from fastapi import APIRouter, Query

from app.auth.dependencies import CurrentUser
from app.points.dependencies import PointsServiceDep
from app.points.rules import POINT_VALUE_LKR, calculate_points_discount, points_for_discount
from app.points.schemas import (
    DiscountQuoteResponse,
    PointsBalanceResponse,
    PointsHistoryResponse,
    PointsTransactionResponse,
)

router = APIRouter()


@router.get("/me", response_model=PointsBalanceResponse)
def get_my_points(
    current_user: CurrentUser,
    points_service: PointsServiceDep,
):
    """Get current user's eco-points balance."""
    points = points_service.get_user_points(current_user.id)
    return PointsBalanceResponse(
        user_id=current_user.id,
        points=points,
        value_lkr=points * POINT_VALUE_LKR,
    )


@router.get("/me/history", response_model=PointsHistoryResponse)
def get_my_points_history(
    current_user: CurrentUser,
    points_service: PointsServiceDep,
    limit: int | None = Query(None, ge=1, le=500, description="Max entries"),
):
    """Get current user's points transactions, newest first."""
    transactions = points_service.get_user_points_history(current_user.id, limit)
    return PointsHistoryResponse(
        transactions=[PointsTransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
    )


@router.get("/discount", response_model=DiscountQuoteResponse)
def quote_discount(
    current_user: CurrentUser,
    points_service: PointsServiceDep,
    amount: Decimal = Query(..., gt=0, description="Pre-discount purchase total in LKR"),
):
    """
    Quote the maximum points discount for a purchase amount.

    The discount is the smaller of the balance's LKR value and
    50% of the purchase amount.
    """
    points = points_service.get_user_points(current_user.id)
    max_discount = calculate_points_discount(points, amount)
    return DiscountQuoteResponse(
        purchase_amount=amount,
        available_points=points,
        max_discount=max_discount,
        points_required=points_for_discount(max_discount),
    )
