"""Admin endpoints for the eco-points ledger."""

from fastapi import APIRouter, Query

from app.auth.dependencies import RequireAdmin
from app.points.dependencies import PointsServiceDep
from app.points.schemas import (
    PointsHistoryResponse,
    PointsTransactionResponse,
    ReconcileResponse,
)

router = APIRouter()


@router.get("/users/{user_id}/history", response_model=PointsHistoryResponse)
def get_user_points_history(
    user_id: int,
    points_service: PointsServiceDep,
    current_user: RequireAdmin,
    limit: int | None = Query(None, ge=1, le=500, description="Max entries"),
):
    """Get any user's points transactions. Requires admin role."""
    transactions = points_service.get_user_points_history(user_id, limit)
    return PointsHistoryResponse(
        transactions=[PointsTransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
    )


@router.post("/users/{user_id}/reconcile", response_model=ReconcileResponse)
def reconcile_user_points(
    user_id: int,
    points_service: PointsServiceDep,
    current_user: RequireAdmin,
):
    """
    Rebuild a user's cached balance from the transaction log.

    Use after concurrent sessions may have lost a balance update.
    Requires admin role.
    """
    points = points_service.reconcile_balance(user_id)
    return ReconcileResponse(user_id=user_id, points=points)
