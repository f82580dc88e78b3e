"""Admin endpoints for fertilizer purchases."""

from fastapi import APIRouter, Query, status

from app.auth.dependencies import RequireAdmin
from app.purchases.dependencies import PurchaseAdminServiceDep
from app.purchases.models import PurchaseStatus
from app.purchases.schemas import (
    PurchaseListResponse,
    PurchaseResponse,
    PurchaseStatusUpdateRequest,
    PurchaseUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=PurchaseListResponse)
def list_all_purchases(
    admin_service: PurchaseAdminServiceDep,
    current_user: RequireAdmin,
    status: PurchaseStatus | None = Query(None, description="Filter by status"),
):
    """Get all users' purchases, newest first. Requires admin role."""
    purchases = admin_service.list_all_purchases(status)
    return PurchaseListResponse(
        purchases=[PurchaseResponse.model_validate(p) for p in purchases],
        count=len(purchases),
    )


@router.patch("/{purchase_id}/status", response_model=PurchaseResponse)
def update_purchase_status(
    purchase_id: int,
    data: PurchaseStatusUpdateRequest,
    admin_service: PurchaseAdminServiceDep,
    current_user: RequireAdmin,
):
    """
    Change a purchase's status. Requires admin role.

    Allowed: pending -> confirmed or cancelled, confirmed -> delivered.
    Anything else returns 409 unless `override` is set.
    """
    return admin_service.update_purchase_status(purchase_id, data.status, data.override)


@router.patch("/{purchase_id}", response_model=PurchaseResponse)
def update_purchase(
    purchase_id: int,
    data: PurchaseUpdateRequest,
    admin_service: PurchaseAdminServiceDep,
    current_user: RequireAdmin,
):
    """Correct delivery details of a purchase. Requires admin role."""
    return admin_service.update_purchase(purchase_id, data)


@router.delete("/{purchase_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase(
    purchase_id: int,
    admin_service: PurchaseAdminServiceDep,
    current_user: RequireAdmin,
):
    """Delete a purchase record. Requires admin role."""
    admin_service.delete_purchase(purchase_id)
