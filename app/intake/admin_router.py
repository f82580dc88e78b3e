"""Admin endpoints for pickup and waste schedules."""

from fastapi import APIRouter, Query

from app.auth.dependencies import RequireAdmin
from app.intake.dependencies import IntakeServiceDep
from app.intake.models import IntakeStatus
from app.intake.schemas import (
    IntakeStatusUpdateRequest,
    PickupListResponse,
    PickupResponse,
    WasteListResponse,
    WasteResponse,
)

router = APIRouter()


@router.get("/pickups", response_model=PickupListResponse)
def list_all_pickups(
    intake_service: IntakeServiceDep,
    current_user: RequireAdmin,
    status: IntakeStatus | None = Query(None, description="Filter by status"),
):
    """Get all users' pickups, newest first. Requires admin role."""
    pickups = intake_service.list_all_pickups(status)
    return PickupListResponse(
        pickups=[PickupResponse.model_validate(p) for p in pickups],
        count=len(pickups),
    )


@router.patch("/pickups/{pickup_id}/status", response_model=PickupResponse)
def update_pickup_status(
    pickup_id: int,
    data: IntakeStatusUpdateRequest,
    intake_service: IntakeServiceDep,
    current_user: RequireAdmin,
):
    """Set a pickup's status. Requires admin role."""
    return intake_service.admin_update_pickup_status(pickup_id, data.status)


@router.get("/waste", response_model=WasteListResponse)
def list_all_waste(
    intake_service: IntakeServiceDep,
    current_user: RequireAdmin,
    status: IntakeStatus | None = Query(None, description="Filter by status"),
):
    """Get all users' waste submissions, newest first. Requires admin role."""
    submissions = intake_service.list_all_waste(status)
    return WasteListResponse(
        submissions=[WasteResponse.model_validate(s) for s in submissions],
        count=len(submissions),
    )


@router.patch("/waste/{waste_id}/status", response_model=WasteResponse)
def update_waste_status(
    waste_id: int,
    data: IntakeStatusUpdateRequest,
    intake_service: IntakeServiceDep,
    current_user: RequireAdmin,
):
    """Set a waste submission's status. Requires admin role."""
    return intake_service.admin_update_waste_status(waste_id, data.status)
