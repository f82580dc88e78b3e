"""User-facing endpoints for recycle pickups and waste submissions."""

from fastapi import APIRouter, status

from app.auth.dependencies import CurrentUser
from app.intake.dependencies import IntakeServiceDep
from app.intake.schemas import (
    PickupCreateRequest,
    PickupListResponse,
    PickupResponse,
    PickupUpdateRequest,
    WasteCreateRequest,
    WasteListResponse,
    WasteResponse,
    WasteUpdateRequest,
)

router = APIRouter()


# ========== Recycle pickups ==========

@router.post(
    "/pickups",
    response_model=PickupResponse,
    status_code=status.HTTP_201_CREATED,
)
def schedule_pickup(
    data: PickupCreateRequest,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    """
    Schedule a recycle pickup.

    - Payout is computed from the per-kg price of each material
    - Eco-points plus a 20% scheduling bonus are credited after saving
    - A points failure never fails the pickup; `points_awarded` stays 0
    """
    return intake_service.create_pickup(current_user.id, data)


@router.get("/pickups", response_model=PickupListResponse)
def list_my_pickups(
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    """Get current user's pickups, newest first."""
    pickups = intake_service.list_user_pickups(current_user.id)
    return PickupListResponse(
        pickups=[PickupResponse.model_validate(p) for p in pickups],
        count=len(pickups),
    )


@router.get("/pickups/{pickup_id}", response_model=PickupResponse)
def get_pickup(
    pickup_id: int,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    return intake_service.get_pickup(current_user.id, pickup_id)


@router.patch("/pickups/{pickup_id}", response_model=PickupResponse)
def reschedule_pickup(
    pickup_id: int,
    data: PickupUpdateRequest,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    """Change date, time, address or payment method of a scheduled pickup."""
    return intake_service.update_pickup(current_user.id, pickup_id, data)


@router.post("/pickups/{pickup_id}/cancel", response_model=PickupResponse)
def cancel_pickup(
    pickup_id: int,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    """Cancel a scheduled pickup. Points already credited are not reversed."""
    return intake_service.cancel_pickup(current_user.id, pickup_id)


@router.delete("/pickups/{pickup_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pickup(
    pickup_id: int,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    intake_service.delete_pickup(current_user.id, pickup_id)


# ========== Waste submissions ==========

@router.post(
    "/waste",
    response_model=WasteResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_waste(
    data: WasteCreateRequest,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    """
    Submit general waste for collection.

    Eco-points are credited after saving; a points failure never
    fails the submission.
    """
    return intake_service.create_waste_submission(current_user.id, data)


@router.get("/waste", response_model=WasteListResponse)
def list_my_waste(
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    """Get current user's waste submissions, newest first."""
    submissions = intake_service.list_user_waste(current_user.id)
    return WasteListResponse(
        submissions=[WasteResponse.model_validate(s) for s in submissions],
        count=len(submissions),
    )


@router.get("/waste/{waste_id}", response_model=WasteResponse)
def get_waste_submission(
    waste_id: int,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    return intake_service.get_waste_submission(current_user.id, waste_id)


@router.patch("/waste/{waste_id}", response_model=WasteResponse)
def reschedule_waste_submission(
    waste_id: int,
    data: WasteUpdateRequest,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    return intake_service.update_waste_submission(current_user.id, waste_id, data)


@router.post("/waste/{waste_id}/cancel", response_model=WasteResponse)
def cancel_waste_submission(
    waste_id: int,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    return intake_service.cancel_waste_submission(current_user.id, waste_id)


@router.delete("/waste/{waste_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_waste_submission(
    waste_id: int,
    intake_service: IntakeServiceDep,
    current_user: CurrentUser,
):
    intake_service.delete_waste_submission(current_user.id, waste_id)
