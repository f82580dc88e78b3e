"""User-facing endpoints for complaints."""

from fastapi import APIRouter, status

from app.auth.dependencies import CurrentUser
from app.complaints.dependencies import ComplaintServiceDep
from app.complaints.schemas import (
    ComplaintCreateRequest,
    ComplaintListResponse,
    ComplaintResponse,
    ComplaintUpdateRequest,
)

router = APIRouter()


@router.post("", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
def file_complaint(
    data: ComplaintCreateRequest,
    complaint_service: ComplaintServiceDep,
    current_user: CurrentUser,
):
    """File a complaint. It starts out pending until an admin resolves it."""
    return complaint_service.create_complaint(current_user.id, data)


@router.get("/me", response_model=ComplaintListResponse)
def list_my_complaints(
    complaint_service: ComplaintServiceDep,
    current_user: CurrentUser,
):
    """Get current user's complaints, newest first."""
    complaints = complaint_service.list_user_complaints(current_user.id)
    return ComplaintListResponse(
        complaints=[ComplaintResponse.model_validate(c) for c in complaints],
        count=len(complaints),
    )


@router.get("/{complaint_id}", response_model=ComplaintResponse)
def get_complaint(
    complaint_id: int,
    complaint_service: ComplaintServiceDep,
    current_user: CurrentUser,
):
    return complaint_service.get_complaint(current_user.id, complaint_id)


@router.patch("/{complaint_id}", response_model=ComplaintResponse)
def edit_complaint(
    complaint_id: int,
    data: ComplaintUpdateRequest,
    complaint_service: ComplaintServiceDep,
    current_user: CurrentUser,
):
    """Edit a complaint. An edited complaint goes back to pending."""
    return complaint_service.update_complaint(current_user.id, complaint_id, data)


@router.delete("/{complaint_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_complaint(
    complaint_id: int,
    complaint_service: ComplaintServiceDep,
    current_user: CurrentUser,
):
    complaint_service.delete_complaint(current_user.id, complaint_id)
