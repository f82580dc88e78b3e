"""Admin endpoints for reviewing complaints."""

from fastapi import APIRouter, Query

from app.auth.dependencies import RequireAdmin
from app.complaints.dependencies import ComplaintServiceDep
from app.complaints.models import ComplaintStatus
from app.complaints.schemas import (
    ComplaintListResponse,
    ComplaintResponse,
    ComplaintStatusUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=ComplaintListResponse)
def list_all_complaints(
    complaint_service: ComplaintServiceDep,
    current_user: RequireAdmin,
    status: ComplaintStatus | None = Query(None, description="Filter by status"),
):
    """Get all users' complaints, newest first. Requires admin role."""
    complaints = complaint_service.list_all_complaints(status)
    return ComplaintListResponse(
        complaints=[ComplaintResponse.model_validate(c) for c in complaints],
        count=len(complaints),
    )


@router.patch("/{complaint_id}/status", response_model=ComplaintResponse)
def update_complaint_status(
    complaint_id: int,
    data: ComplaintStatusUpdateRequest,
    complaint_service: ComplaintServiceDep,
    current_user: RequireAdmin,
):
    """Mark a complaint resolved, or reopen it. Requires admin role."""
    return complaint_service.admin_update_status(complaint_id, data.status)
