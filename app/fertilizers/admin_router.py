"""Admin endpoints for managing the fertilizer catalog."""

from fastapi import APIRouter, status

from app.auth.dependencies import RequireAdmin
from app.fertilizers.dependencies import FertilizerServiceDep
from app.fertilizers.schemas import (
    FertilizerCreateRequest,
    FertilizerListResponse,
    FertilizerResponse,
    FertilizerUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=FertilizerListResponse)
def list_all_fertilizers(
    fertilizer_service: FertilizerServiceDep,
    current_user: RequireAdmin,
):
    """Get every fertilizer, including unavailable ones. Requires admin role."""
    fertilizers = fertilizer_service.list_fertilizers(include_unavailable=True)
    return FertilizerListResponse(
        fertilizers=[FertilizerResponse.model_validate(f) for f in fertilizers],
        count=len(fertilizers),
    )


@router.post("", response_model=FertilizerResponse, status_code=status.HTTP_201_CREATED)
def add_fertilizer(
    data: FertilizerCreateRequest,
    fertilizer_service: FertilizerServiceDep,
    current_user: RequireAdmin,
):
    return fertilizer_service.add_fertilizer(data)


@router.patch("/{fertilizer_id}", response_model=FertilizerResponse)
def update_fertilizer(
    fertilizer_id: int,
    data: FertilizerUpdateRequest,
    fertilizer_service: FertilizerServiceDep,
    current_user: RequireAdmin,
):
    return fertilizer_service.update_fertilizer(fertilizer_id, data)


@router.delete("/{fertilizer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_fertilizer(
    fertilizer_id: int,
    fertilizer_service: FertilizerServiceDep,
    current_user: RequireAdmin,
):
    fertilizer_service.delete_fertilizer(fertilizer_id)
