"""Public endpoints for the fertilizer catalog."""

from fastapi import APIRouter

from app.fertilizers.dependencies import FertilizerServiceDep
from app.fertilizers.schemas import FertilizerListResponse, FertilizerResponse

router = APIRouter()


@router.get("", response_model=FertilizerListResponse)
def list_fertilizers(fertilizer_service: FertilizerServiceDep):
    """Get fertilizers available for purchase, newest first."""
    fertilizers = fertilizer_service.list_fertilizers()
    return FertilizerListResponse(
        fertilizers=[FertilizerResponse.model_validate(f) for f in fertilizers],
        count=len(fertilizers),
    )


@router.get("/{fertilizer_id}", response_model=FertilizerResponse)
def get_fertilizer(fertilizer_id: int, fertilizer_service: FertilizerServiceDep):
    return fertilizer_service.get_fertilizer(fertilizer_id)
