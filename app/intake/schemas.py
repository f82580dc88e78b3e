"""Pydantic schemas for recycle pickups and waste submissions."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, NonNegativeFloat

from app.intake.models import IntakeStatus


# ============ Request Schemas ============

class PickupCreateRequest(BaseModel):
    materials: list[str] = Field(..., min_length=1, description="Material tags, e.g. plastic, metals")
    quantities: dict[str, NonNegativeFloat] = Field(..., description="Material tag -> weight in kg")
    payment_method: str = Field(..., min_length=1)
    pickup_date: date
    pickup_time: str = Field(..., min_length=1)
    pickup_address: str = Field(..., min_length=1)


class PickupUpdateRequest(BaseModel):
    """Reschedule a pickup. Materials are fixed once points are awarded."""

    payment_method: str | None = None
    pickup_date: date | None = None
    pickup_time: str | None = None
    pickup_address: str | None = None


class WasteCreateRequest(BaseModel):
    waste_type: str = Field(..., min_length=1)
    materials: list[str] = Field(..., min_length=1)
    quantities: dict[str, NonNegativeFloat] = Field(..., description="Material tag -> weight in kg")
    pickup_date: date
    time_slot: str = Field(..., min_length=1)
    special_instructions: str | None = None
    image_url: str | None = Field(None, description="URL returned by the image hosting service")


class WasteUpdateRequest(BaseModel):
    pickup_date: date | None = None
    time_slot: str | None = None
    special_instructions: str | None = None
    image_url: str | None = None


class IntakeStatusUpdateRequest(BaseModel):
    status: IntakeStatus


# ============ Response Schemas ============

class PickupResponse(BaseModel):
    id: int
    user_id: int
    materials: list[str]
    quantities: dict[str, float]
    total_amount: Decimal
    payment_method: str
    pickup_date: date
    pickup_time: str
    pickup_address: str
    status: IntakeStatus
    points_awarded: int
    created_at: datetime

    model_config = {"from_attributes": True}


class PickupListResponse(BaseModel):
    pickups: list[PickupResponse]
    count: int


class WasteResponse(BaseModel):
    id: int
    user_id: int
    waste_type: str
    materials: list[str]
    quantities: dict[str, float]
    pickup_date: date
    time_slot: str
    special_instructions: str | None = None
    image_url: str | None = None
    status: IntakeStatus
    points_awarded: int
    created_at: datetime

    model_config = {"from_attributes": True}


class WasteListResponse(BaseModel):
    submissions: list[WasteResponse]
    count: int
