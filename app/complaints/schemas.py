"""Pydantic schemas for complaints."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.complaints.models import ComplaintStatus


# ============ Request Schemas ============

class ComplaintCreateRequest(BaseModel):
    complaint: str = Field(..., min_length=1)
    image_url: str | None = Field(None, description="URL returned by the image hosting service")

    # Whitespace-only text fails min_length once stripped
    model_config = {"str_strip_whitespace": True}


class ComplaintUpdateRequest(BaseModel):
    complaint: str | None = Field(None, min_length=1)
    image_url: str | None = None

    model_config = {"str_strip_whitespace": True}


# ============ Response Schemas ============

class ComplaintResponse(BaseModel):
    id: int
    user_id: int
    complaint: str
    image_url: str | None = None
    status: ComplaintStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ComplaintListResponse(BaseModel):
    complaints: list[ComplaintResponse]
    count: int


# ============ Admin ============

class ComplaintStatusUpdateRequest(BaseModel):
    status: ComplaintStatus
