"""Pydantic schemas for the fertilizer catalog."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class FertilizerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    unit: str = Field(..., min_length=1, description="e.g. kg, bag, liter")
    image_url: str | None = Field(None, description="URL returned by the image hosting service")
    available: bool = True


class FertilizerUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    unit: str | None = Field(None, min_length=1)
    image_url: str | None = None
    available: bool | None = None


class FertilizerResponse(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    unit: str
    image_url: str | None = None
    available: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class FertilizerListResponse(BaseModel):
    fertilizers: list[FertilizerResponse]
    count: int
