"""Pydantic schemas for the cart."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    fertilizer_id: int
    quantity: int = Field(1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """New quantity; zero or less removes the item."""

    quantity: int


class CartItemResponse(BaseModel):
    id: int
    fertilizer_id: int
    fertilizer_name: str
    fertilizer_unit_price: Decimal
    fertilizer_unit: str
    quantity: int
    total_amount: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    count: int
    total_amount: Decimal


class CartSummaryResponse(BaseModel):
    """Cart total with the most the user's points can take off it."""

    total_amount: Decimal
    item_count: int
    available_points: int
    max_discount: Decimal
    points_required: int = Field(..., description="Points debited if max_discount is applied")


class ClearCartResponse(BaseModel):
    removed: int
