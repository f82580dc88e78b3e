"""Pydantic schemas for the eco-points module."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.points.models import PointsTransactionType


class PointsBalanceResponse(BaseModel):
    """Current balance and what it is worth as a discount."""

    user_id: int
    points: int
    value_lkr: Decimal = Field(..., description="Points times LKR 3.00")


class PointsTransactionResponse(BaseModel):
    id: int
    points_change: int
    type: PointsTransactionType
    description: str
    related_id: str | None = None
    balance_after: int
    created_at: datetime

    model_config = {"from_attributes": True}


class PointsHistoryResponse(BaseModel):
    transactions: list[PointsTransactionResponse]
    count: int


class DiscountQuoteResponse(BaseModel):
    """Maximum discount the current balance buys on a purchase amount."""

    purchase_amount: Decimal
    available_points: int
    max_discount: Decimal
    points_required: int


class ReconcileResponse(BaseModel):
    user_id: int
    points: int
