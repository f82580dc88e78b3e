"""Pydantic schemas for checkout and fertilizer purchases."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field

from app.purchases.models import PurchaseStatus


class CustomerInfo(BaseModel):
    """Delivery and contact details captured at checkout."""

    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    customer_email: EmailStr | None = None
    delivery_address: str = Field(..., min_length=1)


class CheckoutRequest(CustomerInfo):
    points_discount: Decimal = Field(
        Decimal("0"),
        ge=0,
        description=(
            "Requested discount in LKR. Clamped to the balance value "
            "(LKR 3.00 per point) and to 50% of the cart total."
        ),
    )


class BuyNowRequest(CheckoutRequest):
    fertilizer_id: int
    quantity: int = Field(1, gt=0)


class PurchaseResponse(BaseModel):
    id: int
    checkout_id: str
    fertilizer_id: int
    fertilizer_name: str
    quantity: int
    original_amount: Decimal
    points_discount: Decimal
    total_amount: Decimal
    purchase_date: date
    status: PurchaseStatus
    delivery_address: str
    customer_name: str
    customer_phone: str
    customer_email: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PurchaseListResponse(BaseModel):
    purchases: list[PurchaseResponse]
    count: int


class CheckoutResponse(BaseModel):
    checkout_id: str
    purchase_ids: list[int]
    purchases: list[PurchaseResponse]
    original_amount: Decimal
    points_discount: Decimal
    total_amount: Decimal
    points_balance: int = Field(..., description="Balance after the discount was redeemed")


# ============ Admin ============

class PurchaseStatusUpdateRequest(BaseModel):
    status: PurchaseStatus
    override: bool = Field(
        False,
        description="Set the status even if the transition is not normally allowed",
    )


class PurchaseUpdateRequest(BaseModel):
    """Delivery details an admin may correct. Amounts cannot change."""

    delivery_address: str | None = Field(None, min_length=1)
    customer_name: str | None = Field(None, min_length=1)
    customer_phone: str | None = Field(None, min_length=1)
    customer_email: EmailStr | None = None
