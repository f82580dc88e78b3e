"""SQLAlchemy models for fertilizer purchases."""

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, IdentityBigInt


class PurchaseStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class FertilizerPurchase(Base):
    """One purchased cart line.

    A checkout creates one row per cart item, all sharing `checkout_id`.
    Amounts are fixed at checkout; afterwards only status and delivery
    details change.
    """

    __tablename__ = "fertilizer_purchases"

    id: Mapped[int] = mapped_column(IdentityBigInt, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    checkout_id: Mapped[str] = mapped_column(String(32), nullable=False)
    # No FK: purchase history outlives catalog entries
    fertilizer_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    fertilizer_name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    original_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    points_discount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00"), server_default="0"
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[PurchaseStatus] = mapped_column(
        Enum(
            PurchaseStatus,
            name="purchase_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=PurchaseStatus.PENDING,
        server_default=PurchaseStatus.PENDING.value,
    )
    delivery_address: Mapped[str] = mapped_column(Text, nullable=False)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_phone: Mapped[str] = mapped_column(Text, nullable=False)
    customer_email: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    user: Mapped["UserProfile"] = relationship()  # type: ignore

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_purchase_quantity_positive"),
        CheckConstraint("points_discount >= 0", name="check_purchase_discount_non_negative"),
        Index("idx_purchases_user_created", "user_id", "created_at"),
        Index("idx_purchases_checkout", "checkout_id"),
        Index("idx_purchases_status", "status"),
    )
