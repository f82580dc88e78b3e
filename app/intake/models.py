"""SQLAlchemy models for recycle pickups and waste submissions."""

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    BigInteger,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, IdentityBigInt


class IntakeStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _intake_status_enum() -> Enum:
    return Enum(
        IntakeStatus,
        name="intake_status",
        values_callable=lambda e: [m.value for m in e],
    )


class RecyclePickup(Base):
    """Scheduled collection of sorted recyclables.

    The user is paid `total_amount` for the materials and earns eco-points
    with the scheduling bonus.
    """

    __tablename__ = "recycle_pickups"

    id: Mapped[int] = mapped_column(IdentityBigInt, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    materials: Mapped[list] = mapped_column(JSON, nullable=False)
    quantities: Mapped[dict] = mapped_column(JSON, nullable=False)  # material -> kg
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_method: Mapped[str] = mapped_column(Text, nullable=False)
    pickup_date: Mapped[date] = mapped_column(Date, nullable=False)
    pickup_time: Mapped[str] = mapped_column(Text, nullable=False)
    pickup_address: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[IntakeStatus] = mapped_column(
        _intake_status_enum(),
        nullable=False,
        default=IntakeStatus.SCHEDULED,
        server_default=IntakeStatus.SCHEDULED.value,
    )
    points_awarded: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
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
        Index("idx_recycle_pickups_user_created", "user_id", "created_at"),
        Index("idx_recycle_pickups_status", "status"),
    )


class WasteSubmission(Base):
    """General waste collection request, optionally with a photo."""

    __tablename__ = "waste_submissions"

    id: Mapped[int] = mapped_column(IdentityBigInt, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    waste_type: Mapped[str] = mapped_column(Text, nullable=False)
    materials: Mapped[list] = mapped_column(JSON, nullable=False)
    quantities: Mapped[dict] = mapped_column(JSON, nullable=False)  # material -> kg
    pickup_date: Mapped[date] = mapped_column(Date, nullable=False)
    time_slot: Mapped[str] = mapped_column(Text, nullable=False)
    special_instructions: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(Text)  # hosted by the image service
    status: Mapped[IntakeStatus] = mapped_column(
        _intake_status_enum(),
        nullable=False,
        default=IntakeStatus.SCHEDULED,
        server_default=IntakeStatus.SCHEDULED.value,
    )
    points_awarded: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
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
        Index("idx_waste_submissions_user_created", "user_id", "created_at"),
        Index("idx_waste_submissions_status", "status"),
    )
