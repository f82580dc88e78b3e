"""SQLAlchemy models for the eco-points ledger."""

import enum
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, IdentityBigInt


class PointsTransactionType(str, enum.Enum):
    EARNED_WASTE = "earned_waste"
    EARNED_RECYCLE = "earned_recycle"
    SPENT_DISCOUNT = "spent_discount"


class PointsTransaction(Base):
    """One movement of eco-points.

    Append-only: rows are inserted by the ledger and never updated or
    deleted. The sum of a user's `points_change` values (with the 0 floor
    applied in order) is the authoritative balance; `UserProfile.points`
    caches it.
    """

    __tablename__ = "points_transactions"

    id: Mapped[int] = mapped_column(IdentityBigInt, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    points_change: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[PointsTransactionType] = mapped_column(
        Enum(
            PointsTransactionType,
            name="points_transaction_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Waste submission, pickup or purchase id that caused this entry
    related_id: Mapped[str | None] = mapped_column(Text)
    balance_after: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["UserProfile"] = relationship()  # type: ignore

    __table_args__ = (
        Index("idx_points_transactions_user_created", "user_id", "created_at"),
        Index("idx_points_transactions_related", "related_id"),
    )
