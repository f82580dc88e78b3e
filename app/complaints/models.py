"""SQLAlchemy model for user complaints."""

import enum
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Index, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, IdentityBigInt


class ComplaintStatus(str, enum.Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class Complaint(Base):
    """Free-text complaint about a collection, optionally with a photo."""

    __tablename__ = "complaints"

    id: Mapped[int] = mapped_column(IdentityBigInt, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    complaint: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text)  # hosted by the image service
    status: Mapped[ComplaintStatus] = mapped_column(
        Enum(
            ComplaintStatus,
            name="complaint_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ComplaintStatus.PENDING,
        server_default=ComplaintStatus.PENDING.value,
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
        Index("idx_complaints_user_created", "user_id", "created_at"),
        Index("idx_complaints_status", "status"),
    )
