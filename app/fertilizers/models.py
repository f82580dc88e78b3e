"""SQLAlchemy model for the fertilizer catalog."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Numeric, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, IdentityBigInt


class Fertilizer(Base):
    __tablename__ = "fertilizers"

    id: Mapped[int] = mapped_column(IdentityBigInt, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    unit: Mapped[str] = mapped_column(Text, nullable=False)  # e.g. 'kg', 'bag', 'liter'
    image_url: Mapped[str | None] = mapped_column(Text)
    available: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (CheckConstraint("price > 0", name="check_fertilizer_price_positive"),)
