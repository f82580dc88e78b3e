"""SQLAlchemy model for cart line items."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, IdentityBigInt


class CartItem(Base):
    """Pending fertilizer line item.

    Name, unit price and unit are snapshots taken when the item was added.
    `total_amount` is always `quantity * fertilizer_unit_price` and is only
    written by `CartService`.
    """

    __tablename__ = "cart_items"

    id: Mapped[int] = mapped_column(IdentityBigInt, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    fertilizer_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("fertilizers.id", ondelete="CASCADE"),
        nullable=False,
    )
    fertilizer_name: Mapped[str] = mapped_column(Text, nullable=False)
    fertilizer_unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    fertilizer_unit: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_cart_quantity_positive"),
        Index("idx_cart_items_user", "user_id"),
    )
