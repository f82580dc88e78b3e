import enum
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, IdentityBigInt


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class UserProfile(Base):
    """Application user.

    `points` is the cached eco-points balance, a materialized view over the
    user's `points_transactions`. Only the points ledger writes it.
    """

    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(IdentityBigInt, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    # Nullable for placeholder profiles bootstrapped by the ledger
    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    display_name: Mapped[str | None] = mapped_column(Text)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.USER,
        server_default=UserRole.USER.value,
    )
    profile_image_url: Mapped[str | None] = mapped_column(Text)
    points: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    password_hash: Mapped[str | None] = mapped_column(Text)
    token_version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    __table_args__ = (
        CheckConstraint("points >= 0", name="check_points_non_negative"),
        Index("idx_user_profiles_role", "role"),
    )
