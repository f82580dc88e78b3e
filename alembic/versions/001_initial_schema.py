"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM, JSONB


# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    # Create ENUM types explicitly before tables
    op.execute("CREATE TYPE user_role AS ENUM ('user', 'admin')")
    op.execute(
        "CREATE TYPE points_transaction_type AS ENUM "
        "('earned_waste', 'earned_recycle', 'spent_discount')"
    )
    op.execute("CREATE TYPE intake_status AS ENUM ('scheduled', 'completed', 'cancelled')")
    op.execute(
        "CREATE TYPE purchase_status AS ENUM "
        "('pending', 'confirmed', 'delivered', 'cancelled')"
    )

    # ==================== USERS ====================

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        _created_at(),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column(
            "role",
            ENUM("user", "admin", name="user_role", create_type=False),
            server_default="user",
            nullable=False,
        ),
        sa.Column("profile_image_url", sa.Text(), nullable=True),
        sa.Column("points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("token_version", sa.Integer(), server_default="0", nullable=False),
        sa.CheckConstraint("points >= 0", name="check_points_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_profiles_email", "user_profiles", ["email"], unique=True)
    op.create_index("idx_user_profiles_role", "user_profiles", ["role"])

    # ==================== POINTS LEDGER ====================

    op.create_table(
        "points_transactions",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("points_change", sa.Integer(), nullable=False),
        sa.Column(
            "type",
            ENUM(
                "earned_waste",
                "earned_recycle",
                "spent_discount",
                name="points_transaction_type",
                create_type=False,
            ),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("related_id", sa.Text(), nullable=True),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["user_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_points_transactions_user_created",
        "points_transactions",
        ["user_id", "created_at"],
    )
    op.create_index("idx_points_transactions_related", "points_transactions", ["related_id"])

    # ==================== INTAKE ====================

    op.create_table(
        "recycle_pickups",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("materials", JSONB(), nullable=False),
        sa.Column("quantities", JSONB(), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", sa.Text(), nullable=False),
        sa.Column("pickup_date", sa.Date(), nullable=False),
        sa.Column("pickup_time", sa.Text(), nullable=False),
        sa.Column("pickup_address", sa.Text(), nullable=False),
        sa.Column(
            "status",
            ENUM("scheduled", "completed", "cancelled", name="intake_status", create_type=False),
            server_default="scheduled",
            nullable=False,
        ),
        sa.Column("points_awarded", sa.Integer(), server_default="0", nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["user_id"], ["user_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_recycle_pickups_user_created", "recycle_pickups", ["user_id", "created_at"]
    )
    op.create_index("idx_recycle_pickups_status", "recycle_pickups", ["status"])

    op.create_table(
        "waste_submissions",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("waste_type", sa.Text(), nullable=False),
        sa.Column("materials", JSONB(), nullable=False),
        sa.Column("quantities", JSONB(), nullable=False),
        sa.Column("pickup_date", sa.Date(), nullable=False),
        sa.Column("time_slot", sa.Text(), nullable=False),
        sa.Column("special_instructions", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column(
            "status",
            ENUM("scheduled", "completed", "cancelled", name="intake_status", create_type=False),
            server_default="scheduled",
            nullable=False,
        ),
        sa.Column("points_awarded", sa.Integer(), server_default="0", nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["user_id"], ["user_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_waste_submissions_user_created", "waste_submissions", ["user_id", "created_at"]
    )
    op.create_index("idx_waste_submissions_status", "waste_submissions", ["status"])

    # ==================== SHOP ====================

    op.create_table(
        "fertilizers",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("unit", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("available", sa.Boolean(), server_default="true", nullable=False),
        _created_at(),
        sa.CheckConstraint("price > 0", name="check_fertilizer_price_positive"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "cart_items",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("fertilizer_id", sa.BigInteger(), nullable=False),
        sa.Column("fertilizer_name", sa.Text(), nullable=False),
        sa.Column("fertilizer_unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("fertilizer_unit", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        _created_at(),
        sa.CheckConstraint("quantity > 0", name="check_cart_quantity_positive"),
        sa.ForeignKeyConstraint(["user_id"], ["user_profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["fertilizer_id"], ["fertilizers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_cart_items_user", "cart_items", ["user_id"])

    op.create_table(
        "fertilizer_purchases",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("checkout_id", sa.String(32), nullable=False),
        sa.Column("fertilizer_id", sa.BigInteger(), nullable=False),
        sa.Column("fertilizer_name", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("original_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("points_discount", sa.Numeric(12, 2), server_default="0", nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column(
            "status",
            ENUM(
                "pending",
                "confirmed",
                "delivered",
                "cancelled",
                name="purchase_status",
                create_type=False,
            ),
            server_default="pending",
            nullable=False,
        ),
        sa.Column("delivery_address", sa.Text(), nullable=False),
        sa.Column("customer_name", sa.Text(), nullable=False),
        sa.Column("customer_phone", sa.Text(), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=True),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint("quantity > 0", name="check_purchase_quantity_positive"),
        sa.CheckConstraint("points_discount >= 0", name="check_purchase_discount_non_negative"),
        sa.ForeignKeyConstraint(["user_id"], ["user_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_purchases_user_created", "fertilizer_purchases", ["user_id", "created_at"]
    )
    op.create_index("idx_purchases_checkout", "fertilizer_purchases", ["checkout_id"])
    op.create_index("idx_purchases_status", "fertilizer_purchases", ["status"])


def downgrade() -> None:
    op.drop_index("idx_purchases_status", table_name="fertilizer_purchases")
    op.drop_index("idx_purchases_checkout", table_name="fertilizer_purchases")
    op.drop_index("idx_purchases_user_created", table_name="fertilizer_purchases")
    op.drop_table("fertilizer_purchases")

    op.drop_index("idx_cart_items_user", table_name="cart_items")
    op.drop_table("cart_items")
    op.drop_table("fertilizers")

    op.drop_index("idx_waste_submissions_status", table_name="waste_submissions")
    op.drop_index("idx_waste_submissions_user_created", table_name="waste_submissions")
    op.drop_table("waste_submissions")

    op.drop_index("idx_recycle_pickups_status", table_name="recycle_pickups")
    op.drop_index("idx_recycle_pickups_user_created", table_name="recycle_pickups")
    op.drop_table("recycle_pickups")

    op.drop_index("idx_points_transactions_related", table_name="points_transactions")
    op.drop_index("idx_points_transactions_user_created", table_name="points_transactions")
    op.drop_table("points_transactions")

    op.drop_index("idx_user_profiles_role", table_name="user_profiles")
    op.drop_index("ix_user_profiles_email", table_name="user_profiles")
    op.drop_table("user_profiles")

    # Drop ENUM types
    op.execute("DROP TYPE purchase_status")
    op.execute("DROP TYPE intake_status")
    op.execute("DROP TYPE points_transaction_type")
    op.execute("DROP TYPE user_role")
