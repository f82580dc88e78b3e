"""Add complaints table

Revision ID: 002_complaints
Revises: 001_initial
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM


# revision identifiers, used by Alembic.
revision: str = "002_complaints"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE TYPE complaint_status AS ENUM ('pending', 'resolved')")

    op.create_table(
        "complaints",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("complaint", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column(
            "status",
            ENUM("pending", "resolved", name="complaint_status", create_type=False),
            server_default="pending",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["user_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_complaints_user_created", "complaints", ["user_id", "created_at"])
    op.create_index("idx_complaints_status", "complaints", ["status"])


def downgrade() -> None:
    op.drop_index("idx_complaints_status", table_name="complaints")
    op.drop_index("idx_complaints_user_created", table_name="complaints")
    op.drop_table("complaints")
    op.execute("DROP TYPE complaint_status")
