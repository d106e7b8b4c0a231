# backend/alembic/versions/001_weekly_availability.py
"""Weekly availability - recurring per-weekday template and counselor lock rows

Revision ID: 001_weekly_availability
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates weekly_availability (one row per counselor per weekday) and
counselor_availability_locks (row-locked by every template mutation,
carrying the template generation).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001_weekly_availability"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DAY_VALUES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def upgrade() -> None:
    """Create weekly availability tables."""
    op.create_table(
        "weekly_availability",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("counselor_id", sa.String(64), nullable=False),
        sa.Column(
            "day_of_week",
            sa.Enum(*DAY_VALUES, name="day_of_week_enum", native_enum=False, length=9),
            nullable=False,
        ),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "time_ranges",
            JSONB().with_variant(sa.JSON(), "sqlite"),
            nullable=False,
        ),
        sa.Column("slot_duration", sa.Integer(), nullable=False),
        sa.Column("buffer_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "counselor_id", "day_of_week", name="uq_weekly_availability_counselor_day"
        ),
        comment="Recurring weekly availability, one row per counselor per weekday",
    )
    op.create_index("ix_weekly_availability_counselor", "weekly_availability", ["counselor_id"])

    op.create_table(
        "counselor_availability_locks",
        sa.Column("counselor_id", sa.String(64), nullable=False),
        sa.Column("generation", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("counselor_id"),
        comment="Serialization point and generation counter for weekly templates",
    )


def downgrade() -> None:
    """Drop weekly availability tables."""
    op.drop_table("counselor_availability_locks")
    op.drop_index("ix_weekly_availability_counselor", table_name="weekly_availability")
    op.drop_table("weekly_availability")
