# backend/counselor_availability/models/weekly_availability.py
"""
Weekly availability models.

Classes:
    WeeklyAvailability: One recurring-availability row per counselor per weekday
    CounselorAvailabilityLock: Per-counselor row serializing template mutations
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from ..core.enums import DayOfWeek
from ..core.ulid_helper import generate_ulid
from ..database import Base
from .base_enum import create_safe_enum


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class WeeklyAvailability(Base):
    """
    Recurring availability for one weekday of one counselor.

    time_ranges holds a list of {"start_time": "HH:MM", "end_time": "HH:MM"}
    dicts sorted by start time. It is empty whenever is_available is False.
    """

    __tablename__ = "weekly_availability"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    counselor_id = Column(String(64), nullable=False)
    day_of_week = Column(create_safe_enum(DayOfWeek, "day_of_week_enum"), nullable=False)
    is_available = Column(Boolean, nullable=False, default=False)
    time_ranges = Column(JSONB().with_variant(JSON(), "sqlite"), nullable=False, default=list)
    slot_duration = Column(Integer, nullable=False)
    buffer_time = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_now_utc,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_now_utc,
        onupdate=_now_utc,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("counselor_id", "day_of_week", name="uq_weekly_availability_counselor_day"),
        Index("ix_weekly_availability_counselor", "counselor_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<WeeklyAvailability {self.counselor_id} {getattr(self.day_of_week, 'value', self.day_of_week)}"
            f" available={self.is_available} ranges={len(self.time_ranges or [])}>"
        )


class CounselorAvailabilityLock(Base):
    """
    Serialization point for a counselor's template.

    Every set/update takes a row lock here before touching weekly_availability,
    and bumps ``generation`` on success.
    """

    __tablename__ = "counselor_availability_locks"

    counselor_id = Column(String(64), primary_key=True)
    generation = Column(Integer, nullable=False, default=0)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_now_utc,
        onupdate=_now_utc,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<CounselorAvailabilityLock {self.counselor_id} gen={self.generation}>"
