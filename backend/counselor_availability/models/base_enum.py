# backend/counselor_availability/models/base_enum.py
"""
Safe enum helpers for SQLAlchemy.

SQLAlchemy's Enum type persists member NAMES ('MONDAY') by default. Raw SQL,
migrations and API payloads all speak in VALUES ('Monday'), so every enum
column goes through ``create_safe_enum`` to store values instead.

Usage:
    from counselor_availability.models.base_enum import create_safe_enum

    class MyModel(Base):
        day_of_week = Column(
            create_safe_enum(DayOfWeek, "day_of_week_enum"),
            nullable=False,
        )
"""

from enum import Enum
from typing import Sequence, Type

from sqlalchemy import Enum as SAEnum


def create_safe_enum(
    enum_class: Type[Enum],
    name: str,
    *,
    native_enum: bool = False,
    validate_strings: bool = True,
) -> SAEnum:
    """
    Create a SQLAlchemy Enum that correctly uses enum values (not names).

    Args:
        enum_class: The Python Enum class to use
        name: Database type name (used for the CHECK constraint / native type)
        native_enum: Whether to use a PostgreSQL native enum type. Defaults to
                     False so the same schema works on SQLite.
        validate_strings: Whether to validate string values (default True)

    Returns:
        SQLAlchemy Enum column type configured for safe value-based storage
    """
    return SAEnum(
        enum_class,
        name=name,
        native_enum=native_enum,
        validate_strings=validate_strings,
        values_callable=_get_enum_values,
        length=max(len(member.value) for member in enum_class),
    )


def _get_enum_values(enum_class: Type[Enum]) -> Sequence[str]:
    """Extract values from an enum class for SAEnum storage."""
    return [member.value for member in enum_class]
