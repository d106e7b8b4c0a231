# backend/counselor_availability/core/enums.py
"""
Core enums for the counselor availability service.

DayOfWeek is the closed set of weekdays a weekly template is keyed by.
Values are the capitalized English names used on the wire and in storage.
"""

from datetime import date
from enum import Enum
from typing import Optional


class DayOfWeek(str, Enum):
    """Weekday names, Monday first to match ``date.weekday()``."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        return WEEK_ORDER[value.weekday()]

    @classmethod
    def parse(cls, raw: object) -> Optional["DayOfWeek"]:
        """Resolve a weekday from user input, case-insensitively. None if unknown."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        cleaned = raw.strip().lower()
        if not cleaned:
            return None
        for member in cls:
            if member.value.lower() == cleaned:
                return member
        return None

    @property
    def position(self) -> int:
        return WEEK_ORDER.index(self)


class ValidationMode(str, Enum):
    """Which write protocol a template is being validated for."""

    SET = "set"
    UPDATE = "update"


WEEK_ORDER: tuple[DayOfWeek, ...] = tuple(DayOfWeek)
