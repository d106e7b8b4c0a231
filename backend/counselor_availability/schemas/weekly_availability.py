# backend/counselor_availability/schemas/weekly_availability.py
"""
Weekly availability schemas.

Request models only check shape. Weekday names, time formats, range
ordering/overlap and slot policy are checked by AvailabilityValidator so
that every problem in a submission is reported together.
"""

import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator

from ..core.enums import DayOfWeek
from ._strict_base import StrictRequestModel
from .base import Money, StandardizedModel

DateType = datetime.date
DateTimeType = datetime.datetime


class TimeRangeIn(StrictRequestModel):
    """
    One "HH:MM"-"HH:MM" window inside a day.

    Bounds are untyped here: a missing or malformed bound is reported by the
    validator alongside every other violation instead of failing the request.
    """

    start_time: Optional[Any] = Field(None, alias="startTime")
    end_time: Optional[Any] = Field(None, alias="endTime")


class DayEntry(StrictRequestModel):
    """A single weekday of a submitted weekly template."""

    # Any value; unknown or non-string names become MissingDayError.
    day_of_week: Optional[Any] = Field(None, alias="dayOfWeek")
    is_available: bool = Field(..., alias="isAvailable")
    time_ranges: List[TimeRangeIn] = Field(default_factory=list, alias="timeRanges")
    slot_duration: Optional[int] = Field(None, alias="slotDuration")
    buffer_time: Optional[int] = Field(None, alias="bufferTime")
    price: Optional[Decimal] = Field(None, ge=0)

    @field_validator("time_ranges", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class SetWeeklyAvailabilityRequest(StrictRequestModel):
    """Full replacement of a counselor's week (all seven days)."""

    weekly_availability: List[DayEntry] = Field(
        default_factory=list,
        alias="weeklyAvailability",
    )


class UpdateWeeklyAvailabilityRequest(StrictRequestModel):
    """Partial patch of named days of an existing week."""

    updated_weekly_availability: List[DayEntry] = Field(
        default_factory=list,
        alias="updatedWeeklyAvailability",
    )


class TimeRangeOut(StandardizedModel):
    start_time: str
    end_time: str


class DayAvailability(StandardizedModel):
    """Stored weekday record as callers see it."""

    counselor_id: str
    day_of_week: DayOfWeek
    is_available: bool
    time_ranges: List[TimeRangeOut]
    slot_duration: int
    buffer_time: int
    price: Money
    created_at: Optional[DateTimeType] = None
    updated_at: Optional[DateTimeType] = None

    model_config = ConfigDict(from_attributes=True)


class WeeklyTemplate(StandardizedModel):
    """All seven days of a counselor's template, Monday first."""

    counselor_id: str
    version: int
    days: List[DayAvailability]


class WeeklyAvailabilityWriteResponse(StandardizedModel):
    message: str
    counselor_id: str
    days_written: int
    version: int


class SlotOut(StandardizedModel):
    start_time: str
    end_time: str
    start: DateTimeType
    end: DateTimeType


class DaySlots(StandardizedModel):
    date: DateType
    day_of_week: DayOfWeek
    slot_duration: int
    buffer_time: int
    price: Money
    slots: List[SlotOut]


class SlotsResponse(StandardizedModel):
    counselor_id: str
    start_date: DateType
    end_date: DateType
    total_slots: int
    days: List[DaySlots]
