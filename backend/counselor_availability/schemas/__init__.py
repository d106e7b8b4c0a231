from .weekly_availability import (
    DayAvailability,
    DayEntry,
    DaySlots,
    SetWeeklyAvailabilityRequest,
    SlotOut,
    SlotsResponse,
    TimeRangeIn,
    TimeRangeOut,
    UpdateWeeklyAvailabilityRequest,
    WeeklyAvailabilityWriteResponse,
    WeeklyTemplate,
)

__all__ = [
    "DayAvailability",
    "DayEntry",
    "DaySlots",
    "SetWeeklyAvailabilityRequest",
    "SlotOut",
    "SlotsResponse",
    "TimeRangeIn",
    "TimeRangeOut",
    "UpdateWeeklyAvailabilityRequest",
    "WeeklyAvailabilityWriteResponse",
    "WeeklyTemplate",
]
