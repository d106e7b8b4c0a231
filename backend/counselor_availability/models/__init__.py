"""
Database models for the counselor availability service.

- WeeklyAvailability: per-weekday recurring availability rows
- CounselorAvailabilityLock: per-counselor mutation lock and template generation
"""

from .weekly_availability import CounselorAvailabilityLock, WeeklyAvailability

__all__ = [
    "CounselorAvailabilityLock",
    "WeeklyAvailability",
]
