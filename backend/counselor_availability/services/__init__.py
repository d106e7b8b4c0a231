"""
Service layer for the counselor availability service.

Services own business rules and transaction boundaries; repositories own
queries.
"""

from .availability_validator import AvailabilityValidator, NormalizedDay, validate_weekly_template
from .base import BaseService
from .slot_generator import Slot, SlotSequence, check_slot_policy, generate_slots
from .weekly_availability_service import WeeklyAvailabilityService

__all__ = [
    "AvailabilityValidator",
    "BaseService",
    "NormalizedDay",
    "Slot",
    "SlotSequence",
    "WeeklyAvailabilityService",
    "check_slot_policy",
    "generate_slots",
    "validate_weekly_template",
]
