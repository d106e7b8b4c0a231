# backend/counselor_availability/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Routes depend on these factories rather than constructing services, so
tests can swap the session (override ``get_db``) or the whole service.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.weekly_availability_service import WeeklyAvailabilityService
from .database import get_db


def get_weekly_availability_service(
    db: Session = Depends(get_db),
) -> WeeklyAvailabilityService:
    """Get WeeklyAvailabilityService bound to the request's session."""
    return WeeklyAvailabilityService(db)
