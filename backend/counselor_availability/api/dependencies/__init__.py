"""
FastAPI dependencies for the counselor availability API.
"""

from .database import get_db
from .services import get_weekly_availability_service

__all__ = [
    "get_db",
    "get_weekly_availability_service",
]
