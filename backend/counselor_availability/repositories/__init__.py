"""
Repository layer for the counselor availability service.

Repositories own all SQLAlchemy queries; services own transactions.
"""

from .base_repository import BaseRepository
from .factory import RepositoryFactory
from .weekly_availability_repository import WeeklyAvailabilityRepository

__all__ = [
    "BaseRepository",
    "RepositoryFactory",
    "WeeklyAvailabilityRepository",
]
