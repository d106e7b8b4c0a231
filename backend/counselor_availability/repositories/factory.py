# backend/counselor_availability/repositories/factory.py
"""
Repository Factory for the counselor availability service

Centralizes repository creation so services and tests build repositories
the same way and implementations can be swapped in one place.
"""

from typing import TYPE_CHECKING, Type, TypeVar

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

# Avoid circular imports
if TYPE_CHECKING:
    from .weekly_availability_repository import WeeklyAvailabilityRepository

T = TypeVar("T")


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_base_repository(db: Session, model: Type[T]) -> BaseRepository[T]:
        """Create a generic base repository for any model."""
        return BaseRepository(db, model)

    @staticmethod
    def create_weekly_availability_repository(db: Session) -> "WeeklyAvailabilityRepository":
        """Create repository for weekly template rows and counselor locks."""
        from .weekly_availability_repository import WeeklyAvailabilityRepository

        return WeeklyAvailabilityRepository(db)
