# backend/counselor_availability/repositories/weekly_availability_repository.py
"""
Weekly Availability Repository

Data access for the recurring weekly template:
- One weekly_availability row per counselor per weekday
- One counselor_availability_locks row per counselor, row-locked by every
  mutation and carrying the template generation

All methods flush but never commit.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import DayOfWeek
from ..core.exceptions import RepositoryException
from ..models.weekly_availability import CounselorAvailabilityLock, WeeklyAvailability
from .base_repository import BaseRepository


def _day_position(row: WeeklyAvailability) -> int:
    day = DayOfWeek.parse(row.day_of_week)
    return day.position if day is not None else len(DayOfWeek)


class WeeklyAvailabilityRepository(BaseRepository[WeeklyAvailability]):
    """Repository for weekly availability rows and the per-counselor lock row."""

    def __init__(self, db: Session):
        super().__init__(db, WeeklyAvailability)

    # Lock / generation

    def lock_counselor(self, counselor_id: str) -> CounselorAvailabilityLock:
        """
        Take the counselor's row lock, creating the lock row on first use.

        On PostgreSQL this is SELECT ... FOR UPDATE; concurrent mutations for
        the same counselor queue here until the holder commits or rolls back.
        """
        try:
            row = self._select_lock_row(counselor_id)
            if row is not None:
                return row

            if not self.supports_row_locks:
                row = CounselorAvailabilityLock(counselor_id=counselor_id, generation=0)
                self.db.add(row)
                self.db.flush()
                return row

            try:
                with self.db.begin_nested():
                    self.db.add(CounselorAvailabilityLock(counselor_id=counselor_id, generation=0))
            except IntegrityError:
                # Another process created it first; fall through and wait on its lock.
                self.logger.debug("Lock row for %s created concurrently", counselor_id)

            row = self._select_lock_row(counselor_id)
            if row is None:
                raise RepositoryException(f"Lock row for counselor {counselor_id} vanished")
            return row
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking counselor {counselor_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock counselor availability: {str(e)}") from e

    def _select_lock_row(self, counselor_id: str) -> Optional[CounselorAvailabilityLock]:
        query = self.db.query(CounselorAvailabilityLock).filter(
            CounselorAvailabilityLock.counselor_id == counselor_id
        )
        # Always reload: a long-lived session may hold a stale generation
        query = query.populate_existing()
        if self.supports_row_locks:
            query = query.with_for_update()
        return query.one_or_none()

    def bump_generation(self, lock_row: CounselorAvailabilityLock) -> int:
        try:
            lock_row.generation = (lock_row.generation or 0) + 1
            lock_row.updated_at = datetime.now(timezone.utc)
            self.db.flush()
            return int(lock_row.generation)
        except SQLAlchemyError as e:
            self.logger.error(f"Error bumping generation for {lock_row.counselor_id}: {str(e)}")
            raise RepositoryException(f"Failed to bump template generation: {str(e)}") from e

    def get_generation(self, counselor_id: str) -> int:
        """Current template generation; 0 when nothing was ever written."""
        try:
            row = (
                self.db.query(CounselorAvailabilityLock.generation)
                .filter(CounselorAvailabilityLock.counselor_id == counselor_id)
                .one_or_none()
            )
            return int(row[0]) if row is not None and row[0] is not None else 0
        except SQLAlchemyError as e:
            self.logger.error(f"Error reading generation for {counselor_id}: {str(e)}")
            raise RepositoryException(f"Failed to read template generation: {str(e)}") from e

    # Day rows

    def count_for_counselor(self, counselor_id: str) -> int:
        return self.count(counselor_id=counselor_id)

    def get_days(
        self,
        counselor_id: str,
        days: Optional[Iterable[DayOfWeek]] = None,
        *,
        for_update: bool = False,
    ) -> List[WeeklyAvailability]:
        """
        Rows for a counselor, Monday first.

        Args:
            counselor_id: Owner of the template
            days: Restrict to these weekdays (all seven when None)
            for_update: Row-lock the returned rows where the dialect supports it
        """
        query = self._build_query().filter(WeeklyAvailability.counselor_id == counselor_id)
        if days is not None:
            wanted = [DayOfWeek(day) for day in days]
            if not wanted:
                return []
            query = query.filter(WeeklyAvailability.day_of_week.in_(wanted))
        if for_update:
            query = query.populate_existing()
            if self.supports_row_locks:
                query = query.with_for_update()
        rows = self._execute_query(query)
        return sorted(rows, key=_day_position)

    def get_day(self, counselor_id: str, day: DayOfWeek) -> Optional[WeeklyAvailability]:
        return self.find_one_by(counselor_id=counselor_id, day_of_week=DayOfWeek(day))

    def delete_for_counselor(self, counselor_id: str) -> int:
        """Delete every weekday row of a counselor; returns the number removed."""
        try:
            deleted = (
                self.db.query(WeeklyAvailability)
                .filter(WeeklyAvailability.counselor_id == counselor_id)
                .delete(synchronize_session="fetch")
            )
            self.db.flush()
            return int(deleted or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting template for {counselor_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete weekly availability: {str(e)}") from e

    def create_days(
        self, counselor_id: str, rows: Sequence[Dict[str, Any]]
    ) -> List[WeeklyAvailability]:
        """Insert day rows in one flush."""
        try:
            entities = [WeeklyAvailability(counselor_id=counselor_id, **data) for data in rows]
            self.db.add_all(entities)
            self.db.flush()
            return entities
        except IntegrityError as exc:
            self.logger.error(
                "Integrity error creating template for %s: %s", counselor_id, exc, exc_info=True
            )
            raise RepositoryException(f"Integrity constraint violated: {exc}") from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating template for {counselor_id}: {str(e)}")
            raise RepositoryException(f"Failed to create weekly availability: {str(e)}") from e

    def update_day(self, row: WeeklyAvailability, values: Dict[str, Any]) -> WeeklyAvailability:
        """Apply ``values`` to an existing row; unknown keys are ignored."""
        try:
            for key, value in values.items():
                if hasattr(row, key):
                    setattr(row, key, value)
            row.updated_at = datetime.now(timezone.utc)
            self.db.flush()
            return row
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating {row!r}: {str(e)}")
            raise RepositoryException(f"Failed to update weekly availability: {str(e)}") from e
