# backend/counselor_availability/services/weekly_availability_service.py
"""
Weekly Availability Service

Owns the counselor's recurring weekly template:

- set_weekly_availability: replace all seven days atomically
- update_weekly_availability: patch named days of an existing template
- get_weekly_availability: read the template back, Monday first
- get_slots_for_date / get_slots_for_range: expand the template into slots

Every mutation is validated up front (all violations reported together),
then runs under the counselor's process lock and a single database
transaction that also row-locks the counselor's lock row. Any failure rolls
the whole unit back, so a failed set leaves the previous template intact.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.availability_lock import counselor_lock
from ..core.config import settings
from ..core.enums import DayOfWeek, ValidationMode
from ..core.exceptions import (
    DayNotFoundError,
    DomainException,
    PersistenceError,
    RepositoryException,
    TemplateNotInitializedError,
    ValidationException,
    is_db_pool_exhaustion,
)
from ..database import with_db_retry
from ..models.weekly_availability import WeeklyAvailability
from ..repositories.factory import RepositoryFactory
from ..repositories.weekly_availability_repository import WeeklyAvailabilityRepository
from ..schemas.weekly_availability import (
    DayAvailability,
    DayEntry,
    DaySlots,
    SlotOut,
    SlotsResponse,
    WeeklyAvailabilityWriteResponse,
    WeeklyTemplate,
)
from .availability_validator import AvailabilityValidator, NormalizedDay
from .base import BaseService
from .slot_generator import generate_slots

logger = logging.getLogger(__name__)

T = TypeVar("T")
EntryInput = Union[DayEntry, Mapping[str, Any]]


class WeeklyAvailabilityService(BaseService):
    """Set, update, read and expand a counselor's weekly template."""

    def __init__(
        self,
        db: Session,
        repository: Optional[WeeklyAvailabilityRepository] = None,
        validator: Optional[AvailabilityValidator] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_weekly_availability_repository(db)
        self.validator = validator or AvailabilityValidator()

    def translate_db_error(self, exc: Exception, **context: Any) -> DomainException:
        operation = context.get("operation", "unknown")
        return PersistenceError(
            f"Could not {operation} weekly availability, please retry",
            counselor_id=context.get("counselor_id", ""),
            operation=operation,
            code="DB_POOL_EXHAUSTED" if is_db_pool_exhaustion(exc) else "PERSISTENCE_ERROR",
        )

    # Writes

    @BaseService.measure_operation("set_weekly_availability")
    def set_weekly_availability(
        self, counselor_id: str, entries: Iterable[EntryInput]
    ) -> WeeklyAvailabilityWriteResponse:
        """
        Replace the counselor's whole template with exactly seven days.

        Raises:
            WeeklyAvailabilityValidationError: submission breaks any rule
            PersistenceError: storage failed; the previous template is intact
        """
        days = self.validator.ensure_valid(self._coerce_entries(entries), ValidationMode.SET)
        rows = [self._row_values(day) for day in days]

        def replace() -> Dict[str, int]:
            with counselor_lock(counselor_id, "set"):
                with self.transaction(counselor_id=counselor_id, operation="set"):
                    lock_row = self.repository.lock_counselor(counselor_id)
                    removed = self.repository.delete_for_counselor(counselor_id)
                    self.repository.create_days(counselor_id, rows)
                    version = self.repository.bump_generation(lock_row)
            return {"version": version, "removed": removed}

        outcome = with_db_retry("set_weekly_availability", replace)
        self.log_operation(
            "set_weekly_availability",
            counselor_id=counselor_id,
            version=outcome["version"],
            days_removed=outcome["removed"],
            days_written=len(rows),
        )
        return WeeklyAvailabilityWriteResponse(
            message="Weekly availability set successfully",
            counselor_id=counselor_id,
            days_written=len(rows),
            version=outcome["version"],
        )

    @BaseService.measure_operation("update_weekly_availability")
    def update_weekly_availability(
        self, counselor_id: str, entries: Iterable[EntryInput]
    ) -> WeeklyAvailabilityWriteResponse:
        """
        Patch the named days; every other day is left untouched.

        Raises:
            WeeklyAvailabilityValidationError: submission breaks any rule
            TemplateNotInitializedError: no template has been set yet
            DayNotFoundError: a named day has no stored row (nothing is applied)
            PersistenceError: storage failed; nothing is applied
        """
        days = self.validator.ensure_valid(self._coerce_entries(entries), ValidationMode.UPDATE)

        def patch() -> int:
            with counselor_lock(counselor_id, "update"):
                with self.transaction(counselor_id=counselor_id, operation="update"):
                    lock_row = self.repository.lock_counselor(counselor_id)
                    if self.repository.count_for_counselor(counselor_id) == 0:
                        raise TemplateNotInitializedError(counselor_id)

                    stored = self._index_by_day(
                        self.repository.get_days(
                            counselor_id,
                            [day.day_of_week for day in days],
                            for_update=True,
                        )
                    )
                    for day in days:
                        row = stored.get(day.day_of_week)
                        if row is None:
                            raise DayNotFoundError(counselor_id, day.day_of_week.value)
                        self.repository.update_day(row, self._patch_values(day))
                    return self.repository.bump_generation(lock_row)

        version = with_db_retry("update_weekly_availability", patch)
        self.log_operation(
            "update_weekly_availability",
            counselor_id=counselor_id,
            version=version,
            days=[day.day_of_week.value for day in days],
        )
        return WeeklyAvailabilityWriteResponse(
            message="Weekly availability updated successfully",
            counselor_id=counselor_id,
            days_written=len(days),
            version=version,
        )

    # Reads

    @BaseService.measure_operation("get_weekly_availability")
    def get_weekly_availability(self, counselor_id: str) -> WeeklyTemplate:
        """Stored template, Monday first; empty with version 0 when never set."""

        def load() -> WeeklyTemplate:
            rows = self.repository.get_days(counselor_id)
            return WeeklyTemplate(
                counselor_id=counselor_id,
                version=self.repository.get_generation(counselor_id),
                days=[DayAvailability.model_validate(row) for row in rows],
            )

        return self._read("read", counselor_id, load)

    @BaseService.measure_operation("get_slots_for_date")
    def get_slots_for_date(
        self,
        counselor_id: str,
        on_date: date,
        not_before: Optional[datetime] = None,
    ) -> DaySlots:
        """
        Slots for one calendar date from the stored row of its weekday.

        Raises:
            TemplateNotInitializedError: no template has been set yet
            DayNotFoundError: the weekday has no stored row
        """
        weekday = DayOfWeek.from_date(on_date)

        def load() -> DaySlots:
            row = self.repository.get_day(counselor_id, weekday)
            if row is None:
                if self.repository.count_for_counselor(counselor_id) == 0:
                    raise TemplateNotInitializedError(counselor_id)
                raise DayNotFoundError(counselor_id, weekday.value)
            return self._expand_day(row, on_date, not_before)

        return self._read("read", counselor_id, load)

    @BaseService.measure_operation("get_slots_for_range")
    def get_slots_for_range(
        self,
        counselor_id: str,
        start_date: date,
        end_date: date,
        not_before: Optional[datetime] = None,
    ) -> SlotsResponse:
        """
        Slots for every date in [start_date, end_date].

        ``not_before`` drops slots that start earlier (e.g. the elapsed part
        of today). Aware datetimes are compared by wall-clock time.
        """
        if end_date < start_date:
            raise ValidationException(
                "end_date must not be before start_date",
                code="INVALID_DATE_RANGE",
                details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            )
        span = (end_date - start_date).days + 1
        if span > settings.max_slot_range_days:
            raise ValidationException(
                f"Date range spans {span} days, the limit is {settings.max_slot_range_days}",
                code="DATE_RANGE_TOO_LONG",
                details={"days": span, "max_days": settings.max_slot_range_days},
            )

        def load() -> SlotsResponse:
            stored = self._index_by_day(self.repository.get_days(counselor_id))
            if not stored:
                raise TemplateNotInitializedError(counselor_id)
            result: List[DaySlots] = []
            for offset in range(span):
                current = start_date + timedelta(days=offset)
                row = stored.get(DayOfWeek.from_date(current))
                if row is not None:
                    result.append(self._expand_day(row, current, not_before))
            return SlotsResponse(
                counselor_id=counselor_id,
                start_date=start_date,
                end_date=end_date,
                total_slots=sum(len(day.slots) for day in result),
                days=result,
            )

        return self._read("read", counselor_id, load)

    # Helpers

    def _read(self, operation: str, counselor_id: str, func: Callable[[], T]) -> T:
        def attempt() -> T:
            try:
                return func()
            except (SQLAlchemyError, RepositoryException):
                # A failed statement leaves the session unusable until rolled back
                self.db.rollback()
                raise

        try:
            return with_db_retry(f"weekly_availability_{operation}", attempt)
        except (SQLAlchemyError, RepositoryException) as exc:
            self.logger.error(
                f"Reading weekly availability failed: {str(exc)}",
                extra={"counselor_id": counselor_id, "operation": operation},
            )
            raise self.translate_db_error(
                exc, counselor_id=counselor_id, operation=operation
            ) from exc

    @staticmethod
    def _coerce_entries(entries: Iterable[EntryInput]) -> List[DayEntry]:
        return [
            entry if isinstance(entry, DayEntry) else DayEntry.model_validate(entry)
            for entry in entries
        ]

    @staticmethod
    def _index_by_day(rows: Iterable[WeeklyAvailability]) -> Dict[DayOfWeek, WeeklyAvailability]:
        indexed: Dict[DayOfWeek, WeeklyAvailability] = {}
        for row in rows:
            day = DayOfWeek.parse(row.day_of_week)
            if day is not None:
                indexed[day] = row
        return indexed

    @staticmethod
    def _row_values(day: NormalizedDay) -> Dict[str, Any]:
        return {
            "day_of_week": day.day_of_week,
            "is_available": day.is_available,
            "time_ranges": day.time_ranges_payload(),
            "slot_duration": (
                day.slot_duration
                if day.slot_duration is not None
                else settings.default_slot_duration_minutes
            ),
            "buffer_time": (
                day.buffer_time
                if day.buffer_time is not None
                else settings.default_buffer_time_minutes
            ),
            "price": (
                day.price if day.price is not None else Decimal(str(settings.default_session_price))
            ),
        }

    @staticmethod
    def _patch_values(day: NormalizedDay) -> Dict[str, Any]:
        values: Dict[str, Any] = {
            "is_available": day.is_available,
            "time_ranges": day.time_ranges_payload(),
        }
        if day.slot_duration is not None:
            values["slot_duration"] = day.slot_duration
        if day.buffer_time is not None:
            values["buffer_time"] = day.buffer_time
        if day.price is not None:
            values["price"] = day.price
        return values

    @staticmethod
    def _expand_day(
        row: WeeklyAvailability, on_date: date, not_before: Optional[datetime]
    ) -> DaySlots:
        if not_before is not None and not_before.tzinfo is not None:
            not_before = not_before.replace(tzinfo=None)
        ranges = row.time_ranges if row.is_available else []
        sequence = generate_slots(ranges or [], row.slot_duration, row.buffer_time, on_date)
        return DaySlots(
            date=on_date,
            day_of_week=DayOfWeek.from_date(on_date),
            slot_duration=row.slot_duration,
            buffer_time=row.buffer_time,
            price=row.price,
            slots=[
                SlotOut(start_time=slot.start_time, end_time=slot.end_time, start=slot.start, end=slot.end)
                for slot in sequence.starting_at_or_after(not_before)
            ],
        )
