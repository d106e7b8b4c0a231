# backend/counselor_availability/services/availability_validator.py
"""
Availability Validator

Pure checks on a submitted weekly template, run before any write:
- Week completeness ("set" needs every weekday exactly once)
- Non-empty updates, no weekday named twice in one update
- Weekday names drawn from DayOfWeek
- Available days carry at least one time range
- Each range is "HH:MM"-"HH:MM" with start < end, no overlaps within a day
- Slot policy (slotDuration > 0, bufferTime >= 0) when supplied

Every violation is collected so callers can fix a submission in one round trip.
"""

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
import logging
from typing import List, Optional, Sequence, Tuple

from ..core.enums import WEEK_ORDER, DayOfWeek, ValidationMode
from ..core.exceptions import (
    AvailabilityRuleViolation,
    DuplicateDayError,
    EmptyUpdateError,
    IncompleteWeekError,
    InvalidSlotPolicyError,
    InvalidTimeRangeError,
    MissingDayError,
    MissingTimeRangeError,
    WeeklyAvailabilityValidationError,
)
from ..schemas.weekly_availability import DayEntry, TimeRangeIn
from ..utils.time_helpers import format_clock_time, format_range, parse_clock_time
from .slot_generator import check_slot_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedDay:
    """A validated day entry, ready to persist."""

    day_of_week: DayOfWeek
    is_available: bool
    # (start, end) "HH:MM" pairs sorted by start; empty when unavailable
    time_ranges: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    slot_duration: Optional[int] = None
    buffer_time: Optional[int] = None
    price: Optional[Decimal] = None

    def time_ranges_payload(self) -> List[dict]:
        return [{"start_time": start, "end_time": end} for start, end in self.time_ranges]


@dataclass(frozen=True)
class _ParsedRange:
    start: int
    end: int
    label: str


class AvailabilityValidator:
    """Validates weekly templates for the set and update protocols."""

    def validate(
        self, entries: Sequence[DayEntry], mode: ValidationMode
    ) -> List[AvailabilityRuleViolation]:
        """Return every rule violation in ``entries``; empty when valid."""
        mode = ValidationMode(mode)
        errors: List[AvailabilityRuleViolation] = []

        if mode is ValidationMode.UPDATE and not entries:
            return [EmptyUpdateError()]

        seen: Counter = Counter()
        for index, entry in enumerate(entries):
            day = DayOfWeek.parse(entry.day_of_week)
            if day is None:
                errors.append(MissingDayError(index=index, received=entry.day_of_week))
                label = f"entry {index}"
            else:
                seen[day] += 1
                label = day.value

            errors.extend(self._check_policy(entry, label))

            if not entry.is_available:
                # Ranges of an unavailable day are discarded on write.
                continue
            if not entry.time_ranges:
                errors.append(MissingTimeRangeError(label))
                continue
            range_errors, _ = self._check_ranges(label, entry.time_ranges)
            errors.extend(range_errors)

        duplicates = [day for day in WEEK_ORDER if seen[day] > 1]
        if mode is ValidationMode.SET:
            missing = [day for day in WEEK_ORDER if seen[day] == 0]
            if len(entries) != len(WEEK_ORDER) or missing or duplicates:
                errors.insert(
                    0,
                    IncompleteWeekError(
                        missing_days=[day.value for day in missing],
                        duplicate_days=[day.value for day in duplicates],
                        entry_count=len(entries),
                    ),
                )
        else:
            errors.extend(DuplicateDayError(day.value) for day in duplicates)

        return errors

    def ensure_valid(
        self, entries: Sequence[DayEntry], mode: ValidationMode
    ) -> List[NormalizedDay]:
        """
        Validate and normalize.

        Raises:
            WeeklyAvailabilityValidationError: with every violation found
        """
        mode = ValidationMode(mode)
        errors = self.validate(entries, mode)
        if errors:
            logger.info(
                "Rejected weekly availability submission",
                extra={
                    "event": "weekly_availability_rejected",
                    "mode": mode.value,
                    "codes": [err.code for err in errors],
                },
            )
            raise WeeklyAvailabilityValidationError(errors, mode=mode.value)

        normalized: List[NormalizedDay] = []
        for entry in entries:
            day = DayOfWeek.parse(entry.day_of_week)
            assert day is not None  # guaranteed by validate()
            ranges: Tuple[Tuple[str, str], ...] = ()
            if entry.is_available:
                _, parsed = self._check_ranges(day.value, entry.time_ranges)
                ranges = tuple(
                    (format_clock_time(item.start), format_clock_time(item.end)) for item in parsed
                )
            normalized.append(
                NormalizedDay(
                    day_of_week=day,
                    is_available=entry.is_available,
                    time_ranges=ranges,
                    slot_duration=entry.slot_duration,
                    buffer_time=entry.buffer_time,
                    price=entry.price,
                )
            )
        normalized.sort(key=lambda item: item.day_of_week.position)
        return normalized

    def _check_policy(self, entry: DayEntry, label: str) -> List[AvailabilityRuleViolation]:
        if entry.slot_duration is None and entry.buffer_time is None:
            return []
        try:
            check_slot_policy(
                entry.slot_duration if entry.slot_duration is not None else 1,
                entry.buffer_time if entry.buffer_time is not None else 0,
            )
        except InvalidSlotPolicyError as exc:
            return [
                InvalidSlotPolicyError(
                    f"{exc.message} for {label}",
                    slot_duration=entry.slot_duration,
                    buffer_time=entry.buffer_time,
                    day_of_week=label,
                )
            ]
        return []

    def _check_ranges(
        self, label: str, ranges: Sequence[TimeRangeIn]
    ) -> Tuple[List[AvailabilityRuleViolation], List[_ParsedRange]]:
        errors: List[AvailabilityRuleViolation] = []
        parsed: List[_ParsedRange] = []

        for time_range in ranges:
            text = format_range(time_range.start_time, time_range.end_time)
            try:
                start = parse_clock_time(time_range.start_time)
                end = parse_clock_time(time_range.end_time)
            except ValueError as exc:
                errors.append(
                    InvalidTimeRangeError(
                        f"Invalid time range {text} for {label}: {exc}",
                        day_of_week=label,
                        time_range=text,
                    )
                )
                continue
            if start >= end:
                errors.append(
                    InvalidTimeRangeError(
                        f"Invalid time range {text} for {label}: end must be after start",
                        day_of_week=label,
                        time_range=text,
                    )
                )
                continue
            parsed.append(_ParsedRange(start=start, end=end, label=text))

        parsed.sort(key=lambda item: (item.start, item.end))

        # Compare each range with the furthest-reaching one before it, so a long
        # range that swallows several later ones is reported against each.
        reach: Optional[_ParsedRange] = None
        for current in parsed:
            if reach is not None and current.start < reach.end:
                errors.append(
                    InvalidTimeRangeError(
                        f"The time ranges {reach.label} and {current.label} are overlapping for {label}",
                        day_of_week=label,
                        time_range=current.label,
                        conflicting_range=reach.label,
                    )
                )
            if reach is None or current.end > reach.end:
                reach = current

        return errors, parsed


def validate_weekly_template(
    entries: Sequence[DayEntry], mode: ValidationMode
) -> List[AvailabilityRuleViolation]:
    """Module-level shortcut for ``AvailabilityValidator().validate``."""
    return AvailabilityValidator().validate(entries, mode)
