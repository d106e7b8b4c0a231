# backend/counselor_availability/services/slot_generator.py
"""
Slot Generator

Expands one day's time ranges into bookable slots:

    09:00-10:00, slotDuration=20, bufferTime=5  ->  09:00-09:20, 09:25-09:45

- The first slot of a range starts at the range start
- The next slot starts at the previous slot's end plus the buffer
- A slot is kept only if it ends at or before the range end
- Ranges are expanded independently (no merging across adjacent ranges)

Pure and stateless; booked-slot filtering is left to the caller.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..core.exceptions import InvalidSlotPolicyError, InvalidTimeRangeError
from ..utils.time_helpers import format_clock_time, parse_clock_time

MinuteRange = Tuple[int, int]


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    @property
    def start_time(self) -> str:
        return self.start.strftime("%H:%M")

    @property
    def end_time(self) -> str:
        return self.end.strftime("%H:%M")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_slot_policy(slot_duration: Any, buffer_time: Any) -> None:
    """Raise InvalidSlotPolicyError unless duration > 0 and buffer >= 0 (whole minutes)."""
    if not _is_int(slot_duration) or slot_duration <= 0:
        raise InvalidSlotPolicyError(
            f"Slot duration must be a positive number of minutes, got {slot_duration!r}",
            slot_duration=slot_duration,
            buffer_time=buffer_time,
        )
    if not _is_int(buffer_time) or buffer_time < 0:
        raise InvalidSlotPolicyError(
            f"Buffer time must be zero or more minutes, got {buffer_time!r}",
            slot_duration=slot_duration,
            buffer_time=buffer_time,
        )


def _range_bounds(raw: Any) -> Tuple[Any, Any]:
    if isinstance(raw, Mapping):
        start = raw.get("start_time", raw.get("startTime"))
        end = raw.get("end_time", raw.get("endTime"))
        return start, end
    if isinstance(raw, (tuple, list)) and len(raw) == 2:
        return raw[0], raw[1]
    return getattr(raw, "start_time", None), getattr(raw, "end_time", None)


def _to_minutes(raw: Any) -> MinuteRange:
    start, end = _range_bounds(raw)
    try:
        if _is_int(start) and _is_int(end):
            return int(start), int(end)
        return parse_clock_time(start), parse_clock_time(end)
    except ValueError as exc:
        raise InvalidTimeRangeError(
            f"Invalid time range {start}-{end}: {exc}", time_range=f"{start}-{end}"
        ) from exc


class SlotSequence:
    """
    Lazy, finite, restartable sequence of slots for one date.

    Each iteration re-walks the ranges, so the same sequence can be consumed
    any number of times.
    """

    __slots__ = ("_ranges", "_slot_duration", "_buffer_time", "_midnight")

    def __init__(
        self,
        ranges: Iterable[MinuteRange],
        slot_duration: int,
        buffer_time: int,
        on_date: date,
    ) -> None:
        self._ranges: Tuple[MinuteRange, ...] = tuple(sorted(ranges))
        self._slot_duration = slot_duration
        self._buffer_time = buffer_time
        self._midnight = datetime.combine(on_date, time.min)

    @property
    def on_date(self) -> date:
        return self._midnight.date()

    @property
    def slot_duration(self) -> int:
        return self._slot_duration

    @property
    def buffer_time(self) -> int:
        return self._buffer_time

    def __iter__(self) -> Iterator[Slot]:
        return self._walk()

    def _walk(self) -> Iterator[Slot]:
        step = self._slot_duration + self._buffer_time
        for range_start, range_end in self._ranges:
            cursor = range_start
            while cursor + self._slot_duration <= range_end:
                yield Slot(
                    start=self._midnight + timedelta(minutes=cursor),
                    end=self._midnight + timedelta(minutes=cursor + self._slot_duration),
                )
                cursor += step

    def starting_at_or_after(self, moment: Optional[datetime]) -> Iterator[Slot]:
        """Slots whose start is not before ``moment`` (all when None)."""
        for slot in self:
            if moment is None or slot.start >= moment:
                yield slot

    def as_clock_ranges(self) -> List[Tuple[str, str]]:
        return [(slot.start_time, slot.end_time) for slot in self]

    def __repr__(self) -> str:
        ranges = ", ".join(
            f"{format_clock_time(start)}-{format_clock_time(end)}" for start, end in self._ranges
        )
        return (
            f"SlotSequence({self.on_date.isoformat()} [{ranges}] "
            f"duration={self._slot_duration} buffer={self._buffer_time})"
        )


def generate_slots(
    time_ranges: Iterable[Any],
    slot_duration: int,
    buffer_time: int,
    on_date: date,
) -> SlotSequence:
    """
    Build the slot sequence for ``on_date``.

    ``time_ranges`` items may be ("HH:MM", "HH:MM") pairs, minute pairs,
    {"start_time", "end_time"} mappings or objects with those attributes.

    Raises:
        InvalidSlotPolicyError: slot_duration <= 0 or buffer_time < 0
        InvalidTimeRangeError: a range bound is not "HH:MM"
    """
    check_slot_policy(slot_duration, buffer_time)
    ranges = [_to_minutes(raw) for raw in time_ranges]
    return SlotSequence(ranges, slot_duration, buffer_time, on_date)
