import re
from datetime import time
from typing import Any, Union

_CLOCK_RE = re.compile(r"^(?P<hour>[01]\d|2[0-3]):(?P<minute>[0-5]\d)$")

MINUTES_PER_DAY = 24 * 60

ClockValue = Union[str, time]


def parse_clock_time(value: ClockValue) -> int:
    """Return minutes since midnight for a 24-hour "HH:MM" string or a time."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        raise ValueError(f"Expected HH:MM string, got {type(value).__name__}")
    match = _CLOCK_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid time {value!r}, expected 24-hour HH:MM")
    return int(match.group("hour")) * 60 + int(match.group("minute"))


def format_clock_time(minutes: int) -> str:
    """Always return HH:MM format"""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_range(start: Any, end: Any) -> str:
    if isinstance(start, time) and isinstance(end, time):
        return f"{start:%H:%M}-{end:%H:%M}"
    return f"{start}-{end}"
