from datetime import date, time

import pytest

from counselor_availability.core.enums import WEEK_ORDER, DayOfWeek, ValidationMode
from counselor_availability.utils.time_helpers import (
    format_clock_time,
    format_range,
    parse_clock_time,
)


class TestClockTime:
    @pytest.mark.parametrize(
        "value,minutes",
        [("00:00", 0), ("09:30", 570), ("23:59", 1439), (" 12:05 ", 725), (time(8, 15), 495)],
    )
    def test_parse(self, value, minutes):
        assert parse_clock_time(value) == minutes

    @pytest.mark.parametrize("value", ["24:00", "9:30", "12:60", "12-00", "", None, 930])
    def test_parse_rejects(self, value):
        with pytest.raises(ValueError):
            parse_clock_time(value)

    def test_format(self):
        assert format_clock_time(0) == "00:00"
        assert format_clock_time(575) == "09:35"

    def test_format_outside_day(self):
        with pytest.raises(ValueError):
            format_clock_time(24 * 60)

    def test_helpers(self):
        assert format_range("09:00", "10:00") == "09:00-10:00"
        assert format_range(time(9), time(10)) == "09:00-10:00"


class TestDayOfWeek:
    def test_from_date(self):
        assert DayOfWeek.from_date(date(2026, 10, 19)) is DayOfWeek.MONDAY
        assert DayOfWeek.from_date(date(2026, 10, 25)) is DayOfWeek.SUNDAY

    @pytest.mark.parametrize("raw", ["Monday", "monday", " MONDAY ", DayOfWeek.MONDAY])
    def test_parse(self, raw):
        assert DayOfWeek.parse(raw) is DayOfWeek.MONDAY

    @pytest.mark.parametrize("raw", ["Mon", "", None, 1])
    def test_parse_unknown(self, raw):
        assert DayOfWeek.parse(raw) is None

    def test_week_order_and_position(self):
        assert WEEK_ORDER[0] is DayOfWeek.MONDAY
        assert DayOfWeek.SUNDAY.position == 6

    def test_validation_mode_values(self):
        assert ValidationMode("set") is ValidationMode.SET
        assert ValidationMode.UPDATE.value == "update"
