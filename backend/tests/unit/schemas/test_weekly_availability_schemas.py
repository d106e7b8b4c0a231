from datetime import date, datetime
from decimal import Decimal

from pydantic import ValidationError
import pytest

from counselor_availability.schemas.weekly_availability import (
    DayAvailability,
    DayEntry,
    DaySlots,
    SetWeeklyAvailabilityRequest,
    UpdateWeeklyAvailabilityRequest,
    WeeklyAvailabilityWriteResponse,
)


class TestDayEntry:
    def test_camel_case_payload(self):
        entry = DayEntry.model_validate(
            {
                "dayOfWeek": "Monday",
                "isAvailable": True,
                "timeRanges": [{"startTime": "09:00", "endTime": "10:00"}],
                "slotDuration": 30,
                "bufferTime": 5,
                "price": 1500,
            }
        )

        assert entry.day_of_week == "Monday"
        assert entry.time_ranges[0].end_time == "10:00"
        assert (entry.slot_duration, entry.buffer_time) == (30, 5)
        assert entry.price == Decimal("1500")

    def test_snake_case_payload(self):
        entry = DayEntry.model_validate(
            {
                "day_of_week": "Tuesday",
                "is_available": True,
                "time_ranges": [{"start_time": "09:00", "end_time": "10:00"}],
            }
        )

        assert entry.time_ranges[0].start_time == "09:00"
        assert entry.slot_duration is None

    def test_null_time_ranges_become_empty(self):
        entry = DayEntry.model_validate({"dayOfWeek": "Sunday", "isAvailable": False, "timeRanges": None})

        assert entry.time_ranges == []

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            DayEntry.model_validate({"dayOfWeek": "Sunday", "isAvailable": False, "colour": "red"})

    def test_is_available_required(self):
        with pytest.raises(ValidationError):
            DayEntry.model_validate({"dayOfWeek": "Sunday"})

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            DayEntry.model_validate({"dayOfWeek": "Sunday", "isAvailable": False, "price": -1})


class TestRequests:
    def test_set_request_alias(self):
        request = SetWeeklyAvailabilityRequest.model_validate(
            {"weeklyAvailability": [{"dayOfWeek": "Monday", "isAvailable": False}]}
        )

        assert len(request.weekly_availability) == 1

    def test_update_request_defaults_to_empty(self):
        assert UpdateWeeklyAvailabilityRequest.model_validate({}).updated_weekly_availability == []


class TestResponses:
    def test_day_availability_serializes_camel_case(self):
        day = DayAvailability(
            counselor_id="c-1",
            day_of_week="Friday",
            is_available=True,
            time_ranges=[{"start_time": "09:00", "end_time": "10:00"}],
            slot_duration=45,
            buffer_time=0,
            price=Decimal("3000.00"),
            created_at=datetime(2026, 10, 19, 8, 0),
        )

        dumped = day.model_dump(by_alias=True, mode="json")

        assert dumped["dayOfWeek"] == "Friday"
        assert dumped["timeRanges"] == [{"startTime": "09:00", "endTime": "10:00"}]
        assert dumped["price"] == 3000.0
        assert dumped["counselorId"] == "c-1"

    def test_unknown_day_rejected_on_output(self):
        with pytest.raises(ValidationError):
            DayAvailability(
                counselor_id="c-1",
                day_of_week="Funday",
                is_available=False,
                time_ranges=[],
                slot_duration=45,
                buffer_time=0,
                price=0,
            )

    def test_write_response(self):
        response = WeeklyAvailabilityWriteResponse(
            message="ok", counselor_id="c-1", days_written=7, version=3
        )

        assert response.model_dump(by_alias=True) == {
            "message": "ok",
            "counselorId": "c-1",
            "daysWritten": 7,
            "version": 3,
        }


class TestMoney:
    def test_rounded_to_cents(self):
        slots = DaySlots(
            date=date(2026, 10, 19),
            day_of_week="Monday",
            slot_duration=45,
            buffer_time=0,
            price="1999.995",
            slots=[],
        )

        assert slots.price == Decimal("2000.00")
        assert slots.model_dump(mode="json")["price"] == 2000.0

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError):
            DaySlots(
                date=date(2026, 10, 19),
                day_of_week="Monday",
                slot_duration=45,
                buffer_time=0,
                price="free",
                slots=[],
            )
