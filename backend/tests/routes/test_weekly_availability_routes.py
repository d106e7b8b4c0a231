"""
HTTP tests for /api/v1/counselors/{counselor_id}/weekly-availability and /slots.
"""

from unittest.mock import MagicMock

from counselor_availability.api.dependencies.services import get_weekly_availability_service
from counselor_availability.core.exceptions import AvailabilityLockTimeoutError
from counselor_availability.main import app

BASE = "/api/v1/counselors"


def _url(counselor_id, tail="weekly-availability"):
    return f"{BASE}/{counselor_id}/{tail}"


class TestSetRoute:
    def test_put_then_get(self, client, counselor_id, make_week):
        response = client.put(_url(counselor_id), json={"weeklyAvailability": make_week()})

        assert response.status_code == 200
        body = response.json()
        assert body == {
            "message": "Weekly availability set successfully",
            "counselorId": counselor_id,
            "daysWritten": 7,
            "version": 1,
        }

        template = client.get(_url(counselor_id)).json()
        assert template["version"] == 1
        assert [day["dayOfWeek"] for day in template["days"]][:2] == ["Monday", "Tuesday"]
        monday = template["days"][0]
        assert monday["isAvailable"] is True
        assert monday["timeRanges"][0] == {"startTime": "09:00", "endTime": "12:00"}
        assert monday["slotDuration"] == 45
        assert monday["price"] == 3000.0

    def test_incomplete_week_is_400_with_every_error(self, client, counselor_id, make_week, make_day):
        week = make_week(
            {"Monday": make_day("Monday", [("09:00", "11:00"), ("10:00", "12:00")])},
            skip=["Sunday"],
        )

        response = client.put(_url(counselor_id), json={"weeklyAvailability": week})

        assert response.status_code == 400
        problem = response.json()
        assert problem["code"] == "WEEKLY_AVAILABILITY_INVALID"
        assert problem["status"] == 400
        assert [err["code"] for err in problem["errors"]] == ["INCOMPLETE_WEEK", "INVALID_TIME_RANGE"]
        assert problem["errors"][0]["details"]["missing_days"] == ["Sunday"]

    def test_bad_day_name_reported_with_other_violations(
        self, client, counselor_id, make_week, make_day
    ):
        week = make_week(
            {
                "Monday": make_day(5, [("09:00", "10:00")]),
                "Tuesday": make_day("Tuesday", [], available=True),
            }
        )

        response = client.put(_url(counselor_id), json={"weeklyAvailability": week})

        assert response.status_code == 400
        codes = [err["code"] for err in response.json()["errors"]]
        assert codes == ["INCOMPLETE_WEEK", "MISSING_DAY", "MISSING_TIME_RANGE"]
        assert response.json()["errors"][1]["details"] == {"index": 0, "received": 5}
        assert response.json()["errors"][0]["details"]["missing_days"] == ["Monday"]

    def test_incomplete_range_reported_with_other_violations(
        self, client, counselor_id, make_week, make_day
    ):
        week = make_week({"Tuesday": make_day("Tuesday", [("11:00", "10:00")])})
        week[0]["timeRanges"] = [{"startTime": "09:00"}]

        response = client.put(_url(counselor_id), json={"weeklyAvailability": week})

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert [err["code"] for err in errors] == ["INVALID_TIME_RANGE", "INVALID_TIME_RANGE"]
        assert [err["details"]["day_of_week"] for err in errors] == ["Monday", "Tuesday"]
        assert errors[0]["details"]["time_range"] == "09:00-None"

    def test_malformed_body_is_422(self, client, counselor_id):
        response = client.put(
            _url(counselor_id), json={"weeklyAvailability": [{"dayOfWeek": "Monday"}]}
        )

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_bad_counselor_id(self, client, make_week):
        response = client.put(_url("bad id!"), json={"weeklyAvailability": make_week()})

        assert response.status_code == 422


class TestUpdateRoute:
    def test_patch_before_put_is_422(self, client, counselor_id, make_day):
        response = client.patch(
            _url(counselor_id),
            json={"updatedWeeklyAvailability": [make_day("Monday", [("09:00", "10:00")])]},
        )

        assert response.status_code == 422
        assert response.json()["code"] == "TEMPLATE_NOT_INITIALIZED"
        assert response.json()["detail"] == "Please set availability first before updating it"

    def test_patch_updates_named_days(self, client, counselor_id, make_week, make_day):
        client.put(_url(counselor_id), json={"weeklyAvailability": make_week()})

        response = client.patch(
            _url(counselor_id),
            json={"updatedWeeklyAvailability": [make_day("Tuesday", available=False)]},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Weekly availability updated successfully"
        assert response.json()["version"] == 2
        days = {day["dayOfWeek"]: day for day in client.get(_url(counselor_id)).json()["days"]}
        assert days["Tuesday"]["isAvailable"] is False
        assert days["Wednesday"]["isAvailable"] is True

    def test_empty_patch_is_400(self, client, counselor_id):
        response = client.patch(_url(counselor_id), json={"updatedWeeklyAvailability": []})

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "EMPTY_UPDATE"


class TestSlotsRoute:
    def test_slots_for_date(self, client, counselor_id, make_week, make_day):
        week = make_week(
            {"Monday": make_day("Monday", [("09:00", "10:00")], slotDuration=20, bufferTime=5)}
        )
        client.put(_url(counselor_id), json={"weeklyAvailability": week})

        response = client.get(_url(counselor_id, "slots"), params={"date": "2026-10-19"})

        assert response.status_code == 200
        body = response.json()
        assert body["totalSlots"] == 2
        slots = body["days"][0]["slots"]
        assert [(s["startTime"], s["endTime"]) for s in slots] == [
            ("09:00", "09:20"),
            ("09:25", "09:45"),
        ]
        assert slots[0]["start"] == "2026-10-19T09:00:00"

    def test_slots_for_range(self, client, counselor_id, make_week):
        client.put(_url(counselor_id), json={"weeklyAvailability": make_week()})

        response = client.get(
            _url(counselor_id, "slots"),
            params={"start_date": "2026-10-24", "end_date": "2026-10-26"},
        )

        body = response.json()
        assert [day["dayOfWeek"] for day in body["days"]] == ["Saturday", "Sunday", "Monday"]
        assert body["totalSlots"] == 9

    def test_slots_need_dates(self, client, counselor_id):
        response = client.get(_url(counselor_id, "slots"))

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_DATE_QUERY"

    def test_slots_reject_mixed_queries(self, client, counselor_id):
        response = client.get(
            _url(counselor_id, "slots"),
            params={"date": "2026-10-19", "start_date": "2026-10-19", "end_date": "2026-10-20"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "AMBIGUOUS_DATE_QUERY"

    def test_slots_without_template(self, client, counselor_id):
        response = client.get(_url(counselor_id, "slots"), params={"date": "2026-10-19"})

        assert response.status_code == 422


class TestPersistenceFailures:
    def test_lock_timeout_is_503_with_retry_after(self, client, counselor_id, make_week):
        service = MagicMock()
        service.set_weekly_availability.side_effect = AvailabilityLockTimeoutError(
            counselor_id, "set", 10
        )
        app.dependency_overrides[get_weekly_availability_service] = lambda: service

        response = client.put(_url(counselor_id), json={"weeklyAvailability": make_week()})

        assert response.status_code == 503
        assert response.headers["retry-after"] == "2"
        assert response.json()["code"] == "AVAILABILITY_LOCK_TIMEOUT"
        assert response.json()["errors"]["retryable"] is True


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
