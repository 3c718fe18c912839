# backend/tests/unit/services/test_slot_generator.py
"""
Unit tests for slot generation and schedule validation.
"""

from datetime import date

import pytest

from interview_booking.core.exceptions import ValidationException
from interview_booking.services.slot_generator import (
    generate_slots,
    normalize_time,
    slot_id,
    validate_weekly_schedule,
    weekday_key,
)

MONDAY = date(2025, 6, 9)


class TestGenerateSlots:
    def test_two_hour_range_gives_four_slots(self):
        schedule = {"monday": [{"startTime": "09:00", "endTime": "11:00"}]}

        slots = generate_slots(schedule, MONDAY, 30)

        assert [(s.start_time, s.end_time) for s in slots] == [
            ("09:00", "09:30"),
            ("09:30", "10:00"),
            ("10:00", "10:30"),
            ("10:30", "11:00"),
        ]
        assert slots[0].id == "TS_20250609_0900"
        assert all(s.available for s in slots)

    def test_trailing_remainder_is_dropped(self):
        schedule = {"monday": [{"startTime": "09:00", "endTime": "10:45"}]}
        starts = [s.start_time for s in generate_slots(schedule, MONDAY, 30)]
        assert starts == ["09:00", "09:30", "10:00"]

    def test_range_shorter_than_a_slot_yields_nothing(self):
        schedule = {"monday": [{"startTime": "09:00", "endTime": "09:20"}]}
        assert generate_slots(schedule, MONDAY, 30) == []

    def test_multiple_ranges_are_ordered(self):
        schedule = {
            "monday": [
                {"startTime": "14:00", "endTime": "15:00"},
                {"startTime": "09:00", "endTime": "10:00"},
            ]
        }
        starts = [s.start_time for s in generate_slots(schedule, MONDAY, 30)]
        assert starts == ["09:00", "09:30", "14:00", "14:30"]

    def test_other_weekdays_are_ignored(self):
        schedule = {"tuesday": [{"startTime": "09:00", "endTime": "17:00"}]}
        assert generate_slots(schedule, MONDAY, 30) == []

    def test_is_deterministic(self):
        schedule = {"monday": [{"startTime": "09:00", "endTime": "12:00"}]}
        assert generate_slots(schedule, MONDAY) == generate_slots(schedule, MONDAY)

    def test_unpadded_times_are_normalized(self):
        schedule = {"monday": [{"startTime": "9:00", "endTime": "10:00"}]}
        assert [s.start_time for s in generate_slots(schedule, MONDAY)] == ["09:00", "09:30"]


class TestHelpers:
    def test_weekday_key(self):
        assert weekday_key(MONDAY) == "monday"
        assert weekday_key(date(2025, 6, 15)) == "sunday"

    def test_slot_id_is_stable(self):
        assert slot_id(MONDAY, "14:30") == "TS_20250609_1430"

    @pytest.mark.parametrize("raw, expected", [("9:05", "09:05"), ("23:59", "23:59"), ("00:00", "00:00")])
    def test_normalize_time(self, raw, expected):
        assert normalize_time(raw) == expected

    @pytest.mark.parametrize("raw", ["24:00", "12:60", "noon", "", "9"])
    def test_normalize_time_rejects_invalid(self, raw):
        with pytest.raises(ValidationException) as exc_info:
            normalize_time(raw)
        assert exc_info.value.code == "INVALID_TIME"


class TestValidateWeeklySchedule:
    def test_fills_every_weekday_and_sorts(self):
        result = validate_weekly_schedule(
            {
                "monday": [
                    {"startTime": "13:00", "endTime": "14:00"},
                    {"startTime": "9:00", "endTime": "10:00"},
                ]
            }
        )
        assert set(result) == {
            "monday",
            "tuesday",
            "wednesday",
            "thursday",
            "friday",
            "saturday",
            "sunday",
        }
        assert result["monday"] == [
            {"startTime": "09:00", "endTime": "10:00"},
            {"startTime": "13:00", "endTime": "14:00"},
        ]
        assert result["sunday"] == []

    def test_end_before_start(self):
        with pytest.raises(ValidationException) as exc_info:
            validate_weekly_schedule({"monday": [{"startTime": "10:00", "endTime": "09:00"}]})
        assert exc_info.value.code == "INVALID_SCHEDULE"

    def test_end_equal_to_start(self):
        with pytest.raises(ValidationException):
            validate_weekly_schedule({"monday": [{"startTime": "10:00", "endTime": "10:00"}]})

    def test_overlapping_ranges(self):
        with pytest.raises(ValidationException):
            validate_weekly_schedule(
                {
                    "monday": [
                        {"startTime": "09:00", "endTime": "11:00"},
                        {"startTime": "10:30", "endTime": "12:00"},
                    ]
                }
            )

    def test_touching_ranges_are_allowed(self):
        result = validate_weekly_schedule(
            {
                "monday": [
                    {"startTime": "09:00", "endTime": "10:00"},
                    {"startTime": "10:00", "endTime": "11:00"},
                ]
            }
        )
        assert len(result["monday"]) == 2

    def test_unknown_weekday(self):
        with pytest.raises(ValidationException):
            validate_weekly_schedule({"funday": []})

    def test_missing_keys(self):
        with pytest.raises(ValidationException):
            validate_weekly_schedule({"monday": [{"startTime": "09:00"}]})
