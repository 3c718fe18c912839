# backend/tests/unit/services/test_availability_calculator.py
"""
Unit tests for AvailabilityCalculator.

Uses unsaved model instances; the calculator does no I/O. The clock is
frozen at Monday 2025-06-09 10:00 America/New_York.
"""

from datetime import date

import pytest

from interview_booking.models.booking_link import BookingLink
from interview_booking.models.template import Template
from interview_booking.services.availability_calculator import (
    AvailabilityCalculator,
    SlotRejection,
)
from interview_booking.services.slot_generator import validate_weekly_schedule

WEEKDAY_MORNINGS = {
    day: [{"startTime": "09:00", "endTime": "12:00"}]
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
}

TODAY = date(2025, 6, 9)
TOMORROW = date(2025, 6, 10)
CHRISTMAS = date(2025, 12, 25)


def build_template(**overrides) -> Template:
    values = {
        "name": "Screening",
        "weekly_schedule": validate_weekly_schedule(WEEKDAY_MORNINGS),
        "blackout_days": [],
        "booking_cutoff_date": None,
    }
    values.update(overrides)
    return Template(**values)


def build_link(**overrides) -> BookingLink:
    values = {
        "id": "BL_1717939200000_abcd1234",
        "name": "Screen",
        "template_id": "TPL_1717939200000_abcd1234",
        "url_slug": "screen",
        "duration": 30,
        "require_advance_booking": False,
        "advance_hours": 0,
        "is_active": True,
    }
    values.update(overrides)
    return BookingLink(**values)


@pytest.fixture
def calc(clock):
    return AvailabilityCalculator(clock=clock, slot_duration=30)


def starts(slots):
    return [slot.start_time for slot in slots]


class TestAvailableSlotsForDate:
    def test_future_weekday_offers_full_schedule(self, calc):
        slots = calc.available_slots_for_date(build_template(), build_link(), TOMORROW)
        assert starts(slots) == ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]

    def test_weekend_has_no_slots(self, calc):
        assert calc.available_slots_for_date(build_template(), build_link(), date(2025, 6, 14)) == []

    def test_past_date_has_no_slots(self, calc):
        assert calc.available_slots_for_date(build_template(), build_link(), date(2025, 6, 6)) == []

    def test_today_drops_slots_that_already_started(self, calc):
        slots = calc.available_slots_for_date(build_template(), build_link(), TODAY)
        assert starts(slots) == ["10:00", "10:30", "11:00", "11:30"]

    def test_booked_times_are_excluded(self, calc):
        slots = calc.available_slots_for_date(
            build_template(), build_link(), TOMORROW, booked_times=["09:30", "11:00"]
        )
        assert starts(slots) == ["09:00", "10:00", "10:30", "11:30"]

    def test_blackout_day_has_no_slots(self, calc):
        template = build_template(blackout_days=[CHRISTMAS.isoformat()])
        assert calc.available_slots_for_date(template, build_link(), CHRISTMAS) == []
        assert calc.is_date_unavailable(template, CHRISTMAS)

    def test_cutoff_date_is_inclusive(self, calc):
        template = build_template(booking_cutoff_date=date(2025, 6, 20))
        assert len(calc.available_slots_for_date(template, build_link(), date(2025, 6, 20))) == 6
        assert calc.available_slots_for_date(template, build_link(), date(2025, 6, 23)) == []

    def test_inactive_link_has_no_slots(self, calc):
        link = build_link(is_active=False)
        assert calc.available_slots_for_date(build_template(), link, TOMORROW) == []


class TestAdvanceNotice:
    def test_slots_inside_notice_window_are_excluded(self, calc):
        link = build_link(require_advance_booking=True, advance_hours=24)
        slots = calc.available_slots_for_date(build_template(), link, TOMORROW)
        # 09:00 and 09:30 tomorrow are 23h and 23.5h away
        assert starts(slots) == ["10:00", "10:30", "11:00", "11:30"]

    def test_exactly_at_notice_boundary_is_allowed(self, calc):
        link = build_link(require_advance_booking=True, advance_hours=24)
        assert calc.meets_advance_notice(link, TOMORROW, "10:00")

    def test_one_minute_short_is_rejected(self, calc, clock):
        link = build_link(require_advance_booking=True, advance_hours=24)
        clock.advance(minutes=1)

        assert not calc.meets_advance_notice(link, TOMORROW, "10:00")
        slots = calc.available_slots_for_date(build_template(), link, TOMORROW)
        assert starts(slots) == ["10:30", "11:00", "11:30"]

    def test_notice_ignored_when_not_required(self, calc):
        link = build_link(require_advance_booking=False, advance_hours=48)
        assert calc.meets_advance_notice(link, TODAY, "10:30")

    def test_hours_until(self, calc):
        assert calc.hours_until(TOMORROW, "10:00") == pytest.approx(24.0)


class TestDaySummary:
    def test_counts_offerable_against_generated(self, calc):
        summary = calc.day_summary(build_template(), build_link(), TOMORROW, ["09:00"])
        assert summary.total_slots == 6
        assert summary.available_slots == 5
        assert summary.available is True
        assert summary.to_dict() == {"available": True, "totalSlots": 6, "availableSlots": 5}

    def test_fully_booked_day_is_unavailable(self, calc):
        booked = ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]
        summary = calc.day_summary(build_template(), build_link(), TOMORROW, booked)
        assert summary.available is False
        assert summary.available_slots == 0

    def test_blackout_day_summary_is_empty(self, calc):
        template = build_template(blackout_days=[CHRISTMAS.isoformat()])
        summary = calc.day_summary(template, build_link(), CHRISTMAS)
        assert summary.total_slots == 0
        assert summary.available is False


class TestValidateSlot:
    def test_valid_slot(self, calc):
        result = calc.validate_slot(build_template(), build_link(), TOMORROW, "10:00")
        assert result.valid is True
        assert result.to_dict() == {"valid": True}

    def test_inactive_link_is_checked_first(self, calc):
        result = calc.validate_slot(
            build_template(), build_link(is_active=False), date(2025, 6, 2), "09:00"
        )
        assert result.reason is SlotRejection.LINK_INACTIVE
        assert result.message == "This booking link is no longer active"

    def test_past_date(self, calc):
        result = calc.validate_slot(build_template(), build_link(), date(2025, 6, 6), "10:00")
        assert result.reason is SlotRejection.PAST
        assert result.to_dict() == {"valid": False, "error": "Cannot book appointments in the past"}

    def test_started_slot_today_is_past(self, calc):
        result = calc.validate_slot(build_template(), build_link(), TODAY, "09:30")
        assert result.reason is SlotRejection.PAST

    def test_past_wins_over_blackout(self, calc):
        template = build_template(blackout_days=["2025-06-06"])
        result = calc.validate_slot(template, build_link(), date(2025, 6, 6), "10:00")
        assert result.reason is SlotRejection.PAST

    def test_unavailable_date(self, calc):
        template = build_template(blackout_days=[CHRISTMAS.isoformat()])
        result = calc.validate_slot(template, build_link(), CHRISTMAS, "10:00")
        assert result.reason is SlotRejection.DATE_UNAVAILABLE
        assert result.message == "This date is not available for booking"

    def test_time_outside_schedule(self, calc):
        result = calc.validate_slot(build_template(), build_link(), TOMORROW, "13:00")
        assert result.reason is SlotRejection.NOT_IN_SCHEDULE
        assert result.message == "This time slot is not available in the schedule"

    def test_off_grid_time_is_not_in_schedule(self, calc):
        result = calc.validate_slot(build_template(), build_link(), TOMORROW, "09:15")
        assert result.reason is SlotRejection.NOT_IN_SCHEDULE

    def test_already_booked(self, calc):
        result = calc.validate_slot(
            build_template(), build_link(), TOMORROW, "10:00", booked_times=["10:00"]
        )
        assert result.reason is SlotRejection.ALREADY_BOOKED
        assert result.message == "This time slot is already booked"

    def test_booked_checked_before_notice(self, calc):
        link = build_link(require_advance_booking=True, advance_hours=48)
        result = calc.validate_slot(build_template(), link, TOMORROW, "10:00", ["10:00"])
        assert result.reason is SlotRejection.ALREADY_BOOKED

    def test_insufficient_notice(self, calc):
        link = build_link(require_advance_booking=True, advance_hours=48)
        result = calc.validate_slot(build_template(), link, TOMORROW, "10:00")
        assert result.reason is SlotRejection.INSUFFICIENT_NOTICE
        assert result.message == "This booking requires at least 48 hours advance notice"

    def test_unpadded_time_is_normalized(self, calc):
        assert calc.validate_slot(build_template(), build_link(), TOMORROW, "9:00").valid
