# backend/tests/unit/services/test_booking_service.py
"""
Tests for the booking ledger: create, cancel and reschedule.

The unique index on confirmed slots is exercised directly by stubbing
out the availability pre-check, so a second writer reaches the insert.
"""

from datetime import date
from unittest.mock import MagicMock, Mock

import pytest

from interview_booking.core.exceptions import (
    GoneException,
    InvalidTokenException,
    NotFoundException,
    SlotConflictException,
    ValidationException,
)
from interview_booking.core.slot_lock import SlotLock
from interview_booking.models.booking import Booking, BookingStatus
from interview_booking.services.availability_calculator import SlotValidation
from interview_booking.services.booking_service import BookingService

SLOT_DATE = date(2025, 6, 11)


@pytest.fixture
def unchecked_booking_service(db, calculator, cache_service):
    """Booking service whose availability pre-check always passes."""
    availability = Mock()
    availability.calculator = calculator
    availability.validate_booking_slot.return_value = SlotValidation.ok()
    return BookingService(db, availability, cache_service, SlotLock(None))


def confirmed_for(db, link, on_date, start_time):
    return (
        db.query(Booking)
        .filter_by(
            booking_link_id=link.id,
            selected_date=on_date,
            selected_time=start_time,
            status=BookingStatus.CONFIRMED.value,
        )
        .all()
    )


class TestCreateBooking:
    def test_creates_confirmed_booking(self, booking_service, link, candidate):
        booking = booking_service.create_booking(link, SLOT_DATE, "9:00", candidate)

        assert booking.id.startswith("BKG_")
        assert booking.status == BookingStatus.CONFIRMED.value
        assert booking.selected_time == "09:00"
        assert booking.email == "grace@example.com"
        assert len(booking.cancellation_token) == 36

    def test_taken_slot_is_a_conflict(self, booking_service, link, candidate, make_booking):
        make_booking(link, SLOT_DATE, "09:00")

        with pytest.raises(SlotConflictException) as exc_info:
            booking_service.create_booking(link, SLOT_DATE, "09:00", candidate)
        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "This time slot is already booked"

    def test_past_slot_is_rejected(self, booking_service, link, candidate):
        with pytest.raises(ValidationException) as exc_info:
            booking_service.create_booking(link, date(2025, 6, 6), "09:00", candidate)
        assert exc_info.value.code == "SLOT_PAST"

    def test_slot_outside_schedule_is_rejected(self, booking_service, link, candidate):
        with pytest.raises(ValidationException) as exc_info:
            booking_service.create_booking(link, SLOT_DATE, "15:00", candidate)
        assert exc_info.value.code == "SLOT_NOT_IN_SCHEDULE"

    def test_insufficient_notice_is_rejected(self, booking_service, make_link, template, candidate):
        link = make_link(template, require_advance_booking=True, advance_hours=48)
        with pytest.raises(ValidationException) as exc_info:
            booking_service.create_booking(link, date(2025, 6, 10), "11:00", candidate)
        assert exc_info.value.code == "SLOT_INSUFFICIENT_NOTICE"

    def test_unique_index_is_the_final_guard(
        self, db, unchecked_booking_service, link, candidate, make_booking
    ):
        make_booking(link, SLOT_DATE, "10:00")

        with pytest.raises(SlotConflictException):
            unchecked_booking_service.create_booking(link, SLOT_DATE, "10:00", candidate)

        assert len(confirmed_for(db, link, SLOT_DATE, "10:00")) == 1

    def test_blocked_lock_is_a_conflict(self, db, availability_service, cache_service, link, candidate):
        client = MagicMock()
        client.set.return_value = False
        service = BookingService(db, availability_service, cache_service, SlotLock(client))

        with pytest.raises(SlotConflictException):
            service.create_booking(link, SLOT_DATE, "10:00", candidate)
        assert confirmed_for(db, link, SLOT_DATE, "10:00") == []

    def test_slot_can_be_rebooked_after_cancel(self, booking_service, link, candidate):
        first = booking_service.create_booking(link, SLOT_DATE, "09:30", candidate)
        booking_service.cancel_booking(first.id, first.cancellation_token)

        second = booking_service.create_booking(link, SLOT_DATE, "09:30", candidate)

        assert second.id != first.id
        assert second.is_confirmed


class TestCancelBooking:
    def test_cancel(self, booking_service, link, candidate):
        booking = booking_service.create_booking(link, SLOT_DATE, "10:00", candidate)

        cancelled = booking_service.cancel_booking(
            booking.id, booking.cancellation_token, "Accepted another offer"
        )

        assert cancelled.status == BookingStatus.CANCELLED.value
        assert cancelled.cancellation_reason == "Accepted another offer"
        assert cancelled.cancelled_at is not None

    def test_wrong_token(self, booking_service, link, candidate):
        booking = booking_service.create_booking(link, SLOT_DATE, "10:00", candidate)
        with pytest.raises(InvalidTokenException):
            booking_service.cancel_booking(booking.id, "not-the-token")

    @pytest.mark.parametrize("token", ["t\u00f6ken", "\u9810\u7d04", ""])
    def test_non_ascii_or_empty_token_is_rejected(self, booking_service, link, candidate, token):
        booking = booking_service.create_booking(link, SLOT_DATE, "10:00", candidate)
        with pytest.raises(InvalidTokenException):
            booking_service.cancel_booking(booking.id, token)

    def test_unknown_booking(self, booking_service):
        with pytest.raises(NotFoundException):
            booking_service.cancel_booking("BKG_1717939200000_abcdefghij", "token")

    def test_cancel_twice_is_gone(self, booking_service, link, candidate):
        booking = booking_service.create_booking(link, SLOT_DATE, "10:00", candidate)
        booking_service.cancel_booking(booking.id, booking.cancellation_token)

        with pytest.raises(GoneException) as exc_info:
            booking_service.cancel_booking(booking.id, booking.cancellation_token)
        assert exc_info.value.code == "BOOKING_CANCELLED"

    def test_past_booking_cannot_be_cancelled(self, booking_service, link, make_booking):
        booking = make_booking(link, date(2025, 6, 6), "10:00")
        with pytest.raises(GoneException) as exc_info:
            booking_service.cancel_booking(booking.id, booking.cancellation_token)
        assert exc_info.value.code == "BOOKING_IN_PAST"


class TestRescheduleBooking:
    def test_moves_booking_and_keeps_identity(
        self, booking_service, availability_service, link, candidate
    ):
        booking = booking_service.create_booking(link, SLOT_DATE, "09:00", candidate)
        booking_id, token = booking.id, booking.cancellation_token

        result = booking_service.reschedule_booking(booking_id, token, date(2025, 6, 12), "10:30")

        assert result.old_date == SLOT_DATE
        assert result.old_time == "09:00"
        assert result.booking.id == booking_id
        assert result.booking.cancellation_token == token
        assert result.booking.selected_date == date(2025, 6, 12)
        assert result.booking.selected_time == "10:30"
        assert result.booking.first_name == "Grace"

        old_day = [s.start_time for s in availability_service.get_day_slots(link, SLOT_DATE)]
        new_day = [s.start_time for s in availability_service.get_day_slots(link, date(2025, 6, 12))]
        assert "09:00" in old_day
        assert "10:30" not in new_day

    def test_same_slot_is_rejected(self, booking_service, link, candidate):
        booking = booking_service.create_booking(link, SLOT_DATE, "09:00", candidate)
        with pytest.raises(ValidationException) as exc_info:
            booking_service.reschedule_booking(
                booking.id, booking.cancellation_token, SLOT_DATE, "9:00"
            )
        assert exc_info.value.code == "SAME_SLOT"

    def test_cancelled_booking_is_gone(self, booking_service, link, candidate):
        booking = booking_service.create_booking(link, SLOT_DATE, "09:00", candidate)
        booking_service.cancel_booking(booking.id, booking.cancellation_token)

        with pytest.raises(GoneException):
            booking_service.reschedule_booking(
                booking.id, booking.cancellation_token, date(2025, 6, 12), "10:00"
            )

    def test_new_slot_in_past(self, booking_service, link, candidate):
        booking = booking_service.create_booking(link, SLOT_DATE, "09:00", candidate)
        with pytest.raises(ValidationException) as exc_info:
            booking_service.reschedule_booking(
                booking.id, booking.cancellation_token, date(2025, 6, 9), "09:00"
            )
        assert exc_info.value.code == "INVALID_NEW_SLOT"

    def test_past_booking_is_gone(self, booking_service, link, make_booking):
        booking = make_booking(link, date(2025, 6, 6), "10:00")
        with pytest.raises(GoneException) as exc_info:
            booking_service.reschedule_booking(
                booking.id, booking.cancellation_token, date(2025, 6, 12), "10:00"
            )
        assert exc_info.value.code == "BOOKING_IN_PAST"

    def test_taken_slot_is_a_conflict(self, booking_service, link, candidate, make_booking):
        make_booking(link, date(2025, 6, 12), "10:00")
        booking = booking_service.create_booking(link, SLOT_DATE, "09:00", candidate)

        with pytest.raises(SlotConflictException):
            booking_service.reschedule_booking(
                booking.id, booking.cancellation_token, date(2025, 6, 12), "10:00"
            )

    def test_unofferable_slot_is_a_conflict(self, booking_service, link, candidate):
        booking = booking_service.create_booking(link, SLOT_DATE, "09:00", candidate)

        with pytest.raises(SlotConflictException) as exc_info:
            booking_service.reschedule_booking(
                booking.id, booking.cancellation_token, date(2025, 6, 14), "10:00"
            )
        assert exc_info.value.message == "This time slot is not available in the schedule"

    def test_unique_index_guards_reschedule(
        self, db, unchecked_booking_service, link, make_booking
    ):
        make_booking(link, date(2025, 6, 12), "10:00", email="other@example.com")
        mine = make_booking(link, SLOT_DATE, "09:00")
        mine_id, token = mine.id, mine.cancellation_token

        with pytest.raises(SlotConflictException):
            unchecked_booking_service.reschedule_booking(
                mine_id, token, date(2025, 6, 12), "10:00"
            )

        db.expire_all()
        reloaded = db.get(Booking, mine_id)
        assert reloaded.selected_date == SLOT_DATE
        assert reloaded.selected_time == "09:00"
        assert len(confirmed_for(db, link, date(2025, 6, 12), "10:00")) == 1
