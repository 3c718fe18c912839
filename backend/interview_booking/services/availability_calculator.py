# backend/interview_booking/services/availability_calculator.py
"""
Availability rules.

Combines generated slots with existing bookings, blackout days, the
template cutoff date, and a booking link's advance-notice policy. The
calculator does no I/O; callers load the template, link and bookings
and pass them in, along with a clock.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional, Set

from ..core.config import settings
from ..core.timezone_utils import Clock, get_local_now, localize, slot_start
from ..models.booking_link import BookingLink
from ..models.template import Template
from .slot_generator import TimeSlot, generate_slots, normalize_time, parse_time


class SlotRejection(str, Enum):
    """Reasons a single slot cannot be booked."""

    LINK_INACTIVE = "link_inactive"
    PAST = "past"
    DATE_UNAVAILABLE = "date_unavailable"
    NOT_IN_SCHEDULE = "not_in_schedule"
    ALREADY_BOOKED = "already_booked"
    INSUFFICIENT_NOTICE = "insufficient_notice"


@dataclass(frozen=True)
class SlotValidation:
    """Outcome of checking one (date, time) against every booking rule."""

    valid: bool
    reason: Optional[SlotRejection] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "SlotValidation":
        return cls(valid=True)

    @classmethod
    def reject(cls, reason: SlotRejection, message: str) -> "SlotValidation":
        return cls(valid=False, reason=reason, message=message)

    def to_dict(self) -> dict:
        if self.valid:
            return {"valid": True}
        return {"valid": False, "error": self.message}


@dataclass(frozen=True)
class DaySummary:
    available: bool
    total_slots: int
    available_slots: int

    def to_dict(self) -> dict:
        return {
            "available": self.available,
            "totalSlots": self.total_slots,
            "availableSlots": self.available_slots,
        }


class AvailabilityCalculator:
    """
    Decides what is actually offerable on a booking link.

    Args:
        clock: Returns "now"; naive values are read in the scheduling zone
        slot_duration: Slot length in minutes
    """

    def __init__(self, clock: Clock = get_local_now, slot_duration: Optional[int] = None):
        self.clock = clock
        self.slot_duration = slot_duration or settings.slot_duration_minutes

    def now(self) -> datetime:
        return localize(self.clock())

    def today(self) -> date:
        return self.now().date()

    def is_date_unavailable(self, template: Template, on_date: date) -> bool:
        """Blackout day, or after the (inclusive) cutoff date."""
        if on_date.isoformat() in set(template.blackout_days or []):
            return True
        cutoff = template.booking_cutoff_date
        return cutoff is not None and on_date > cutoff

    def is_past_date(self, on_date: date) -> bool:
        """Strictly before today; today itself is not past."""
        return on_date < self.today()

    def is_past_slot(self, on_date: date, start_time: str) -> bool:
        return slot_start(on_date, parse_time(start_time)) < self.now()

    def hours_until(self, on_date: date, start_time: str) -> float:
        delta = slot_start(on_date, parse_time(start_time)) - self.now()
        return delta.total_seconds() / 3600

    def meets_advance_notice(self, link: BookingLink, on_date: date, start_time: str) -> bool:
        if not link.require_advance_booking:
            return True
        return self.hours_until(on_date, start_time) >= link.advance_hours

    def _schedule_for(self, template: Template, link: BookingLink, on_date: date) -> List[TimeSlot]:
        if not link.is_active or self.is_past_date(on_date):
            return []
        if self.is_date_unavailable(template, on_date):
            return []
        return generate_slots(template.weekly_schedule or {}, on_date, self.slot_duration)

    def _filter(
        self,
        slots: List[TimeSlot],
        link: BookingLink,
        on_date: date,
        booked_times: Iterable[str],
    ) -> List[TimeSlot]:
        taken: Set[str] = {normalize_time(t) for t in booked_times}
        # Only today can hold slots that have already started
        check_started = on_date == self.today()
        return [
            slot
            for slot in slots
            if slot.start_time not in taken
            and not (check_started and self.is_past_slot(on_date, slot.start_time))
            and self.meets_advance_notice(link, on_date, slot.start_time)
        ]

    def available_slots_for_date(
        self,
        template: Template,
        link: BookingLink,
        on_date: date,
        booked_times: Iterable[str] = (),
    ) -> List[TimeSlot]:
        """Offerable slots for one date, in start-time order."""
        slots = self._schedule_for(template, link, on_date)
        return self._filter(slots, link, on_date, booked_times)

    def day_summary(
        self,
        template: Template,
        link: BookingLink,
        on_date: date,
        booked_times: Iterable[str] = (),
    ) -> DaySummary:
        slots = self._schedule_for(template, link, on_date)
        offerable = self._filter(slots, link, on_date, booked_times)
        return DaySummary(
            available=len(offerable) > 0,
            total_slots=len(slots),
            available_slots=len(offerable),
        )

    def validate_slot(
        self,
        template: Template,
        link: BookingLink,
        on_date: date,
        start_time: str,
        booked_times: Iterable[str] = (),
    ) -> SlotValidation:
        """
        Check one slot against every rule, reporting the first that fails.

        Order: link inactive, already past, date unavailable, not in the
        schedule, already booked, insufficient advance notice.
        """
        start_time = normalize_time(start_time)

        if not link.is_active:
            return SlotValidation.reject(
                SlotRejection.LINK_INACTIVE, "This booking link is no longer active"
            )
        if self.is_past_slot(on_date, start_time):
            return SlotValidation.reject(
                SlotRejection.PAST, "Cannot book appointments in the past"
            )
        if self.is_date_unavailable(template, on_date):
            return SlotValidation.reject(
                SlotRejection.DATE_UNAVAILABLE, "This date is not available for booking"
            )

        scheduled = generate_slots(template.weekly_schedule or {}, on_date, self.slot_duration)
        if start_time not in {slot.start_time for slot in scheduled}:
            return SlotValidation.reject(
                SlotRejection.NOT_IN_SCHEDULE, "This time slot is not available in the schedule"
            )
        if start_time in {normalize_time(t) for t in booked_times}:
            return SlotValidation.reject(
                SlotRejection.ALREADY_BOOKED, "This time slot is already booked"
            )
        if not self.meets_advance_notice(link, on_date, start_time):
            return SlotValidation.reject(
                SlotRejection.INSUFFICIENT_NOTICE,
                f"This booking requires at least {link.advance_hours} hours advance notice",
            )
        return SlotValidation.ok()
