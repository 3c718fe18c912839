# backend/interview_booking/services/booking_service.py
"""
Booking ledger.

Owns the rule that a slot (booking link, date, time) is held by at most
one confirmed booking, and the three mutations on it: create, cancel
and reschedule.

The availability check before each write is a fast path for a friendly
error. The actual guarantee is the partial unique index on confirmed
bookings: an IntegrityError from the insert or the reschedule update is
the one source of SlotConflictException.
"""

from dataclasses import dataclass
from datetime import date
import secrets
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    DomainException,
    GoneException,
    InvalidTokenException,
    NotFoundException,
    SlotConflictException,
    ValidationException,
)
from ..core.slot_lock import SlotLock, slot_lock_key
from ..core.timezone_utils import slot_start
from ..models.booking import Booking
from ..models.booking_link import BookingLink
from ..repositories.factory import RepositoryFactory
from .availability_cache_service import AvailabilityCacheService
from .availability_calculator import SlotRejection, SlotValidation
from .availability_service import AvailabilityService
from .base import BaseService
from .slot_generator import normalize_time, parse_time

CANDIDATE_FIELDS = ("first_name", "last_name", "email", "phone", "role", "notes")


@dataclass(frozen=True)
class RescheduleResult:
    booking: Booking
    old_date: date
    old_time: str


class BookingService(BaseService):
    """Create, cancel and reschedule bookings."""

    def __init__(
        self,
        db: Session,
        availability_service: AvailabilityService,
        cache_service: AvailabilityCacheService,
        slot_lock: Optional[SlotLock] = None,
        booking_repository=None,
        booking_link_repository=None,
    ):
        super().__init__(db)
        self.availability_service = availability_service
        self.cache_service = cache_service
        self.calculator = availability_service.calculator
        self.slot_lock = slot_lock or SlotLock(None)
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.booking_link_repository = (
            booking_link_repository or RepositoryFactory.create_booking_link_repository(db)
        )

    # Helpers

    def _slot_conflict(self, link_id: str, on_date: date, start_time: str, message=None):
        return SlotConflictException(
            message,
            details={"bookingLinkId": link_id, "date": on_date.isoformat(), "time": start_time},
        )

    def _is_past(self, on_date: date, start_time: str) -> bool:
        return slot_start(on_date, parse_time(start_time)) < self.calculator.now()

    def _get_booking(self, booking_id: str) -> Booking:
        booking = self.booking_repository.get_by_id(booking_id)
        if not booking:
            raise NotFoundException(
                "No booking found with this ID",
                code="BOOKING_NOT_FOUND",
                details={"bookingId": booking_id},
            )
        return booking

    def authorize(self, booking_id: str, token: str) -> Booking:
        """
        Load a booking and check its cancellation token.

        Raises:
            NotFoundException: Unknown booking
            InvalidTokenException: Token does not match
        """
        booking = self._get_booking(booking_id)
        if not secrets.compare_digest(
            str(booking.cancellation_token).encode(), str(token).encode()
        ):
            self.logger.warning(f"Invalid cancellation token for booking {booking_id}")
            raise InvalidTokenException()
        return booking

    def ensure_modifiable(self, booking: Booking) -> None:
        """Cancelled and past bookings accept no further transitions."""
        if booking.is_cancelled:
            raise GoneException(
                "This booking has already been cancelled", code="BOOKING_CANCELLED"
            )
        if self._is_past(booking.selected_date, booking.selected_time):
            raise GoneException(
                "Cannot modify bookings that have already occurred", code="BOOKING_IN_PAST"
            )

    def _rejection_error(
        self, validation: SlotValidation, link_id: str, on_date: date, start_time: str
    ) -> DomainException:
        if validation.reason is SlotRejection.ALREADY_BOOKED:
            return self._slot_conflict(link_id, on_date, start_time, validation.message)
        return ValidationException(
            validation.message or "This time slot is not available",
            code=f"SLOT_{validation.reason.value.upper()}" if validation.reason else "SLOT_INVALID",
        )

    # Mutations

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        link: BookingLink,
        on_date: date,
        start_time: str,
        candidate: Dict[str, Any],
    ) -> Booking:
        """
        Book a slot for a candidate.

        Raises:
            ValidationException: The slot breaks a booking rule
            SlotConflictException: A confirmed booking already holds the slot
        """
        start_time = normalize_time(start_time)

        validation = self.availability_service.validate_booking_slot(link, on_date, start_time)
        if not validation.valid:
            raise self._rejection_error(validation, link.id, on_date, start_time)

        data = {field: candidate.get(field) for field in CANDIDATE_FIELDS}
        with self.slot_lock.hold(slot_lock_key(link.id, on_date, start_time)) as acquired:
            if not acquired:
                raise self._slot_conflict(link.id, on_date, start_time)
            with self.transaction():
                try:
                    booking = self.booking_repository.create(
                        booking_link_id=link.id,
                        selected_date=on_date,
                        selected_time=start_time,
                        **data,
                    )
                except IntegrityError as exc:
                    raise self._slot_conflict(link.id, on_date, start_time) from exc

        self.log_operation(
            "create_booking",
            booking_id=booking.id,
            booking_link_id=link.id,
            date=on_date.isoformat(),
            time=start_time,
        )
        self.cache_service.invalidate_for_booking_event(link.id, on_date, "create")
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, booking_id: str, token: str, reason: Optional[str] = None) -> Booking:
        """
        Cancel a confirmed, future booking.

        Raises:
            NotFoundException, InvalidTokenException, GoneException
        """
        booking = self.authorize(booking_id, token)
        self.ensure_modifiable(booking)

        with self.transaction():
            self.booking_repository.mark_cancelled(booking, reason)

        self.log_operation(
            "cancel_booking",
            booking_id=booking.id,
            booking_link_id=booking.booking_link_id,
            reason=reason or "No reason provided",
        )
        self.cache_service.invalidate_for_booking_event(
            booking.booking_link_id, booking.selected_date, "cancel"
        )
        return booking

    @BaseService.measure_operation("reschedule_booking")
    def reschedule_booking(
        self, booking_id: str, token: str, new_date: date, new_time: str
    ) -> RescheduleResult:
        """
        Move a booking to another slot of the same link.

        The booking keeps its id, token and candidate data; only the slot
        key changes, in one row update.

        Raises:
            InvalidTokenException: Token does not match
            GoneException: Booking cancelled or already past
            ValidationException: New slot in the past or same as current
            SlotConflictException: New slot not offerable or taken
        """
        new_time = normalize_time(new_time)
        booking = self.authorize(booking_id, token)

        if booking.is_cancelled:
            raise GoneException("Cannot reschedule a cancelled booking", code="BOOKING_CANCELLED")
        if self._is_past(new_date, new_time):
            raise ValidationException(
                "Cannot reschedule to a date/time in the past", code="INVALID_NEW_SLOT"
            )
        if self._is_past(booking.selected_date, booking.selected_time):
            raise GoneException(
                "Cannot reschedule bookings that have already occurred", code="BOOKING_IN_PAST"
            )
        if booking.selected_date == new_date and booking.selected_time == new_time:
            raise ValidationException(
                "The new time is the same as the current booking", code="SAME_SLOT"
            )

        link = self.booking_link_repository.get_by_id(booking.booking_link_id)
        if not link:
            raise NotFoundException("Booking link not found", code="BOOKING_LINK_NOT_FOUND")

        validation = self.availability_service.validate_booking_slot(link, new_date, new_time)
        if not validation.valid:
            raise self._slot_conflict(link.id, new_date, new_time, validation.message)

        old_date, old_time = booking.selected_date, booking.selected_time
        link_id = link.id
        with self.slot_lock.hold(slot_lock_key(link_id, new_date, new_time)) as acquired:
            if not acquired:
                raise self._slot_conflict(link_id, new_date, new_time)
            with self.transaction():
                try:
                    self.booking_repository.move_to_slot(booking, new_date, new_time)
                except IntegrityError as exc:
                    raise self._slot_conflict(link_id, new_date, new_time) from exc

        self.log_operation(
            "reschedule_booking",
            booking_id=booking.id,
            booking_link_id=link.id,
            old_slot=f"{old_date.isoformat()} {old_time}",
            new_slot=f"{new_date.isoformat()} {new_time}",
        )
        self.cache_service.invalidate_for_booking_event(
            link.id, new_date, "reschedule", previous_date=old_date
        )
        return RescheduleResult(booking=booking, old_date=old_date, old_time=old_time)
