# backend/interview_booking/services/booking_management_service.py
"""
Candidate-facing booking management.

Token-authorized view, cancel and reschedule, layered on the booking
ledger. Possession of the cancellation token is the only credential.
"""

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, ValidationException
from ..models.booking import Booking
from ..repositories.factory import RepositoryFactory
from .availability_service import parse_date
from .base import BaseService
from .booking_service import BookingService


def _require(value: Optional[str], message: str, code: str) -> str:
    if not value or not str(value).strip():
        raise ValidationException(message, code=code)
    return str(value).strip()


def booking_summary(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.id,
        "bookingLinkId": booking.booking_link_id,
        "selectedDate": booking.selected_date.isoformat(),
        "selectedTime": booking.selected_time,
        "firstName": booking.first_name,
        "lastName": booking.last_name,
        "email": booking.email,
        "phone": booking.phone,
        "role": booking.role,
        "notes": booking.notes,
        "status": booking.status,
        "cancellationReason": booking.cancellation_reason,
        "createdAt": booking.created_at.isoformat() if booking.created_at else None,
        "updatedAt": booking.updated_at.isoformat() if booking.updated_at else None,
    }


class BookingManagementService(BaseService):
    """View, cancel and reschedule a booking with its cancellation token."""

    def __init__(self, db: Session, booking_service: BookingService, booking_link_repository=None):
        super().__init__(db)
        self.booking_service = booking_service
        self.booking_link_repository = (
            booking_link_repository or RepositoryFactory.create_booking_link_repository(db)
        )

    @BaseService.measure_operation("get_details")
    def get_details(self, booking_id: str, token: Optional[str]) -> Dict[str, Any]:
        """
        Booking plus parent-link summary for the management page.

        Raises:
            ValidationException: Missing token
            InvalidTokenException: Token mismatch
            GoneException: Booking cancelled or in the past
        """
        token = _require(token, "A cancellation token is required", "MISSING_TOKEN")
        booking = self.booking_service.authorize(booking_id, token)
        self.booking_service.ensure_modifiable(booking)

        link = self.booking_link_repository.get_by_id(booking.booking_link_id)
        if not link:
            raise NotFoundException("Booking link not found", code="BOOKING_LINK_NOT_FOUND")

        return {
            "booking": booking_summary(booking),
            "bookingLink": {
                "name": link.name,
                "duration": link.duration,
                "urlSlug": link.url_slug,
            },
        }

    def cancel(self, booking_id: str, token: Optional[str], reason: Optional[str] = None) -> Dict[str, Any]:
        token = _require(token, "A cancellation token is required", "MISSING_TOKEN")
        booking = self.booking_service.cancel_booking(booking_id, token, reason)
        return {"booking": booking_summary(booking)}

    def reschedule(
        self,
        booking_id: str,
        token: Optional[str],
        new_date: Optional[str],
        new_time: Optional[str],
    ) -> Dict[str, Any]:
        token = _require(token, "A cancellation token is required", "MISSING_TOKEN")
        new_date = _require(new_date, "newDate is required", "MISSING_FIELDS")
        new_time = _require(new_time, "newTime is required", "MISSING_FIELDS")

        result = self.booking_service.reschedule_booking(
            booking_id, token, parse_date(new_date), new_time
        )
        booking = result.booking
        return {
            "booking": booking_summary(booking),
            "oldDateTime": {"date": result.old_date.isoformat(), "time": result.old_time},
            "newDateTime": {
                "date": booking.selected_date.isoformat(),
                "time": booking.selected_time,
            },
        }
