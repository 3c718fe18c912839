# backend/interview_booking/services/availability_service.py
"""
Availability read path for booking links.

Month overviews are served from the month cache. Single-day slot lists
and single-slot validation are always computed live, because a candidate
acting on a specific time needs current truth rather than a cached count.
"""

from datetime import date
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import NotFoundException, ValidationException
from ..models.booking_link import BookingLink
from ..models.template import Template
from ..repositories.factory import RepositoryFactory
from .availability_cache_service import AvailabilityCacheService
from .availability_calculator import AvailabilityCalculator, SlotValidation
from .base import BaseService
from .slot_generator import TimeSlot, normalize_time


def parse_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD date.

    Raises:
        ValidationException: If the value is not a real calendar date
    """
    try:
        if len(value) != 10:
            raise ValueError(value)
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationException(
            f"Invalid date format: {value}. Expected YYYY-MM-DD",
            code="INVALID_DATE",
        )


class AvailabilityService(BaseService):
    """Resolves links and templates, then answers availability questions."""

    def __init__(
        self,
        db: Session,
        calculator: AvailabilityCalculator,
        cache_service: AvailabilityCacheService,
        booking_link_repository=None,
        template_repository=None,
        booking_repository=None,
    ):
        super().__init__(db)
        self.calculator = calculator
        self.cache_service = cache_service
        self.booking_link_repository = (
            booking_link_repository or RepositoryFactory.create_booking_link_repository(db)
        )
        self.template_repository = (
            template_repository or RepositoryFactory.create_template_repository(db)
        )
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )

    # Lookups

    def get_active_link_by_slug(self, slug: str) -> BookingLink:
        link = self.booking_link_repository.get_by_slug(slug)
        if not link or not link.is_active:
            raise NotFoundException(
                "Booking link not found or inactive",
                code="BOOKING_LINK_NOT_FOUND",
                details={"slug": slug},
            )
        return link

    def get_template_for_link(self, link: BookingLink) -> Template:
        template = self.template_repository.get_by_id(link.template_id)
        if not template:
            raise NotFoundException("Template not found", code="TEMPLATE_NOT_FOUND")
        return template

    def list_active_links(self) -> List[BookingLink]:
        return self.booking_link_repository.list_active()

    def _booked_times(self, booking_link_id: str, on_date: date) -> List[str]:
        return [
            booking.selected_time
            for booking in self.booking_repository.find_confirmed_by_link_and_date(
                booking_link_id, on_date
            )
        ]

    # Queries

    @BaseService.measure_operation("get_month_availability")
    def get_month_availability(self, link: BookingLink, year: int, month: int) -> Dict[str, Any]:
        if not settings.availability_min_year <= year <= settings.availability_max_year:
            raise ValidationException(
                f"Year must be between {settings.availability_min_year} "
                f"and {settings.availability_max_year}",
                code="INVALID_YEAR",
            )
        if not 1 <= month <= 12:
            raise ValidationException("Month must be between 1 and 12", code="INVALID_MONTH")

        return {
            "year": year,
            "month": month,
            "bookingLinkId": link.id,
            "availability": self.cache_service.month_availability(link.id, year, month),
        }

    @BaseService.measure_operation("get_day_slots")
    def get_day_slots(self, link: BookingLink, on_date: date) -> List[TimeSlot]:
        """Live slot list for one date; past dates are rejected."""
        if self.calculator.is_past_date(on_date):
            raise ValidationException("Cannot view slots for past dates", code="PAST_DATE")
        template = self.get_template_for_link(link)
        return self.calculator.available_slots_for_date(
            template, link, on_date, self._booked_times(link.id, on_date)
        )

    @BaseService.measure_operation("validate_booking_slot")
    def validate_booking_slot(self, link: BookingLink, on_date: date, start_time: str) -> SlotValidation:
        """Live check of one slot against every booking rule."""
        template = self.get_template_for_link(link)
        return self.calculator.validate_slot(
            template,
            link,
            on_date,
            normalize_time(start_time),
            self._booked_times(link.id, on_date),
        )

    def resolve_slot(self, on_date_raw: str, time_raw: str) -> Tuple[date, str]:
        """Parse and normalize a (date, time) pair from request input."""
        return parse_date(on_date_raw), normalize_time(time_raw)
