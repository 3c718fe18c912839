"""
Database models for the booking engine.

- Template: weekly schedule plus blackout days and cutoff date
- BookingLink: published, slug-addressed instance of a template
- Booking: a candidate's hold on one slot of a booking link
- MonthAvailabilityCache: derived per-month availability
"""

from .availability_cache import MonthAvailabilityCache
from .booking import Booking, BookingStatus
from .booking_link import BookingLink
from .template import Template

__all__ = [
    "Booking",
    "BookingLink",
    "BookingStatus",
    "MonthAvailabilityCache",
    "Template",
]
