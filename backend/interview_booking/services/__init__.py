"""Service layer for the availability and booking engine."""

from .availability_cache_service import AvailabilityCacheService
from .availability_calculator import AvailabilityCalculator, SlotRejection, SlotValidation
from .availability_service import AvailabilityService
from .base import BaseService
from .booking_link_service import BookingLinkService
from .booking_management_service import BookingManagementService
from .booking_service import BookingService
from .template_service import TemplateService

__all__ = [
    "AvailabilityCacheService",
    "AvailabilityCalculator",
    "AvailabilityService",
    "BaseService",
    "BookingLinkService",
    "BookingManagementService",
    "BookingService",
    "SlotRejection",
    "SlotValidation",
    "TemplateService",
]
