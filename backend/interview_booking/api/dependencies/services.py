# backend/interview_booking/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Services are built per request from the request's session. The only
process-wide object is the slot lock, which wraps a Redis connection
pool; it is constructed once and passed by reference.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.slot_lock import SlotLock
from ...core.timezone_utils import Clock, get_local_now
from ...database import get_db
from ...services.availability_cache_service import AvailabilityCacheService
from ...services.availability_calculator import AvailabilityCalculator
from ...services.availability_service import AvailabilityService
from ...services.booking_link_service import BookingLinkService
from ...services.booking_management_service import BookingManagementService
from ...services.booking_service import BookingService
from ...services.template_service import TemplateService


def get_clock() -> Clock:
    """Source of "now"; overridden in tests to freeze time."""
    return get_local_now


@lru_cache(maxsize=1)
def get_slot_lock() -> SlotLock:
    return SlotLock.from_url(settings.redis_url, ttl_s=settings.slot_lock_ttl_seconds)


def get_calculator(clock: Clock = Depends(get_clock)) -> AvailabilityCalculator:
    return AvailabilityCalculator(clock=clock)


def get_cache_service(
    db: Session = Depends(get_db),
    calculator: AvailabilityCalculator = Depends(get_calculator),
) -> AvailabilityCacheService:
    return AvailabilityCacheService(db, calculator)


def get_availability_service(
    db: Session = Depends(get_db),
    calculator: AvailabilityCalculator = Depends(get_calculator),
    cache_service: AvailabilityCacheService = Depends(get_cache_service),
) -> AvailabilityService:
    return AvailabilityService(db, calculator, cache_service)


def get_booking_service(
    db: Session = Depends(get_db),
    availability_service: AvailabilityService = Depends(get_availability_service),
    cache_service: AvailabilityCacheService = Depends(get_cache_service),
    slot_lock: SlotLock = Depends(get_slot_lock),
) -> BookingService:
    return BookingService(db, availability_service, cache_service, slot_lock)


def get_booking_management_service(
    db: Session = Depends(get_db),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingManagementService:
    return BookingManagementService(db, booking_service)


def get_template_service(
    db: Session = Depends(get_db),
    cache_service: AvailabilityCacheService = Depends(get_cache_service),
) -> TemplateService:
    return TemplateService(db, cache_service)


def get_booking_link_service(
    db: Session = Depends(get_db),
    cache_service: AvailabilityCacheService = Depends(get_cache_service),
) -> BookingLinkService:
    return BookingLinkService(db, cache_service)
