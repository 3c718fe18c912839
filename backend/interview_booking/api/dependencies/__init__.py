"""FastAPI dependency providers."""

from .services import (
    get_availability_service,
    get_booking_link_service,
    get_booking_management_service,
    get_booking_service,
    get_cache_service,
    get_calculator,
    get_clock,
    get_slot_lock,
    get_template_service,
)

__all__ = [
    "get_availability_service",
    "get_booking_link_service",
    "get_booking_management_service",
    "get_booking_service",
    "get_cache_service",
    "get_calculator",
    "get_clock",
    "get_slot_lock",
    "get_template_service",
]
