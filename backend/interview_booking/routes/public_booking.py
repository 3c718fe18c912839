# backend/interview_booking/routes/public_booking.py
"""
Public booking routes used by the candidate-facing booking pages.

Router Endpoints:
    GET /directory - Active booking links
    GET /booking/{slug} - Booking link summary
    GET /booking/{slug}/availability/{year}/{month} - Month overview (cached)
    GET /booking/{slug}/slots/{date} - Free slots for a date (live)
    GET /booking/{slug}/validate/{date}/{time} - Check one slot
    POST /booking/{slug}/book - Create a booking
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..api.dependencies import get_availability_service, get_booking_service
from ..core.exceptions import DomainException
from ..schemas.availability import (
    DaySlotsResponse,
    MonthAvailabilityResponse,
    SlotValidationResponse,
)
from ..schemas.booking import BookingCreatedResponse, BookingCreateRequest
from ..schemas.booking_link import PublicBookingLinkResponse
from ..services.availability_service import AvailabilityService, parse_date
from ..services.booking_service import CANDIDATE_FIELDS, BookingService
from .utils import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/public", tags=["public-booking"])


@router.get("/directory", response_model=List[PublicBookingLinkResponse])
async def get_directory(
    availability_service: AvailabilityService = Depends(get_availability_service),
):
    """List active booking links."""
    return await asyncio.to_thread(availability_service.list_active_links)


@router.get("/booking/{slug}", response_model=PublicBookingLinkResponse)
async def get_booking_link(
    slug: str,
    availability_service: AvailabilityService = Depends(get_availability_service),
):
    try:
        return await asyncio.to_thread(availability_service.get_active_link_by_slug, slug)
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/booking/{slug}/availability/{year}/{month}",
    response_model=MonthAvailabilityResponse,
)
async def get_month_availability(
    slug: str,
    year: int,
    month: int,
    availability_service: AvailabilityService = Depends(get_availability_service),
):
    """Day-by-day availability for a month, served from the month cache."""
    try:
        link = await asyncio.to_thread(availability_service.get_active_link_by_slug, slug)
        return await asyncio.to_thread(
            availability_service.get_month_availability, link, year, month
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/booking/{slug}/slots/{date}", response_model=DaySlotsResponse)
async def get_available_time_slots(
    slug: str,
    date: str,
    availability_service: AvailabilityService = Depends(get_availability_service),
):
    """Free slots for one date, always computed live."""
    try:
        on_date = parse_date(date)
        link = await asyncio.to_thread(availability_service.get_active_link_by_slug, slug)
        slots = await asyncio.to_thread(availability_service.get_day_slots, link, on_date)
        return {
            "date": on_date.isoformat(),
            "bookingLinkId": link.id,
            "timeSlots": [slot.to_dict() for slot in slots],
        }
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/booking/{slug}/validate/{date}/{time}",
    response_model=SlotValidationResponse,
    response_model_exclude_none=True,
)
async def validate_time_slot(
    slug: str,
    date: str,
    time: str,
    availability_service: AvailabilityService = Depends(get_availability_service),
):
    try:
        link = await asyncio.to_thread(availability_service.get_active_link_by_slug, slug)
        on_date, start_time = availability_service.resolve_slot(date, time)
        validation = await asyncio.to_thread(
            availability_service.validate_booking_slot, link, on_date, start_time
        )
        return validation.to_dict()
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/booking/{slug}/book",
    response_model=BookingCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    slug: str,
    payload: BookingCreateRequest,
    availability_service: AvailabilityService = Depends(get_availability_service),
    booking_service: BookingService = Depends(get_booking_service),
):
    """
    Book a slot.

    The slot is re-validated at commit time; a slot taken in the meantime
    returns 409.
    """
    try:
        link = await asyncio.to_thread(availability_service.get_active_link_by_slug, slug)
        on_date, start_time = availability_service.resolve_slot(
            payload.selected_date, payload.selected_time
        )
        candidate = payload.model_dump(include=set(CANDIDATE_FIELDS))
        booking = await asyncio.to_thread(
            booking_service.create_booking, link, on_date, start_time, candidate
        )
        return {
            "id": booking.id,
            "bookingLinkId": booking.booking_link_id,
            "selectedDate": booking.selected_date.isoformat(),
            "selectedTime": booking.selected_time,
            "firstName": booking.first_name,
            "lastName": booking.last_name,
            "email": booking.email,
            "status": booking.status,
            "cancellationToken": booking.cancellation_token,
        }
    except DomainException as e:
        handle_domain_exception(e)
