# backend/interview_booking/routes/booking_management.py
"""
Candidate booking management routes.

Every endpoint requires the booking's cancellation token.

Router Endpoints:
    GET /booking/{booking_id}/details?token= - Booking and link summary
    POST /booking/{booking_id}/cancel - Cancel a booking
    POST /booking/{booking_id}/reschedule - Move a booking to another slot
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ..api.dependencies import get_booking_management_service
from ..core.exceptions import DomainException
from ..core.identifiers import EntityId, EntityKind
from ..schemas.booking import CancelBookingRequest, RescheduleBookingRequest
from ..services.booking_management_service import BookingManagementService
from .utils import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/public", tags=["booking-management"])


@router.get("/booking/{booking_id}/details")
async def get_booking_details(
    booking_id: str,
    token: Optional[str] = Query(None),
    management_service: BookingManagementService = Depends(get_booking_management_service),
) -> Dict[str, Any]:
    try:
        EntityId.parse(booking_id, EntityKind.BOOKING)
        return await asyncio.to_thread(management_service.get_details, booking_id, token)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/booking/{booking_id}/cancel")
async def cancel_booking(
    booking_id: str,
    payload: CancelBookingRequest,
    management_service: BookingManagementService = Depends(get_booking_management_service),
) -> Dict[str, Any]:
    try:
        EntityId.parse(booking_id, EntityKind.BOOKING)
        result = await asyncio.to_thread(
            management_service.cancel, booking_id, payload.token, payload.reason
        )
        return {**result, "message": "Booking cancelled successfully"}
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/booking/{booking_id}/reschedule")
async def reschedule_booking(
    booking_id: str,
    payload: RescheduleBookingRequest,
    management_service: BookingManagementService = Depends(get_booking_management_service),
) -> Dict[str, Any]:
    try:
        EntityId.parse(booking_id, EntityKind.BOOKING)
        result = await asyncio.to_thread(
            management_service.reschedule,
            booking_id,
            payload.token,
            payload.new_date,
            payload.new_time,
        )
        return {**result, "message": "Booking rescheduled successfully"}
    except DomainException as e:
        handle_domain_exception(e)
