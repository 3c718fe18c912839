# backend/interview_booking/routes/booking_links.py
"""
Booking link administration routes, including month-cache maintenance.
"""

import asyncio
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ..api.dependencies import get_booking_link_service, get_cache_service
from ..core.exceptions import DomainException
from ..schemas.booking_link import BookingLinkCreate, BookingLinkResponse, BookingLinkUpdate
from ..services.availability_cache_service import AvailabilityCacheService
from ..services.booking_link_service import BookingLinkService
from .utils import handle_domain_exception

router = APIRouter(prefix="/api/booking-links", tags=["booking-links"])


@router.post("", response_model=BookingLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_link(
    payload: BookingLinkCreate,
    link_service: BookingLinkService = Depends(get_booking_link_service),
):
    try:
        return await asyncio.to_thread(link_service.create_link, payload.model_dump())
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=List[BookingLinkResponse])
async def list_booking_links(link_service: BookingLinkService = Depends(get_booking_link_service)):
    return await asyncio.to_thread(link_service.list_links)


@router.get("/{booking_link_id}", response_model=BookingLinkResponse)
async def get_booking_link(
    booking_link_id: str,
    link_service: BookingLinkService = Depends(get_booking_link_service),
):
    try:
        return await asyncio.to_thread(link_service.get_link, booking_link_id)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{booking_link_id}", response_model=BookingLinkResponse)
async def update_booking_link(
    booking_link_id: str,
    payload: BookingLinkUpdate,
    link_service: BookingLinkService = Depends(get_booking_link_service),
):
    try:
        return await asyncio.to_thread(
            link_service.update_link, booking_link_id, payload.model_dump(exclude_unset=True)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{booking_link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking_link(
    booking_link_id: str,
    link_service: BookingLinkService = Depends(get_booking_link_service),
):
    try:
        await asyncio.to_thread(link_service.delete_link, booking_link_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_link_id}/cache/warm")
async def warm_cache(
    booking_link_id: str,
    months_ahead: Optional[int] = Query(None, ge=0, le=24, alias="monthsAhead"),
    link_service: BookingLinkService = Depends(get_booking_link_service),
    cache_service: AvailabilityCacheService = Depends(get_cache_service),
) -> Dict[str, Any]:
    try:
        link = await asyncio.to_thread(link_service.get_link, booking_link_id)
        warmed = await asyncio.to_thread(cache_service.warm_cache, link.id, months_ahead)
        return {"bookingLinkId": link.id, "warmedMonths": warmed}
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_link_id}/cache/stats")
async def get_cache_stats(
    booking_link_id: str,
    link_service: BookingLinkService = Depends(get_booking_link_service),
    cache_service: AvailabilityCacheService = Depends(get_cache_service),
) -> Dict[str, Any]:
    try:
        link = await asyncio.to_thread(link_service.get_link, booking_link_id)
        return await asyncio.to_thread(cache_service.get_cache_stats, link.id)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/cache/purge")
async def purge_expired_cache(
    cache_service: AvailabilityCacheService = Depends(get_cache_service),
) -> Dict[str, int]:
    """Delete month cache rows past their expiry."""
    purged = await asyncio.to_thread(cache_service.purge_expired)
    return {"purgedEntries": purged}
