# backend/interview_booking/schemas/booking_link.py
"""Booking link request and response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..core.constants import MAX_NAME_LENGTH, MAX_SLUG_LENGTH, MIN_SLUG_LENGTH, SLUG_PATTERN
from ._base import CamelModel, StrictRequestModel


class BookingLinkCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    template_id: str
    url_slug: str = Field(
        ..., min_length=MIN_SLUG_LENGTH, max_length=MAX_SLUG_LENGTH, pattern=SLUG_PATTERN
    )
    duration: int = 30
    require_advance_booking: bool = False
    advance_hours: int = 0
    is_active: bool = True


class BookingLinkUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    template_id: Optional[str] = None
    url_slug: Optional[str] = Field(
        None, min_length=MIN_SLUG_LENGTH, max_length=MAX_SLUG_LENGTH, pattern=SLUG_PATTERN
    )
    duration: Optional[int] = None
    require_advance_booking: Optional[bool] = None
    advance_hours: Optional[int] = None
    is_active: Optional[bool] = None


class BookingLinkResponse(CamelModel):
    id: str
    name: str
    template_id: str
    url_slug: str
    duration: int
    require_advance_booking: bool
    advance_hours: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PublicBookingLinkResponse(CamelModel):
    """What a candidate sees about a link."""

    id: str
    name: str
    url_slug: str
    duration: int
    require_advance_booking: bool
    advance_hours: int
