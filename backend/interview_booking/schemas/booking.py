# backend/interview_booking/schemas/booking.py
"""
Public booking schemas.

Token and slot fields on the management requests are optional at the
schema level so a missing value surfaces as a 400 from the service
rather than a generic 422.
"""

from typing import Optional

from pydantic import EmailStr, Field

from ..core.constants import MAX_NAME_LENGTH, MAX_NOTES_LENGTH, MAX_REASON_LENGTH
from ._base import CamelModel, StrictRequestModel


class BookingCreateRequest(StrictRequestModel):
    selected_date: str = Field(..., description="YYYY-MM-DD")
    selected_time: str = Field(..., description="HH:MM, 24-hour")
    first_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    last_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    role: Optional[str] = Field(None, max_length=MAX_NAME_LENGTH)
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)


class CancelBookingRequest(StrictRequestModel):
    token: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class RescheduleBookingRequest(StrictRequestModel):
    token: Optional[str] = None
    new_date: Optional[str] = None
    new_time: Optional[str] = None


class BookingCreatedResponse(CamelModel):
    id: str
    booking_link_id: str
    selected_date: str
    selected_time: str
    first_name: str
    last_name: str
    email: str
    status: str
    cancellation_token: str
