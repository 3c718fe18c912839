# backend/interview_booking/schemas/availability.py
"""Availability response schemas."""

from typing import List, Optional

from ._base import CamelModel


class DayAvailability(CamelModel):
    date: str
    available: bool
    total_slots: int
    available_slots: int


class MonthAvailabilityResponse(CamelModel):
    year: int
    month: int
    booking_link_id: str
    availability: List[DayAvailability]


class TimeSlotResponse(CamelModel):
    id: str
    start_time: str
    end_time: str
    available: bool


class DaySlotsResponse(CamelModel):
    date: str
    booking_link_id: str
    time_slots: List[TimeSlotResponse]


class SlotValidationResponse(CamelModel):
    valid: bool
    error: Optional[str] = None
