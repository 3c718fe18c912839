# backend/interview_booking/schemas/template.py
"""Template request and response schemas."""

from datetime import date, datetime
import re
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_NAME_LENGTH, TIME_PATTERN
from ._base import CamelModel, StrictRequestModel

_TIME_RE = re.compile(TIME_PATTERN)


class TimeRange(CamelModel):
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not _TIME_RE.match(value):
            raise ValueError("Time must be HH:MM (24-hour)")
        return value


class TemplateCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=1000)
    weekly_schedule: Dict[str, List[TimeRange]] = Field(default_factory=dict)
    blackout_days: List[date] = Field(default_factory=list)
    booking_cutoff_date: Optional[date] = None


class TemplateUpdate(StrictRequestModel):
    """Partial update; only fields that are sent are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=1000)
    weekly_schedule: Optional[Dict[str, List[TimeRange]]] = None
    blackout_days: Optional[List[date]] = None
    booking_cutoff_date: Optional[date] = None


class TemplateResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    weekly_schedule: Dict[str, List[TimeRange]]
    blackout_days: List[date]
    booking_cutoff_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
