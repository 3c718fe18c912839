# backend/interview_booking/models/template.py
"""
Template model.

A template owns the weekly recurring schedule that booking links publish.
``weekly_schedule`` maps each weekday name to an ordered list of
``{"startTime": "HH:MM", "endTime": "HH:MM"}`` ranges.
"""

from sqlalchemy import JSON, Column, Date, DateTime, String, Text
from sqlalchemy.sql import func

from ..core.identifiers import generate_template_id
from ..database import Base


class Template(Base):
    """Weekly availability template."""

    __tablename__ = "templates"

    id = Column(String(32), primary_key=True, default=generate_template_id)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    weekly_schedule = Column(JSON, nullable=False, default=dict)
    # ISO dates, sorted and deduplicated on write
    blackout_days = Column(JSON, nullable=False, default=list)
    booking_cutoff_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Template {self.id}: {self.name}>"
