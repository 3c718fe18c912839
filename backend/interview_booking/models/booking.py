# backend/interview_booking/models/booking.py
"""
Booking model.

A confirmed booking occupies the slot key (booking_link_id, selected_date,
selected_time). The partial unique index ``uq_bookings_confirmed_slot``
lets at most one confirmed booking hold a key; cancelled rows fall out of
the index so the slot can be taken again.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any, Optional
import uuid

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Index, String, Text
from sqlalchemy.sql import func, text

from ..core.identifiers import generate_booking_id
from ..database import Base

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"  # terminal


def _new_token() -> str:
    return str(uuid.uuid4())


class Booking(Base):
    """A candidate's booking of one slot."""

    __tablename__ = "bookings"

    id = Column(String(32), primary_key=True, default=generate_booking_id)
    booking_link_id = Column(String(32), nullable=False, index=True)

    # Slot occupancy key
    selected_date = Column(Date, nullable=False, index=True)
    selected_time = Column(String(5), nullable=False)  # zero-padded HH:MM

    # Candidate data
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    role = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value, index=True)
    # Generated once at creation, never rotated
    cancellation_token = Column(String(36), nullable=False, default=_new_token)
    cancellation_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("status IN ('confirmed', 'cancelled')", name="ck_bookings_status"),
        Index(
            "uq_bookings_confirmed_slot",
            "booking_link_id",
            "selected_date",
            "selected_time",
            unique=True,
            postgresql_where=text("status = 'confirmed'"),
            sqlite_where=text("status = 'confirmed'"),
        ),
        Index("ix_bookings_link_date", "booking_link_id", "selected_date"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.CONFIRMED.value
        if not self.cancellation_token:
            self.cancellation_token = _new_token()

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED.value

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED.value

    def cancel(self, reason: Optional[str] = None) -> None:
        """Move to the terminal cancelled state."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = datetime.now(timezone.utc)
        self.cancellation_reason = reason
        logger.info(f"Booking {self.id} cancelled")

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: link={self.booking_link_id}, "
            f"date={self.selected_date}, time={self.selected_time}, status={self.status}>"
        )
