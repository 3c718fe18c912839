# backend/interview_booking/models/availability_cache.py
"""
Month availability cache model.

Pure derived data: any row can be deleted and recomputed from templates,
booking links and bookings without loss.
"""

from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint

from ..database import Base


class MonthAvailabilityCache(Base):
    """Per-day availability of one booking link for one month."""

    __tablename__ = "month_availability_cache"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_link_id = Column(String(32), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)

    # {"1": {"available": bool, "slotsCount": int}, ...}
    days = Column(JSON, nullable=False, default=dict)
    cache_version = Column(Integer, nullable=False, default=1)

    last_updated = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("booking_link_id", "year", "month", name="uq_month_cache_link_month"),
    )

    def __repr__(self) -> str:
        return f"<MonthAvailabilityCache {self.booking_link_id} {self.year}-{self.month:02d}>"
