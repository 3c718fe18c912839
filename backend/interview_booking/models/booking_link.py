# backend/interview_booking/models/booking_link.py
"""
BookingLink model.

``template_id`` carries no foreign key. References are validated through
the identifier scheme and an existence check in the service layer.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from ..core.identifiers import generate_booking_link_id
from ..database import Base

# Fields whose change alters computed availability
CACHE_AFFECTING_FIELDS = ("template_id", "require_advance_booking", "advance_hours", "is_active")


class BookingLink(Base):
    """Published booking link for a template."""

    __tablename__ = "booking_links"

    id = Column(String(32), primary_key=True, default=generate_booking_link_id)
    name = Column(String(100), nullable=False, unique=True)
    template_id = Column(String(32), nullable=False, index=True)
    url_slug = Column(String(50), nullable=False, unique=True, index=True)
    duration = Column(Integer, nullable=False, default=30)
    require_advance_booking = Column(Boolean, nullable=False, default=False)
    advance_hours = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("advance_hours IN (0, 6, 12, 24, 48)", name="ck_booking_links_advance_hours"),
        CheckConstraint("duration > 0", name="ck_booking_links_duration_positive"),
    )

    def cache_fingerprint(self) -> dict:
        """Snapshot of the fields that affect availability."""
        return {field: getattr(self, field) for field in CACHE_AFFECTING_FIELDS}

    def __repr__(self) -> str:
        return f"<BookingLink {self.id}: /{self.url_slug} template={self.template_id}>"
