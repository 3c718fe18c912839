# backend/interview_booking/repositories/booking_link_repository.py
"""BookingLink data access."""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.booking_link import BookingLink
from .base_repository import BaseRepository


class BookingLinkRepository(BaseRepository[BookingLink]):
    def __init__(self, db: Session):
        super().__init__(db, BookingLink)

    def get_by_slug(self, slug: str) -> Optional[BookingLink]:
        return self.find_one_by(url_slug=slug.lower())

    def get_by_name(self, name: str) -> Optional[BookingLink]:
        return self.find_one_by(name=name)

    def list_by_template(self, template_id: str) -> List[BookingLink]:
        return self.find_by(template_id=template_id)

    def list_active(self) -> List[BookingLink]:
        return (
            self.db.query(BookingLink)
            .filter(BookingLink.is_active.is_(True))
            .order_by(BookingLink.name)
            .all()
        )
