# backend/interview_booking/repositories/availability_cache_repository.py
"""
Month availability cache persistence.

Exposes get/put/delete by (booking_link_id, year, month). Staleness and
recompute policy live in AvailabilityCacheService.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.constants import CACHE_VERSION
from ..core.exceptions import RepositoryException
from ..models.availability_cache import MonthAvailabilityCache


class AvailabilityCacheRepository:
    """Plain repository over the month_availability_cache table."""

    def __init__(self, db: Session):
        self.db = db

    def get_entry(self, booking_link_id: str, year: int, month: int) -> Optional[MonthAvailabilityCache]:
        try:
            return (
                self.db.query(MonthAvailabilityCache)
                .filter(
                    MonthAvailabilityCache.booking_link_id == booking_link_id,
                    MonthAvailabilityCache.year == year,
                    MonthAvailabilityCache.month == month,
                )
                .first()
            )
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to read cache entry: {str(e)}")

    def put_entry(
        self,
        booking_link_id: str,
        year: int,
        month: int,
        days: Dict[str, Dict[str, Any]],
        last_updated: datetime,
        expires_at: datetime,
    ) -> MonthAvailabilityCache:
        """Insert or replace the entry for one month."""
        try:
            entry = self.get_entry(booking_link_id, year, month)
            if entry is None:
                entry = MonthAvailabilityCache(
                    booking_link_id=booking_link_id,
                    year=year,
                    month=month,
                )
                self.db.add(entry)
            entry.days = days
            entry.cache_version = CACHE_VERSION
            entry.last_updated = last_updated
            entry.expires_at = expires_at
            self.db.flush()
            return entry
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryException(f"Failed to write cache entry: {str(e)}")

    def delete_entry(self, booking_link_id: str, year: int, month: int) -> bool:
        try:
            deleted = (
                self.db.query(MonthAvailabilityCache)
                .filter(
                    MonthAvailabilityCache.booking_link_id == booking_link_id,
                    MonthAvailabilityCache.year == year,
                    MonthAvailabilityCache.month == month,
                )
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted > 0
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryException(f"Failed to delete cache entry: {str(e)}")

    def list_for_link(self, booking_link_id: str) -> List[MonthAvailabilityCache]:
        return (
            self.db.query(MonthAvailabilityCache)
            .filter(MonthAvailabilityCache.booking_link_id == booking_link_id)
            .order_by(MonthAvailabilityCache.year, MonthAvailabilityCache.month)
            .all()
        )

    def delete_expired(self, now: datetime) -> int:
        try:
            deleted = (
                self.db.query(MonthAvailabilityCache)
                .filter(MonthAvailabilityCache.expires_at <= now)
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryException(f"Failed to purge cache entries: {str(e)}")
