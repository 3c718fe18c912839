# backend/interview_booking/repositories/booking_repository.py
"""
Booking data access.

Slot uniqueness is enforced by the ``uq_bookings_confirmed_slot`` partial
index. ``create`` and ``move_to_slot`` surface a violation as the raw
IntegrityError so the ledger can translate it into a slot conflict.
"""

import calendar
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def create(self, **kwargs) -> Booking:
        try:
            return super().create(**kwargs)
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise exc.__cause__
            raise

    def find_confirmed_by_link_and_date(self, booking_link_id: str, on_date: date) -> List[Booking]:
        try:
            return (
                self.db.query(Booking)
                .filter(
                    Booking.booking_link_id == booking_link_id,
                    Booking.selected_date == on_date,
                    Booking.status == BookingStatus.CONFIRMED.value,
                )
                .order_by(Booking.selected_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for {booking_link_id} on {on_date}: {e}")
            raise RepositoryException(f"Failed to get bookings: {str(e)}")

    def find_confirmed_by_link_and_month(
        self, booking_link_id: str, year: int, month: int
    ) -> List[Booking]:
        first_day = date(year, month, 1)
        last_day = date(year, month, calendar.monthrange(year, month)[1])
        try:
            return (
                self.db.query(Booking)
                .filter(
                    Booking.booking_link_id == booking_link_id,
                    Booking.selected_date >= first_day,
                    Booking.selected_date <= last_day,
                    Booking.status == BookingStatus.CONFIRMED.value,
                )
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for {booking_link_id} {year}-{month}: {e}")
            raise RepositoryException(f"Failed to get bookings: {str(e)}")

    def get_confirmed_for_slot(
        self, booking_link_id: str, on_date: date, slot_time: str
    ) -> Optional[Booking]:
        return self.find_one_by(
            booking_link_id=booking_link_id,
            selected_date=on_date,
            selected_time=slot_time,
            status=BookingStatus.CONFIRMED.value,
        )

    def mark_cancelled(self, booking: Booking, reason: Optional[str] = None) -> Booking:
        booking_id = booking.id
        try:
            booking.cancel(reason)
            self.db.flush()
            return booking
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.error(f"Error cancelling booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to cancel booking: {str(e)}")

    def move_to_slot(self, booking: Booking, new_date: date, new_time: str) -> Booking:
        """
        Move a booking to a new slot key with a single-row update.

        The old key is released and the new key claimed in the same
        statement, so no reader can see both or neither held.

        Raises:
            IntegrityError: If another confirmed booking holds the new key
        """
        # A failed flush expires the instance, so nothing is read from it after one
        booking_id = booking.id
        try:
            booking.selected_date = new_date
            booking.selected_time = new_time
            self.db.flush()
            return booking
        except IntegrityError:
            self.db.rollback()
            self.logger.warning(f"Slot conflict moving booking {booking_id} to {new_date} {new_time}")
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            self.logger.error(f"Error rescheduling booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to reschedule booking: {str(e)}")
