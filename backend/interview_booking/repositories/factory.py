# backend/interview_booking/repositories/factory.py
"""
Repository Factory.

Single place where services obtain repositories, which keeps service
constructors short and makes repositories easy to swap in tests.
"""

from sqlalchemy.orm import Session


class RepositoryFactory:
    """Factory for creating repository instances."""

    @staticmethod
    def create_template_repository(db: Session):
        from .template_repository import TemplateRepository

        return TemplateRepository(db)

    @staticmethod
    def create_booking_link_repository(db: Session):
        from .booking_link_repository import BookingLinkRepository

        return BookingLinkRepository(db)

    @staticmethod
    def create_booking_repository(db: Session):
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_availability_cache_repository(db: Session):
        from .availability_cache_repository import AvailabilityCacheRepository

        return AvailabilityCacheRepository(db)
