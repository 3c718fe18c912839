"""Data access layer."""

from .availability_cache_repository import AvailabilityCacheRepository
from .base_repository import BaseRepository, IRepository
from .booking_link_repository import BookingLinkRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .template_repository import TemplateRepository

__all__ = [
    "AvailabilityCacheRepository",
    "BaseRepository",
    "BookingLinkRepository",
    "BookingRepository",
    "IRepository",
    "RepositoryFactory",
    "TemplateRepository",
]
