# backend/interview_booking/services/booking_link_service.py
"""
Booking link administration.

Enforces the link rules (template reference, slug shape and uniqueness,
fixed duration, advance-notice options) and keeps the month cache in
step with changes to the fields that affect availability.
"""

import re
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.constants import (
    ADVANCE_HOURS_OPTIONS,
    ALLOWED_LINK_DURATIONS,
    MAX_SLUG_LENGTH,
    MIN_SLUG_LENGTH,
    SLUG_PATTERN,
)
from ..core.exceptions import (
    ConflictException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from ..core.identifiers import EntityId, EntityKind
from ..models.booking_link import BookingLink
from ..repositories.factory import RepositoryFactory
from .availability_cache_service import AvailabilityCacheService
from .base import BaseService

_SLUG_RE = re.compile(SLUG_PATTERN)


class BookingLinkService(BaseService):
    def __init__(
        self,
        db: Session,
        cache_service: AvailabilityCacheService,
        booking_link_repository=None,
        template_repository=None,
    ):
        super().__init__(db)
        self.cache_service = cache_service
        self.booking_link_repository = (
            booking_link_repository or RepositoryFactory.create_booking_link_repository(db)
        )
        self.template_repository = (
            template_repository or RepositoryFactory.create_template_repository(db)
        )

    def get_link(self, booking_link_id: str) -> BookingLink:
        EntityId.parse(booking_link_id, EntityKind.BOOKING_LINK)
        link = self.booking_link_repository.get_by_id(booking_link_id)
        if not link:
            raise NotFoundException("Booking link not found", code="BOOKING_LINK_NOT_FOUND")
        return link

    def list_links(self) -> List[BookingLink]:
        return self.booking_link_repository.get_all(limit=1000)

    # Validation

    def _check_template(self, template_id: str) -> None:
        EntityId.parse(template_id, EntityKind.TEMPLATE)
        if not self.template_repository.get_by_id(template_id):
            raise NotFoundException("Template not found", code="TEMPLATE_NOT_FOUND")

    def _check_slug(self, slug: str, current_id: Optional[str] = None) -> str:
        slug = slug.strip().lower()
        if not (MIN_SLUG_LENGTH <= len(slug) <= MAX_SLUG_LENGTH) or not _SLUG_RE.match(slug):
            raise ValidationException(
                "URL slug must be 3-50 characters of lowercase letters, digits and hyphens",
                code="INVALID_SLUG",
            )
        existing = self.booking_link_repository.get_by_slug(slug)
        if existing and existing.id != current_id:
            raise ConflictException(
                "A booking link with this URL already exists", code="SLUG_TAKEN"
            )
        return slug

    def _check_name(self, name: str, current_id: Optional[str] = None) -> None:
        existing = self.booking_link_repository.get_by_name(name)
        if existing and existing.id != current_id:
            raise ConflictException(
                "A booking link with this name already exists", code="LINK_NAME_TAKEN"
            )

    @staticmethod
    def _advance_policy(require: bool, hours: Optional[int]) -> int:
        """Resolve advance hours: a listed option when required, else 0."""
        if not require:
            return 0
        if hours not in ADVANCE_HOURS_OPTIONS:
            raise ValidationException(
                f"Advance hours must be one of {sorted(ADVANCE_HOURS_OPTIONS)}",
                code="INVALID_ADVANCE_HOURS",
            )
        return hours

    def _validated(self, values: Dict[str, Any], current: Optional[BookingLink] = None) -> Dict[str, Any]:
        current_id = current.id if current else None
        result = dict(values)

        if "template_id" in result:
            self._check_template(result["template_id"])
        if "url_slug" in result:
            result["url_slug"] = self._check_slug(result["url_slug"], current_id)
        if "name" in result:
            self._check_name(result["name"], current_id)
        if "duration" in result and result["duration"] not in ALLOWED_LINK_DURATIONS:
            raise ValidationException("Duration must be 30 minutes", code="INVALID_DURATION")

        require = result.get(
            "require_advance_booking", current.require_advance_booking if current else False
        )
        hours = result.get("advance_hours", current.advance_hours if current else 0)
        result["require_advance_booking"] = bool(require)
        result["advance_hours"] = self._advance_policy(bool(require), hours)
        return result

    # Mutations

    @BaseService.measure_operation("create_booking_link")
    def create_link(self, data: Dict[str, Any]) -> BookingLink:
        values = self._validated(data)
        with self.transaction():
            try:
                link = self.booking_link_repository.create(**values)
            except RepositoryException as exc:
                if not isinstance(exc.__cause__, IntegrityError):
                    raise
                raise ConflictException(
                    "A booking link with this URL or name already exists", code="SLUG_TAKEN"
                ) from exc
        self.log_operation("create_booking_link", booking_link_id=link.id, slug=link.url_slug)
        return link

    @BaseService.measure_operation("update_booking_link")
    def update_link(self, booking_link_id: str, data: Dict[str, Any]) -> BookingLink:
        """
        Apply a partial update.

        The link's upcoming cached months are invalidated only when
        templateId, requireAdvanceBooking, advanceHours or isActive changed.
        """
        link = self.get_link(booking_link_id)
        before = link.cache_fingerprint()
        values = self._validated(data, current=link)

        with self.transaction():
            self.booking_link_repository.update(link.id, **values)

        self.log_operation("update_booking_link", booking_link_id=link.id)
        self.cache_service.invalidate_for_link_change(link.id, before, link.cache_fingerprint())
        return link

    @BaseService.measure_operation("delete_booking_link")
    def delete_link(self, booking_link_id: str) -> None:
        """Invalidate the link's cache first, then delete it."""
        link = self.get_link(booking_link_id)
        self.cache_service.invalidate_link(link.id)
        with self.transaction():
            self.booking_link_repository.delete(link.id)
        self.log_operation("delete_booking_link", booking_link_id=booking_link_id)
