# backend/interview_booking/services/template_service.py
"""
Template administration.

Only the parts that matter to availability are handled here: schedule
normalization on write and cache invalidation when a schedule, the
blackout days or the cutoff date change. Existing bookings are never
touched by a template edit; the edit affects future slot generation only.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    ConflictException,
    NotFoundException,
    RepositoryException,
)
from ..core.identifiers import EntityId, EntityKind
from ..models.template import Template
from ..repositories.factory import RepositoryFactory
from .availability_cache_service import AvailabilityCacheService
from .base import BaseService
from .slot_generator import validate_weekly_schedule

AVAILABILITY_FIELDS = ("weekly_schedule", "blackout_days", "booking_cutoff_date")


def normalize_blackout_days(days: Iterable[Any]) -> List[str]:
    """Sorted, deduplicated ISO dates."""
    normalized = set()
    for value in days or []:
        if not isinstance(value, date):
            value = date.fromisoformat(value)
        normalized.add(value.isoformat())
    return sorted(normalized)


class TemplateService(BaseService):
    def __init__(
        self,
        db: Session,
        cache_service: AvailabilityCacheService,
        template_repository=None,
        booking_link_repository=None,
    ):
        super().__init__(db)
        self.cache_service = cache_service
        self.template_repository = (
            template_repository or RepositoryFactory.create_template_repository(db)
        )
        self.booking_link_repository = (
            booking_link_repository or RepositoryFactory.create_booking_link_repository(db)
        )

    def get_template(self, template_id: str) -> Template:
        EntityId.parse(template_id, EntityKind.TEMPLATE)
        template = self.template_repository.get_by_id(template_id)
        if not template:
            raise NotFoundException("Template not found", code="TEMPLATE_NOT_FOUND")
        return template

    def list_templates(self) -> List[Template]:
        return self.template_repository.get_all(limit=1000)

    def _normalized(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result = dict(data)
        if "weekly_schedule" in result and result["weekly_schedule"] is not None:
            result["weekly_schedule"] = validate_weekly_schedule(result["weekly_schedule"])
        if "blackout_days" in result and result["blackout_days"] is not None:
            result["blackout_days"] = normalize_blackout_days(result["blackout_days"])
        return result

    def _ensure_unique_name(self, name: Optional[str], current_id: Optional[str] = None) -> None:
        if not name:
            return
        existing = self.template_repository.get_by_name(name)
        if existing and existing.id != current_id:
            raise ConflictException(
                "A template with this name already exists", code="TEMPLATE_NAME_TAKEN"
            )

    @BaseService.measure_operation("create_template")
    def create_template(self, data: Dict[str, Any]) -> Template:
        values = self._normalized(data)
        values.setdefault("weekly_schedule", validate_weekly_schedule({}))
        self._ensure_unique_name(values.get("name"))
        with self.transaction():
            try:
                template = self.template_repository.create(**values)
            except RepositoryException as exc:
                if not isinstance(exc.__cause__, IntegrityError):
                    raise
                raise ConflictException(
                    "A template with this name already exists", code="TEMPLATE_NAME_TAKEN"
                ) from exc
        self.log_operation("create_template", template_id=template.id)
        return template

    @BaseService.measure_operation("update_template")
    def update_template(self, template_id: str, data: Dict[str, Any]) -> Template:
        """
        Apply a partial update.

        Links using the template have their upcoming months invalidated
        when an availability field actually changed.
        """
        template = self.get_template(template_id)
        values = self._normalized(data)
        self._ensure_unique_name(values.get("name"), template.id)

        changed = [
            field
            for field in AVAILABILITY_FIELDS
            if field in values and values[field] != getattr(template, field)
        ]
        with self.transaction():
            self.template_repository.update(template.id, **values)

        self.log_operation("update_template", template_id=template.id, changed_fields=changed)
        if changed:
            self.cache_service.invalidate_for_template(template.id)
        return template

    @BaseService.measure_operation("delete_template")
    def delete_template(self, template_id: str) -> None:
        template = self.get_template(template_id)
        if self.booking_link_repository.list_by_template(template.id):
            raise ConflictException(
                "Template is used by one or more booking links", code="TEMPLATE_IN_USE"
            )
        with self.transaction():
            self.template_repository.delete(template.id)
        self.log_operation("delete_template", template_id=template.id)
