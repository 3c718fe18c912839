# backend/interview_booking/repositories/template_repository.py
"""Template data access."""

from typing import Optional

from sqlalchemy.orm import Session

from ..models.template import Template
from .base_repository import BaseRepository


class TemplateRepository(BaseRepository[Template]):
    def __init__(self, db: Session):
        super().__init__(db, Template)

    def get_by_name(self, name: str) -> Optional[Template]:
        return self.find_one_by(name=name)
