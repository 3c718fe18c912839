# backend/interview_booking/repositories/base_repository.py
"""
Base Repository Pattern for the booking engine.

Repositories own data access only. They flush but never commit; the
service layer decides transaction boundaries.
"""

from abc import ABC, abstractmethod
import logging
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


class IRepository(ABC, Generic[T]):
    """Abstract repository interface defining core data access methods."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def create(self, **kwargs) -> T:
        """Create a new entity."""

    @abstractmethod
    def update(self, id: str, **kwargs) -> Optional[T]:
        """Update an entity, returning None when it does not exist."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete an entity, returning False when it does not exist."""


class BaseRepository(IRepository[T]):
    """
    Concrete base repository with the common CRUD operations.

    Attributes:
        db: SQLAlchemy session
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def get_by_id(self, id: str) -> Optional[T]:
        try:
            return self.db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting {self.model.__name__} by id {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve {self.model.__name__}: {str(e)}")

    def get_all(self, skip: int = 0, limit: int = 100) -> List[T]:
        try:
            return self.db.query(self.model).offset(skip).limit(limit).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting all {self.model.__name__}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve {self.model.__name__} list: {str(e)}")

    def create(self, **kwargs) -> T:
        """
        Create a new entity.

        Note: Does NOT commit - transaction management is handled by service layer.

        Raises:
            RepositoryException: On failure. Integrity violations keep the
                original IntegrityError as ``__cause__``.
        """
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()
            return entity
        except IntegrityError as exc:
            self.logger.warning(f"Integrity error creating {self.model.__name__}: {exc.orig}")
            self.db.rollback()
            raise RepositoryException(f"Integrity constraint violated: {exc.orig}") from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating {self.model.__name__}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create {self.model.__name__}: {str(e)}")

    def update(self, id: str, **kwargs) -> Optional[T]:
        """Update only the provided fields."""
        entity = self.get_by_id(id)
        if not entity:
            return None
        try:
            for key, value in kwargs.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            self.db.flush()
            return entity
        except IntegrityError as exc:
            self.logger.warning(f"Integrity error updating {self.model.__name__} {id}: {exc.orig}")
            self.db.rollback()
            raise RepositoryException(f"Integrity constraint violated: {exc.orig}") from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating {self.model.__name__} {id}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to update {self.model.__name__}: {str(e)}")

    def delete(self, id: str) -> bool:
        entity = self.get_by_id(id)
        if not entity:
            return False
        try:
            self.db.delete(entity)
            self.db.flush()
            return True
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting {self.model.__name__} {id}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to delete {self.model.__name__}: {str(e)}")

    def exists(self, **kwargs) -> bool:
        try:
            return self.db.query(self.model).filter_by(**kwargs).first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking existence: {str(e)}")
            raise RepositoryException(f"Failed to check existence: {str(e)}")

    def find_by(self, **kwargs) -> List[T]:
        try:
            return self.db.query(self.model).filter_by(**kwargs).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding by criteria: {str(e)}")
            raise RepositoryException(f"Failed to find records: {str(e)}")

    def find_one_by(self, **kwargs) -> Optional[T]:
        try:
            return self.db.query(self.model).filter_by(**kwargs).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding one by criteria: {str(e)}")
            raise RepositoryException(f"Failed to find record: {str(e)}")
