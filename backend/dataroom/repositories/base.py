"""Base repository class with common CRUD operations.

Repositories own the SQLAlchemy queries; they commit their own writes and
know nothing about pydantic models or workspace rules.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from dataroom.db.models import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations."""

    def __init__(self, model: type[ModelType]):
        self.model = model

    def get_by_id(self, db: Session, id: str) -> ModelType | None:
        return db.get(self.model, id)

    def get_all(self, db: Session, skip: int = 0, limit: int = 100) -> list[ModelType]:
        stmt = select(self.model).offset(skip).limit(limit)
        return list(db.execute(stmt).scalars().all())

    def create(self, db: Session, obj_in: dict[str, Any]) -> ModelType:
        """Insert a row and return it refreshed from the database."""
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, id: str, obj_in: dict[str, Any]) -> ModelType | None:
        """Set columns on an existing row.

        Returns:
            The updated row, or None if id does not exist
        """
        db_obj = db.get(self.model, id)
        if db_obj is None:
            return None
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, id: str) -> bool:
        """Delete a row, cascading to dependents.

        Returns:
            True if deleted, False if not found
        """
        obj = db.get(self.model, id)
        if obj is None:
            return False
        db.delete(obj)
        db.commit()
        return True

    def exists(self, db: Session, id: str) -> bool:
        return db.get(self.model, id) is not None
