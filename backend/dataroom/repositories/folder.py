"""Folder repository for database operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from dataroom.db.models import FolderModel
from dataroom.repositories.base import BaseRepository


class FolderRepository(BaseRepository[FolderModel]):
    """Repository for folder operations."""

    def __init__(self):
        super().__init__(FolderModel)

    def list_by_rooms(self, db: Session, room_ids: list[str]) -> list[FolderModel]:
        """List every folder of the given rooms."""
        if not room_ids:
            return []
        stmt = (
            select(FolderModel)
            .where(FolderModel.data_room_id.in_(room_ids))
            .order_by(FolderModel.created_at)
        )
        return list(db.execute(stmt).scalars().all())

    def list_children(self, db: Session, parent_id: str) -> list[FolderModel]:
        """List the direct child folders of parent_id."""
        stmt = select(FolderModel).where(FolderModel.parent_id == parent_id)
        return list(db.execute(stmt).scalars().all())


# Singleton instance
folder_repository = FolderRepository()
