"""File repository for database operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from dataroom.db.models import FileModel
from dataroom.repositories.base import BaseRepository


class FileRepository(BaseRepository[FileModel]):
    """Repository for file metadata operations."""

    def __init__(self):
        super().__init__(FileModel)

    def list_by_rooms(self, db: Session, room_ids: list[str]) -> list[FileModel]:
        """List every file of the given rooms."""
        if not room_ids:
            return []
        stmt = (
            select(FileModel)
            .where(FileModel.data_room_id.in_(room_ids))
            .order_by(FileModel.created_at)
        )
        return list(db.execute(stmt).scalars().all())

    def list_in_folder(self, db: Session, folder_id: str) -> list[FileModel]:
        stmt = select(FileModel).where(FileModel.folder_id == folder_id)
        return list(db.execute(stmt).scalars().all())


# Singleton instance
file_repository = FileRepository()
