"""Repository layer for database access.

Repositories abstract the SQLAlchemy queries for each table.

Usage:
    from dataroom.repositories import room_repository

    rooms = room_repository.list_by_owner(db, owner_id)
"""

from dataroom.repositories.file import FileRepository, file_repository
from dataroom.repositories.folder import FolderRepository, folder_repository
from dataroom.repositories.room import RoomRepository, room_repository

__all__ = [
    "RoomRepository",
    "room_repository",
    "FolderRepository",
    "folder_repository",
    "FileRepository",
    "file_repository",
]
