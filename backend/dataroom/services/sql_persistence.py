"""SQL persistence adapter.

Implements PersistenceProtocol on top of the repositories. Each call runs in
its own session inside a worker thread; SQLAlchemy errors and missing rows
surface as PersistenceError. Folder and room deletes rely on the schema's
cascades to remove the subtree.
"""

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from dataroom.components.workspace.errors import PersistenceError
from dataroom.components.workspace.models import File, Folder, Room
from dataroom.db.models import FileModel, FolderModel, RoomModel
from dataroom.repositories import file_repository, folder_repository, room_repository
from dataroom.utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Workspace field name -> column name
_COLUMNS = {
    "name": "name",
    "description": "description",
    "ownerId": "owner_id",
    "parentId": "parent_id",
    "folderId": "folder_id",
    "dataRoomId": "data_room_id",
    "size": "size",
    "mimeType": "mime_type",
    "storageKey": "storage_key",
    "uploadedBy": "uploaded_by",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def _to_columns(fields: dict[str, Any]) -> dict[str, Any]:
    return {_COLUMNS[key]: value for key, value in fields.items() if key in _COLUMNS}


def room_from_row(row: RoomModel) -> Room:
    return Room(
        id=row.id,
        name=row.name,
        description=row.description,
        ownerId=row.owner_id,
        createdAt=row.created_at,
        updatedAt=row.updated_at,
    )


def folder_from_row(row: FolderModel) -> Folder:
    return Folder(
        id=row.id,
        name=row.name,
        parentId=row.parent_id,
        dataRoomId=row.data_room_id,
        createdAt=row.created_at,
        updatedAt=row.updated_at,
    )


def file_from_row(row: FileModel) -> File:
    return File(
        id=row.id,
        name=row.name,
        folderId=row.folder_id,
        dataRoomId=row.data_room_id,
        size=row.size,
        mimeType=row.mime_type,
        storageKey=row.storage_key,
        uploadedBy=row.uploaded_by or "",
        createdAt=row.created_at,
        updatedAt=row.updated_at,
    )


class SqlPersistence:
    """Record store backed by a SQLAlchemy database.

    Args:
        session_factory: Session factory to use; defaults to the application's
            configured database
    """

    def __init__(self, session_factory: sessionmaker | None = None):
        self._session_factory = session_factory

    def _new_session(self) -> Session:
        if self._session_factory is None:
            from dataroom.db.database import get_session_factory

            self._session_factory = get_session_factory()
        return self._session_factory()

    async def _run(self, action: str, work: Callable[[Session], T]) -> T:
        def run_in_session() -> T:
            db = self._new_session()
            try:
                return work(db)
            except SQLAlchemyError:
                db.rollback()
                raise
            finally:
                db.close()

        try:
            return await asyncio.to_thread(run_in_session)
        except SQLAlchemyError as e:
            logger.error(f"Database error during {action}: {e}")
            raise PersistenceError(f"Failed to {action}") from e

    # Queries
    async def list_rooms(self, owner_id: str) -> list[Room]:
        return await self._run(
            "list rooms",
            lambda db: [room_from_row(r) for r in room_repository.list_by_owner(db, owner_id)],
        )

    async def list_folders(self, room_ids: list[str]) -> list[Folder]:
        return await self._run(
            "list folders",
            lambda db: [folder_from_row(f) for f in folder_repository.list_by_rooms(db, room_ids)],
        )

    async def list_files(self, room_ids: list[str]) -> list[File]:
        return await self._run(
            "list files",
            lambda db: [file_from_row(f) for f in file_repository.list_by_rooms(db, room_ids)],
        )

    # Inserts
    async def insert_room(self, room: Room) -> Room:
        data = {"id": room.id, **_to_columns(room.model_dump(exclude={"id"}))}
        return await self._run("insert room", lambda db: room_from_row(room_repository.create(db, data)))

    async def insert_folder(self, folder: Folder) -> Folder:
        data = {"id": folder.id, **_to_columns(folder.model_dump(exclude={"id"}))}
        return await self._run(
            "insert folder", lambda db: folder_from_row(folder_repository.create(db, data))
        )

    async def insert_file(self, file: File) -> File:
        data = {"id": file.id, **_to_columns(file.model_dump(exclude={"id"}))}
        return await self._run("insert file", lambda db: file_from_row(file_repository.create(db, data)))

    # Updates
    async def update_room(self, room_id: str, fields: dict[str, Any]) -> Room:
        row = await self._run(
            "update room",
            lambda db: _converted(room_repository.update(db, room_id, _to_columns(fields)), room_from_row),
        )
        return _require(row, "Data room", room_id)

    async def update_folder(self, folder_id: str, fields: dict[str, Any]) -> Folder:
        row = await self._run(
            "update folder",
            lambda db: _converted(
                folder_repository.update(db, folder_id, _to_columns(fields)), folder_from_row
            ),
        )
        return _require(row, "Folder", folder_id)

    async def update_file(self, file_id: str, fields: dict[str, Any]) -> File:
        row = await self._run(
            "update file",
            lambda db: _converted(file_repository.update(db, file_id, _to_columns(fields)), file_from_row),
        )
        return _require(row, "File", file_id)

    # Deletes (idempotent)
    async def delete_room(self, room_id: str) -> None:
        await self._run("delete room", lambda db: room_repository.delete(db, room_id))

    async def delete_folder(self, folder_id: str) -> None:
        await self._run("delete folder", lambda db: folder_repository.delete(db, folder_id))

    async def delete_file(self, file_id: str) -> None:
        await self._run("delete file", lambda db: file_repository.delete(db, file_id))


def _converted(row, convert):
    return convert(row) if row is not None else None


def _require(item: T | None, label: str, item_id: str) -> T:
    if item is None:
        raise PersistenceError(f"{label} {item_id} does not exist")
    return item
