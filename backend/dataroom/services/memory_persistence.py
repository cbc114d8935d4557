"""In-memory persistence adapter.

Implements PersistenceProtocol with plain dictionaries for local-dev and
tests. Deletes cascade the same way the SQL schema does: a room takes its
folders and files along, a folder takes its subtree.

Note: Data is lost on restart and is NOT shared between instances.
"""

import threading
from typing import Any

from dataroom.components.workspace.errors import PersistenceError
from dataroom.components.workspace.models import File, Folder, Room


class MemoryPersistence:
    """Thread-safe in-memory record store.

    Uses a reentrant lock (RLock) to ensure thread safety for all operations.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._rooms: dict[str, Room] = {}
        self._folders: dict[str, Folder] = {}
        self._files: dict[str, File] = {}

    # Queries
    async def list_rooms(self, owner_id: str) -> list[Room]:
        with self._lock:
            rooms = [r for r in self._rooms.values() if r.ownerId == owner_id]
        return sorted(rooms, key=lambda r: r.createdAt, reverse=True)

    async def list_folders(self, room_ids: list[str]) -> list[Folder]:
        wanted = set(room_ids)
        with self._lock:
            return [f for f in self._folders.values() if f.dataRoomId in wanted]

    async def list_files(self, room_ids: list[str]) -> list[File]:
        wanted = set(room_ids)
        with self._lock:
            return [f for f in self._files.values() if f.dataRoomId in wanted]

    # Inserts
    async def insert_room(self, room: Room) -> Room:
        with self._lock:
            self._rooms[room.id] = room
        return room

    async def insert_folder(self, folder: Folder) -> Folder:
        with self._lock:
            if folder.dataRoomId not in self._rooms:
                raise PersistenceError(f"Data room {folder.dataRoomId} does not exist")
            if folder.parentId is not None and folder.parentId not in self._folders:
                raise PersistenceError(f"Parent folder {folder.parentId} does not exist")
            self._folders[folder.id] = folder
        return folder

    async def insert_file(self, file: File) -> File:
        with self._lock:
            if file.dataRoomId not in self._rooms:
                raise PersistenceError(f"Data room {file.dataRoomId} does not exist")
            if file.folderId is not None and file.folderId not in self._folders:
                raise PersistenceError(f"Folder {file.folderId} does not exist")
            self._files[file.id] = file
        return file

    # Updates
    async def update_room(self, room_id: str, fields: dict[str, Any]) -> Room:
        with self._lock:
            room = self._require(self._rooms, room_id, "Data room")
            updated = room.model_copy(update=fields)
            self._rooms[room_id] = updated
            return updated

    async def update_folder(self, folder_id: str, fields: dict[str, Any]) -> Folder:
        with self._lock:
            folder = self._require(self._folders, folder_id, "Folder")
            updated = folder.model_copy(update=fields)
            self._folders[folder_id] = updated
            return updated

    async def update_file(self, file_id: str, fields: dict[str, Any]) -> File:
        with self._lock:
            file = self._require(self._files, file_id, "File")
            updated = file.model_copy(update=fields)
            self._files[file_id] = updated
            return updated

    # Deletes (cascading)
    async def delete_room(self, room_id: str) -> None:
        with self._lock:
            self._rooms.pop(room_id, None)
            for fid in [f.id for f in self._folders.values() if f.dataRoomId == room_id]:
                del self._folders[fid]
            for fid in [f.id for f in self._files.values() if f.dataRoomId == room_id]:
                del self._files[fid]

    async def delete_folder(self, folder_id: str) -> None:
        with self._lock:
            doomed = {folder_id}
            pending = [folder_id]
            while pending:
                parent = pending.pop()
                for f in self._folders.values():
                    if f.parentId == parent and f.id not in doomed:
                        doomed.add(f.id)
                        pending.append(f.id)
            for fid in doomed:
                self._folders.pop(fid, None)
            for fid in [f.id for f in self._files.values() if f.folderId in doomed]:
                del self._files[fid]

    async def delete_file(self, file_id: str) -> None:
        with self._lock:
            self._files.pop(file_id, None)

    @staticmethod
    def _require(collection: dict, item_id: str, label: str):
        item = collection.get(item_id)
        if item is None:
            raise PersistenceError(f"{label} {item_id} does not exist")
        return item
