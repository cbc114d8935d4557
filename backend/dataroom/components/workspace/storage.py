"""Thread-safe in-memory entity store for workspace entities.

Holds three flat id-keyed collections (rooms, folders, files). Hierarchy is
never nested: folders point at their parent through parentId and files at
their folder through folderId.

The store is the canonical in-memory copy. It does not talk to persistence;
WorkspaceService commits to the persistence collaborator first and only then
applies the confirmed record here.
"""

import threading
from dataclasses import dataclass, field

from dataroom.components.workspace.models import File, Folder, Room


@dataclass(frozen=True)
class StoreSnapshot:
    """Point-in-time copy of the three collections for read-only derivation.

    Entities are replaced, never mutated in place, so a shallow copy of
    the mappings is a consistent view.
    """

    rooms: dict[str, Room] = field(default_factory=dict)
    folders: dict[str, Folder] = field(default_factory=dict)
    files: dict[str, File] = field(default_factory=dict)


class EntityStore:
    """Thread-safe in-memory storage for rooms, folders and files.

    Uses a reentrant lock (RLock) so each operation is atomic. Every mutation
    marks the store dirty until mark_clean() is called.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._rooms: dict[str, Room] = {}
        self._folders: dict[str, Folder] = {}
        self._files: dict[str, File] = {}
        self._dirty = False

    # Bulk operations
    def load(self, rooms: list[Room], folders: list[Folder], files: list[File]) -> None:
        """Replace all collections, e.g. with the durable copy at startup."""
        with self._lock:
            self._rooms = {r.id: r for r in rooms}
            self._folders = {f.id: f for f in folders}
            self._files = {f.id: f for f in files}
            self._dirty = False

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                rooms=dict(self._rooms),
                folders=dict(self._folders),
                files=dict(self._files),
            )

    @property
    def dirty(self) -> bool:
        with self._lock:
            return self._dirty

    def mark_clean(self) -> None:
        with self._lock:
            self._dirty = False

    # Room operations
    def add_room(self, room: Room) -> None:
        with self._lock:
            self._rooms[room.id] = room
            self._dirty = True

    def get_room(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def list_rooms(self, owner_id: str | None = None) -> list[Room]:
        """List rooms, optionally filtered by owner, newest first."""
        with self._lock:
            rooms = list(self._rooms.values())
        if owner_id:
            rooms = [r for r in rooms if r.ownerId == owner_id]
        return sorted(rooms, key=lambda r: r.createdAt, reverse=True)

    def update_room(self, room: Room) -> bool:
        """Replace an existing room. Returns False if it is not stored."""
        with self._lock:
            if room.id not in self._rooms:
                return False
            self._rooms[room.id] = room
            self._dirty = True
            return True

    def remove_room(self, room_id: str) -> tuple[list[str], list[str]]:
        """Remove a room and everything scoped to it.

        Returns:
            (folder_ids, file_ids) removed along with the room
        """
        with self._lock:
            self._rooms.pop(room_id, None)
            folder_ids = [fid for fid, f in self._folders.items() if f.dataRoomId == room_id]
            file_ids = [fid for fid, f in self._files.items() if f.dataRoomId == room_id]
            for fid in folder_ids:
                del self._folders[fid]
            for fid in file_ids:
                del self._files[fid]
            self._dirty = True
            return folder_ids, file_ids

    # Folder operations
    def add_folder(self, folder: Folder) -> None:
        with self._lock:
            self._folders[folder.id] = folder
            self._dirty = True

    def get_folder(self, folder_id: str) -> Folder | None:
        with self._lock:
            return self._folders.get(folder_id)

    def list_folders(self, data_room_id: str | None = None) -> list[Folder]:
        with self._lock:
            folders = list(self._folders.values())
        if data_room_id:
            folders = [f for f in folders if f.dataRoomId == data_room_id]
        return folders

    def update_folder(self, folder: Folder) -> bool:
        with self._lock:
            if folder.id not in self._folders:
                return False
            self._folders[folder.id] = folder
            self._dirty = True
            return True

    def remove_folders(self, folder_ids: list[str]) -> None:
        with self._lock:
            for fid in folder_ids:
                self._folders.pop(fid, None)
            self._dirty = True

    # File operations
    def add_file(self, file: File) -> None:
        with self._lock:
            self._files[file.id] = file
            self._dirty = True

    def get_file(self, file_id: str) -> File | None:
        with self._lock:
            return self._files.get(file_id)

    def list_files(self, data_room_id: str | None = None) -> list[File]:
        with self._lock:
            files = list(self._files.values())
        if data_room_id:
            files = [f for f in files if f.dataRoomId == data_room_id]
        return files

    def update_file(self, file: File) -> bool:
        with self._lock:
            if file.id not in self._files:
                return False
            self._files[file.id] = file
            self._dirty = True
            return True

    def remove_files(self, file_ids: list[str]) -> None:
        with self._lock:
            for fid in file_ids:
                self._files.pop(fid, None)
            self._dirty = True

    # Utility
    def clear_all(self) -> None:
        """Clear all data (useful for testing)."""
        with self._lock:
            self._rooms.clear()
            self._folders.clear()
            self._files.clear()
            self._dirty = False
