"""Collaborator interfaces and the provider that selects their adapters.

The workspace core depends only on these protocols:
- PersistenceProtocol: durable copy of rooms, folders and files
- ObjectStorageProtocol: file bytes addressed by storage key
- IdentityProtocol: who is acting

Adapters are chosen from settings.use_memory_store:
    - True: MemoryPersistence + MemoryObjectStorage (single process, lost on restart)
    - False: SqlPersistence + LocalObjectStorage

Usage:
    from dataroom.components.workspace.storage_provider import get_persistence

    persistence = get_persistence()
    rooms = await persistence.list_rooms(owner_id)
"""

from typing import Any, Protocol

from dataroom.components.workspace.models import File, Folder, Room
from dataroom.settings import settings
from dataroom.utils import get_logger

logger = get_logger(__name__)


class PersistenceProtocol(Protocol):
    """Durable record store. Every call may raise PersistenceError."""

    async def list_rooms(self, owner_id: str) -> list[Room]: ...
    async def list_folders(self, room_ids: list[str]) -> list[Folder]: ...
    async def list_files(self, room_ids: list[str]) -> list[File]: ...

    async def insert_room(self, room: Room) -> Room: ...
    async def insert_folder(self, folder: Folder) -> Folder: ...
    async def insert_file(self, file: File) -> File: ...

    async def update_room(self, room_id: str, fields: dict[str, Any]) -> Room: ...
    async def update_folder(self, folder_id: str, fields: dict[str, Any]) -> Folder: ...
    async def update_file(self, file_id: str, fields: dict[str, Any]) -> File: ...

    async def delete_room(self, room_id: str) -> None: ...
    async def delete_folder(self, folder_id: str) -> None: ...
    async def delete_file(self, file_id: str) -> None: ...


class ObjectStorageProtocol(Protocol):
    """Blob store for file contents."""

    async def put_object(self, key: str, data: bytes, content_type: str) -> None: ...
    async def get_object(self, key: str) -> bytes | None: ...
    async def remove_objects(self, keys: list[str]) -> list[str]: ...
    async def get_signed_url(self, key: str, ttl_seconds: int) -> str | None: ...


class IdentityProtocol(Protocol):
    """Source of the acting user id."""

    def current_user_id(self) -> str | None: ...


# Singleton adapter instances
_persistence: PersistenceProtocol | None = None
_object_storage: ObjectStorageProtocol | None = None
_storage_type: str | None = None


def get_persistence() -> PersistenceProtocol:
    """Get the persistence adapter selected by settings.use_memory_store."""
    global _persistence, _storage_type

    if _persistence is not None:
        return _persistence

    if settings.use_memory_store:
        from dataroom.services.memory_persistence import MemoryPersistence

        _storage_type = "memory"
        _persistence = MemoryPersistence()
        logger.info("Persistence: Using in-memory records (single instance only)")
    else:
        from dataroom.services.sql_persistence import SqlPersistence

        _storage_type = "sql"
        _persistence = SqlPersistence()
        logger.info("Persistence: Using SQL database")

    return _persistence


def get_object_storage() -> ObjectStorageProtocol:
    """Get the object storage adapter selected by settings.use_memory_store."""
    global _object_storage

    if _object_storage is not None:
        return _object_storage

    if settings.use_memory_store:
        from dataroom.services.object_storage import MemoryObjectStorage

        _object_storage = MemoryObjectStorage()
        logger.info("ObjectStorage: Using in-memory objects")
    else:
        from dataroom.services.object_storage import LocalObjectStorage

        _object_storage = LocalObjectStorage(settings.get_storage_root())
        logger.info(f"ObjectStorage: Using filesystem at {settings.get_storage_root()}")

    return _object_storage


def get_storage_type() -> str:
    """Get the current persistence type ('memory' or 'sql')."""
    if _storage_type is None:
        get_persistence()
    return _storage_type or "unknown"


def reset_providers() -> None:
    """Reset the adapter singletons (for testing)."""
    global _persistence, _object_storage, _storage_type
    _persistence = None
    _object_storage = None
    _storage_type = None
