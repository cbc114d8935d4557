"""Tests for MemoryPersistence.

Test cases for:
- Referential checks on insert
- Updates of missing records
- Cascading deletes
"""

import pytest

from dataroom.components.workspace import File, Folder, PersistenceError, Room
from dataroom.services.memory_persistence import MemoryPersistence


def _room(room_id: str, owner_id: str = "user_a", created_at: int = 1) -> Room:
    return Room(id=room_id, name=room_id, ownerId=owner_id, createdAt=created_at, updatedAt=created_at)


def _folder(folder_id: str, room_id: str = "room_1", parent_id: str | None = None) -> Folder:
    return Folder(id=folder_id, name=folder_id, parentId=parent_id, dataRoomId=room_id, createdAt=1, updatedAt=1)


def _file(file_id: str, room_id: str = "room_1", folder_id: str | None = None) -> File:
    return File(
        id=file_id,
        name=f"{file_id}.pdf",
        folderId=folder_id,
        dataRoomId=room_id,
        size=3,
        mimeType="application/pdf",
        storageKey=f"user_a/{room_id}/{file_id}.pdf",
        uploadedBy="user_a",
        createdAt=1,
        updatedAt=1,
    )


class TestMemoryPersistence:
    """In-memory record store."""

    @pytest.mark.asyncio
    async def test_rooms_listed_by_owner_newest_first(self):
        store = MemoryPersistence()
        await store.insert_room(_room("old", created_at=1))
        await store.insert_room(_room("new", created_at=2))
        await store.insert_room(_room("theirs", owner_id="user_b"))

        assert [r.id for r in await store.list_rooms("user_a")] == ["new", "old"]

    @pytest.mark.asyncio
    async def test_insert_requires_existing_room_and_parent(self):
        store = MemoryPersistence()

        with pytest.raises(PersistenceError):
            await store.insert_folder(_folder("f1"))

        await store.insert_room(_room("room_1"))
        with pytest.raises(PersistenceError):
            await store.insert_folder(_folder("f2", parent_id="missing"))
        with pytest.raises(PersistenceError):
            await store.insert_file(_file("x", folder_id="missing"))

    @pytest.mark.asyncio
    async def test_update_returns_new_record(self):
        store = MemoryPersistence()
        await store.insert_room(_room("room_1"))
        await store.insert_folder(_folder("f1"))

        updated = await store.update_folder("f1", {"name": "Renamed", "updatedAt": 5})

        assert updated.name == "Renamed"
        assert updated.updatedAt == 5
        assert (await store.list_folders(["room_1"]))[0].name == "Renamed"

    @pytest.mark.asyncio
    async def test_update_missing_raises(self):
        store = MemoryPersistence()
        with pytest.raises(PersistenceError):
            await store.update_file("ghost", {"name": "x.pdf"})

    @pytest.mark.asyncio
    async def test_delete_folder_cascades_to_subtree(self):
        store = MemoryPersistence()
        await store.insert_room(_room("room_1"))
        await store.insert_folder(_folder("a"))
        await store.insert_folder(_folder("b", parent_id="a"))
        await store.insert_folder(_folder("keep"))
        await store.insert_file(_file("in_b", folder_id="b"))
        await store.insert_file(_file("at_root"))

        await store.delete_folder("a")

        assert [f.id for f in await store.list_folders(["room_1"])] == ["keep"]
        assert [f.id for f in await store.list_files(["room_1"])] == ["at_root"]

    @pytest.mark.asyncio
    async def test_delete_room_cascades_and_is_idempotent(self):
        store = MemoryPersistence()
        await store.insert_room(_room("room_1"))
        await store.insert_room(_room("room_2"))
        await store.insert_folder(_folder("a"))
        await store.insert_file(_file("x"))
        await store.insert_file(_file("y", room_id="room_2"))

        await store.delete_room("room_1")
        await store.delete_room("room_1")

        assert [r.id for r in await store.list_rooms("user_a")] == ["room_2"]
        assert await store.list_folders(["room_1"]) == []
        assert [f.id for f in await store.list_files(["room_1", "room_2"])] == ["y"]
