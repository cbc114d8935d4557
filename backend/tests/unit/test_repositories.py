"""Tests for Repository layer.

These tests use SQLite in-memory database for fast testing
without requiring a database server.
"""

from sqlalchemy.orm import Session

from dataroom.db.models import FileModel, FolderModel, RoomModel
from dataroom.repositories import file_repository, folder_repository, room_repository
from dataroom.repositories.base import BaseRepository
from dataroom.utils import get_timestamp_ms


def _room_data(room_id: str, owner_id: str = "user_a", created_at: int | None = None) -> dict:
    now = created_at or get_timestamp_ms()
    return {
        "id": room_id,
        "name": f"Room {room_id}",
        "owner_id": owner_id,
        "created_at": now,
        "updated_at": now,
    }


def _folder_data(folder_id: str, room_id: str, parent_id: str | None = None) -> dict:
    now = get_timestamp_ms()
    return {
        "id": folder_id,
        "name": folder_id,
        "parent_id": parent_id,
        "data_room_id": room_id,
        "created_at": now,
        "updated_at": now,
    }


def _file_data(file_id: str, room_id: str, folder_id: str | None = None) -> dict:
    now = get_timestamp_ms()
    return {
        "id": file_id,
        "name": f"{file_id}.pdf",
        "folder_id": folder_id,
        "data_room_id": room_id,
        "size": 1024,
        "mime_type": "application/pdf",
        "storage_key": f"user_a/{room_id}/{file_id}.pdf",
        "uploaded_by": "user_a",
        "created_at": now,
        "updated_at": now,
    }


class TestBaseRepository:
    """Test BaseRepository CRUD operations."""

    def test_create_and_get(self, db_session: Session):
        """Create and retrieve entity."""
        repo = BaseRepository(RoomModel)

        room = repo.create(db_session, _room_data("room_001"))
        assert room.id == "room_001"

        retrieved = repo.get_by_id(db_session, "room_001")
        assert retrieved is not None
        assert retrieved.owner_id == "user_a"

    def test_get_nonexistent(self, db_session: Session):
        """Get non-existent entity returns None."""
        assert BaseRepository(RoomModel).get_by_id(db_session, "nonexistent") is None

    def test_update(self, db_session: Session):
        """Update entity."""
        repo = BaseRepository(RoomModel)
        repo.create(db_session, _room_data("room_002"))

        updated = repo.update(db_session, "room_002", {"name": "Renamed", "unknown_column": 1})

        assert updated.name == "Renamed"

    def test_update_nonexistent(self, db_session: Session):
        """Update of a missing row returns None."""
        assert BaseRepository(RoomModel).update(db_session, "ghost", {"name": "x"}) is None

    def test_delete(self, db_session: Session):
        """Delete entity."""
        repo = BaseRepository(RoomModel)
        repo.create(db_session, _room_data("room_003"))

        assert repo.delete(db_session, "room_003") is True
        assert repo.exists(db_session, "room_003") is False
        assert repo.delete(db_session, "room_003") is False

    def test_get_all(self, db_session: Session):
        """Paginated listing."""
        repo = BaseRepository(RoomModel)
        for i in range(3):
            repo.create(db_session, _room_data(f"room_{i}"))

        assert len(repo.get_all(db_session)) == 3
        assert len(repo.get_all(db_session, skip=1, limit=1)) == 1


class TestRoomRepository:
    """Test RoomRepository."""

    def test_list_by_owner_newest_first(self, db_session: Session):
        room_repository.create(db_session, _room_data("old", created_at=1000))
        room_repository.create(db_session, _room_data("new", created_at=2000))
        room_repository.create(db_session, _room_data("theirs", owner_id="user_b"))

        rooms = room_repository.list_by_owner(db_session, "user_a")

        assert [r.id for r in rooms] == ["new", "old"]


class TestFolderAndFileRepositories:
    """Test folder and file queries and cascades."""

    def test_list_by_rooms(self, db_session: Session):
        room_repository.create(db_session, _room_data("r1"))
        room_repository.create(db_session, _room_data("r2"))
        folder_repository.create(db_session, _folder_data("f1", "r1"))
        folder_repository.create(db_session, _folder_data("f2", "r2"))
        file_repository.create(db_session, _file_data("x", "r1", "f1"))

        assert [f.id for f in folder_repository.list_by_rooms(db_session, ["r1"])] == ["f1"]
        assert len(folder_repository.list_by_rooms(db_session, ["r1", "r2"])) == 2
        assert folder_repository.list_by_rooms(db_session, []) == []
        assert [f.id for f in file_repository.list_by_rooms(db_session, ["r1"])] == ["x"]

    def test_children_and_folder_files(self, db_session: Session):
        room_repository.create(db_session, _room_data("r1"))
        folder_repository.create(db_session, _folder_data("parent", "r1"))
        folder_repository.create(db_session, _folder_data("child", "r1", "parent"))
        file_repository.create(db_session, _file_data("x", "r1", "parent"))

        assert [f.id for f in folder_repository.list_children(db_session, "parent")] == ["child"]
        assert [f.id for f in file_repository.list_in_folder(db_session, "parent")] == ["x"]

    def test_delete_folder_cascades(self, db_session: Session):
        """Deleting a folder removes nested folders and their files."""
        room_repository.create(db_session, _room_data("r1"))
        folder_repository.create(db_session, _folder_data("a", "r1"))
        folder_repository.create(db_session, _folder_data("b", "r1", "a"))
        folder_repository.create(db_session, _folder_data("keep", "r1"))
        file_repository.create(db_session, _file_data("in_b", "r1", "b"))
        file_repository.create(db_session, _file_data("at_root", "r1"))

        folder_repository.delete(db_session, "a")
        db_session.expire_all()

        assert db_session.get(FolderModel, "b") is None
        assert db_session.get(FileModel, "in_b") is None
        assert db_session.get(FolderModel, "keep") is not None
        assert db_session.get(FileModel, "at_root") is not None

    def test_delete_room_cascades(self, db_session: Session):
        """Deleting a room removes all of its folders and files."""
        room_repository.create(db_session, _room_data("r1"))
        room_repository.create(db_session, _room_data("r2"))
        folder_repository.create(db_session, _folder_data("a", "r1"))
        folder_repository.create(db_session, _folder_data("b", "r1", "a"))
        file_repository.create(db_session, _file_data("x", "r1", "b"))
        file_repository.create(db_session, _file_data("y", "r1"))
        file_repository.create(db_session, _file_data("z", "r2"))

        room_repository.delete(db_session, "r1")
        db_session.expire_all()

        assert folder_repository.list_by_rooms(db_session, ["r1"]) == []
        assert file_repository.list_by_rooms(db_session, ["r1"]) == []
        assert [f.id for f in file_repository.list_by_rooms(db_session, ["r2"])] == ["z"]
