"""Database module for the DataRoom backend.

Components:
- models.py: SQLAlchemy ORM models (rooms, folders, files)
- database.py: Engine, sessions and schema initialization
"""

from dataroom.db.database import (
    build_engine,
    check_connection,
    close_db,
    get_engine,
    get_session_factory,
    init_db,
)
from dataroom.db.models import Base, FileModel, FolderModel, RoomModel

__all__ = [
    # Connection
    "build_engine",
    "get_engine",
    "get_session_factory",
    "init_db",
    "close_db",
    "check_connection",
    # Models
    "Base",
    "RoomModel",
    "FolderModel",
    "FileModel",
]
