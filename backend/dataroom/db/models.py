"""SQLAlchemy ORM models for DataRoom.

Entity Hierarchy:
    Room -> Folder -> Folder (parent_id, arbitrary depth)
         -> File   (folder_id, null = room root)

Deletes cascade both in the ORM and through ON DELETE CASCADE foreign keys:
removing a room removes its folders and files, removing a folder removes its
subtree and the files in it.
"""

from sqlalchemy import BigInteger, Column, ForeignKey, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class RoomModel(Base):
    """Data room, the root of one folder tree."""

    __tablename__ = "data_rooms"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(String(64), nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    # Relationships
    folders = relationship("FolderModel", back_populates="room", cascade="all, delete")
    files = relationship("FileModel", back_populates="room", cascade="all, delete")

    __table_args__ = (Index("idx_data_rooms_owner_id", "owner_id"),)

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name={self.name})>"


class FolderModel(Base):
    """Folder node; parent_id null means the room root."""

    __tablename__ = "folders"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    parent_id = Column(String(64), ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)
    data_room_id = Column(String(64), ForeignKey("data_rooms.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    # Relationships
    room = relationship("RoomModel", back_populates="folders")
    parent = relationship("FolderModel", back_populates="children", remote_side=[id])
    children = relationship("FolderModel", back_populates="parent", cascade="all, delete")
    files = relationship("FileModel", back_populates="folder", cascade="all, delete")

    __table_args__ = (
        Index("idx_folders_data_room_id", "data_room_id"),
        Index("idx_folders_parent_id", "parent_id"),
    )

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name})>"


class FileModel(Base):
    """Uploaded file metadata; folder_id null means the room root."""

    __tablename__ = "files"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    folder_id = Column(String(64), ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)
    data_room_id = Column(String(64), ForeignKey("data_rooms.id", ondelete="CASCADE"), nullable=False)
    size = Column(BigInteger, nullable=False)
    mime_type = Column(String(100), nullable=False)
    storage_key = Column(String(500), nullable=False)
    uploaded_by = Column(String(64), nullable=True)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=False)

    # Relationships
    room = relationship("RoomModel", back_populates="files")
    folder = relationship("FolderModel", back_populates="files")

    __table_args__ = (
        Index("idx_files_data_room_id", "data_room_id"),
        Index("idx_files_folder_id", "folder_id"),
    )

    def __repr__(self) -> str:
        return f"<File(id={self.id}, name={self.name})>"
