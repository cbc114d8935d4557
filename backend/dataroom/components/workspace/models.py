"""Workspace data models.

Defines the core entities for document organization:
- Room: Top-level container, root of one independent tree namespace
- Folder: Tree node addressed by parentId (null = room root)
- File: Uploaded PDF addressed by folderId (null = room root)

And the derived views computed from them:
- FileSystemItem: Uniform folder/file shape for listings and selection
- BreadcrumbItem: One step of the root-to-current navigation path

Timestamps are epoch milliseconds.
"""

from typing import Literal

from pydantic import BaseModel, Field


class Room(BaseModel):
    """Independent document collection owned by one user."""

    id: str
    name: str
    description: str | None = None
    ownerId: str
    createdAt: int
    updatedAt: int


class RoomStats(BaseModel):
    """Folder and file counts of one room."""

    folderCount: int = 0
    fileCount: int = 0


class RoomSummary(Room):
    """Room plus its counts, as shown in the room list."""

    folderCount: int = 0
    fileCount: int = 0


class Folder(BaseModel):
    """Folder node. A non-null parentId references a folder of the same room."""

    id: str
    name: str
    parentId: str | None = None
    dataRoomId: str
    createdAt: int
    updatedAt: int


class File(BaseModel):
    """File metadata.

    storageKey is an opaque handle into object storage; the workspace never
    interprets it beyond passing it through.
    """

    id: str
    name: str
    folderId: str | None = None
    dataRoomId: str
    size: int
    mimeType: str
    storageKey: str
    uploadedBy: str
    createdAt: int
    updatedAt: int


class FileSystemItem(BaseModel):
    """Uniform listing shape over folders and files."""

    id: str
    name: str
    type: Literal["folder", "file"]
    parentId: str | None = None
    createdAt: int
    updatedAt: int
    # File-specific
    size: int | None = None
    mimeType: str | None = None
    storageKey: str | None = None

    @classmethod
    def from_folder(cls, folder: Folder) -> "FileSystemItem":
        return cls(
            id=folder.id,
            name=folder.name,
            type="folder",
            parentId=folder.parentId,
            createdAt=folder.createdAt,
            updatedAt=folder.updatedAt,
        )

    @classmethod
    def from_file(cls, file: File) -> "FileSystemItem":
        return cls(
            id=file.id,
            name=file.name,
            type="file",
            parentId=file.folderId,
            size=file.size,
            mimeType=file.mimeType,
            storageKey=file.storageKey,
            createdAt=file.createdAt,
            updatedAt=file.updatedAt,
        )


class BreadcrumbItem(BaseModel):
    """Navigation path entry. id=None is the synthetic room root."""

    id: str | None = None
    name: str


ROOT_BREADCRUMB_NAME = "Root"


def root_breadcrumb() -> BreadcrumbItem:
    return BreadcrumbItem(id=None, name=ROOT_BREADCRUMB_NAME)


class DeleteResult(BaseModel):
    """Outcome of a (possibly cascading) delete.

    deleted is False when the id had no backing record; deletes are
    idempotent so that is not an error. storageErrors lists storage keys
    whose object removal failed; the records are gone regardless.
    """

    deleted: bool
    roomIds: list[str] = Field(default_factory=list)
    folderIds: list[str] = Field(default_factory=list)
    fileIds: list[str] = Field(default_factory=list)
    storageErrors: list[str] = Field(default_factory=list)


class NavigationSnapshot(BaseModel):
    """Serializable view of the navigation and selection state."""

    currentDataRoomId: str | None = None
    currentFolderId: str | None = None
    breadcrumbs: list[BreadcrumbItem] = Field(default_factory=list)
    selectedItems: list[str] = Field(default_factory=list)
    searchQuery: str = ""


# Request models


class CreateRoomRequest(BaseModel):
    """Request to create a new room."""

    name: str
    description: str | None = None


class UpdateRoomRequest(BaseModel):
    """Request to rename a room or change its description."""

    name: str | None = None
    description: str | None = None


class CreateFolderRequest(BaseModel):
    """Request to create a folder.

    dataRoomId defaults to the active room of the navigation state.
    """

    name: str
    parentId: str | None = None
    dataRoomId: str | None = None


class RenameRequest(BaseModel):
    """Request to rename a folder or file."""

    name: str


class NavigateRequest(BaseModel):
    """Request to move the explorer to a folder (null = room root)."""

    folderId: str | None = None


class SearchRequest(BaseModel):
    """Request to set the free-text listing filter."""

    query: str = ""
