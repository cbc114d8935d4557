"""Workspace Management Module.

This module provides the hierarchical document model for the DataRoom
backend: rooms holding an arbitrarily deep tree of folders and files.

Components:
- models.py: Data models for Room, Folder, File and derived views
- errors.py: OperationError (returned) and PersistenceError (raised)
- storage.py: Thread-safe in-memory entity store
- paths.py: Breadcrumbs, listings and tree queries over the store
- navigation.py: Active room/folder, selection and search state
- service.py: Validated create/rename/delete/upload operations
- storage_provider.py: Collaborator protocols and adapter selection
- container.py: Workspace state container wiring it all together

Usage:
    from dataroom.components.workspace import create_workspace

    workspace = create_workspace()
    await workspace.service.initialize()
    room = await workspace.service.create_room("Deal Docs")
    workspace.navigation.set_active_room(room.id)
"""

from dataroom.components.workspace.container import Workspace, create_workspace
from dataroom.components.workspace.errors import (
    AuthenticationError,
    DataRoomError,
    ErrorCode,
    OperationError,
    PersistenceError,
    StorageError,
)
from dataroom.components.workspace.models import (
    BreadcrumbItem,
    DeleteResult,
    File,
    FileSystemItem,
    Folder,
    NavigationSnapshot,
    Room,
    RoomStats,
    RoomSummary,
)
from dataroom.components.workspace.navigation import NavigationState
from dataroom.components.workspace.paths import list_current_items, resolve_path, room_stats
from dataroom.components.workspace.service import WorkspaceService
from dataroom.components.workspace.storage import EntityStore, StoreSnapshot

__all__ = [
    # Models
    "Room",
    "RoomStats",
    "RoomSummary",
    "Folder",
    "File",
    "FileSystemItem",
    "BreadcrumbItem",
    "DeleteResult",
    "NavigationSnapshot",
    # Errors
    "DataRoomError",
    "AuthenticationError",
    "PersistenceError",
    "StorageError",
    "OperationError",
    "ErrorCode",
    # Store and views
    "EntityStore",
    "StoreSnapshot",
    "NavigationState",
    "resolve_path",
    "list_current_items",
    "room_stats",
    # Service
    "WorkspaceService",
    "Workspace",
    "create_workspace",
]
