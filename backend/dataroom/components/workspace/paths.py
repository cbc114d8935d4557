"""Path resolution over the flat parent-pointer tree.

All functions are pure reads over a StoreSnapshot: breadcrumbs, directory
listings, item lookup, descendant closure and the sibling-name queries the
mutation rules are built on. Nothing here is cached; the collections are
small and every call sees the snapshot it was given.
"""

import re
from collections import deque

from dataroom.components.workspace.models import (
    BreadcrumbItem,
    File,
    FileSystemItem,
    Folder,
    RoomStats,
    root_breadcrumb,
)
from dataroom.components.workspace.storage import StoreSnapshot

PDF_EXTENSION = ".pdf"

_PDF_SUFFIX_RE = re.compile(r"\.pdf$", re.IGNORECASE)


def resolve_path(snapshot: StoreSnapshot, folder_id: str | None) -> list[BreadcrumbItem]:
    """Build the root-to-folder breadcrumb chain.

    The walk stops at a missing parent (treated as reaching the root, the
    store may be mid-reconciliation) or at an id already visited.
    """
    chain: list[BreadcrumbItem] = []
    seen: set[str] = set()
    current = folder_id
    while current is not None and current not in seen:
        folder = snapshot.folders.get(current)
        if folder is None:
            break
        seen.add(current)
        chain.append(BreadcrumbItem(id=folder.id, name=folder.name))
        current = folder.parentId

    chain.reverse()
    return [root_breadcrumb(), *chain]


def list_current_items(
    snapshot: StoreSnapshot,
    data_room_id: str,
    folder_id: str | None,
    search_query: str = "",
) -> list[FileSystemItem]:
    """List the folders then files directly inside one location.

    A non-empty query keeps only items whose name contains it,
    case-insensitively.
    """
    folders = [
        FileSystemItem.from_folder(f)
        for f in snapshot.folders.values()
        if f.dataRoomId == data_room_id and f.parentId == folder_id
    ]
    files = [
        FileSystemItem.from_file(f)
        for f in snapshot.files.values()
        if f.dataRoomId == data_room_id and f.folderId == folder_id
    ]
    items = folders + files

    query = (search_query or "").strip().lower()
    if not query:
        return items
    return [item for item in items if query in item.name.lower()]


def get_item_by_id(snapshot: StoreSnapshot, item_id: str) -> FileSystemItem | None:
    folder = snapshot.folders.get(item_id)
    if folder is not None:
        return FileSystemItem.from_folder(folder)
    file = snapshot.files.get(item_id)
    if file is not None:
        return FileSystemItem.from_file(file)
    return None


def collect_descendant_folder_ids(snapshot: StoreSnapshot, folder_id: str) -> list[str]:
    """Breadth-first closure of folder_id and all its transitive children.

    Each folder appears exactly once, the start folder first.
    """
    children: dict[str, list[str]] = {}
    for folder in snapshot.folders.values():
        if folder.parentId is not None:
            children.setdefault(folder.parentId, []).append(folder.id)

    closure = [folder_id]
    visited = {folder_id}
    queue = deque([folder_id])
    while queue:
        for child_id in children.get(queue.popleft(), []):
            if child_id not in visited:
                visited.add(child_id)
                closure.append(child_id)
                queue.append(child_id)
    return closure


def collect_files_in_folders(snapshot: StoreSnapshot, folder_ids: list[str]) -> list[File]:
    """Files whose folderId is any of folder_ids."""
    wanted = set(folder_ids)
    return [f for f in snapshot.files.values() if f.folderId in wanted]


def find_sibling_folder(
    snapshot: StoreSnapshot,
    data_room_id: str,
    parent_id: str | None,
    name: str,
    exclude_id: str | None = None,
) -> Folder | None:
    """Case-insensitive folder name lookup within one location."""
    lowered = name.lower()
    for folder in snapshot.folders.values():
        if (
            folder.id != exclude_id
            and folder.dataRoomId == data_room_id
            and folder.parentId == parent_id
            and folder.name.lower() == lowered
        ):
            return folder
    return None


def find_sibling_file(
    snapshot: StoreSnapshot,
    data_room_id: str,
    folder_id: str | None,
    name: str,
    exclude_id: str | None = None,
) -> File | None:
    """Case-insensitive file name lookup within one location."""
    lowered = name.lower()
    for file in snapshot.files.values():
        if (
            file.id != exclude_id
            and file.dataRoomId == data_room_id
            and file.folderId == folder_id
            and file.name.lower() == lowered
        ):
            return file
    return None


def ensure_pdf_extension(name: str) -> str:
    """Append .pdf unless the name already ends with it (any case)."""
    if name.lower().endswith(PDF_EXTENSION):
        return name
    return f"{name}{PDF_EXTENSION}"


def unique_file_name(
    snapshot: StoreSnapshot,
    data_room_id: str,
    folder_id: str | None,
    name: str,
) -> str:
    """Resolve an upload name collision by numbering.

    "report.pdf" -> "report (1).pdf" -> "report (2).pdf" ... until the name
    is free in the target location.
    """
    taken = {
        f.name.lower()
        for f in snapshot.files.values()
        if f.dataRoomId == data_room_id and f.folderId == folder_id
    }
    if name.lower() not in taken:
        return name

    base = _PDF_SUFFIX_RE.sub("", name)
    counter = 1
    candidate = f"{base} ({counter}){PDF_EXTENSION}"
    while candidate.lower() in taken:
        counter += 1
        candidate = f"{base} ({counter}){PDF_EXTENSION}"
    return candidate


def room_stats(snapshot: StoreSnapshot, data_room_id: str) -> RoomStats:
    """Count every folder and file in a room, at any depth."""
    return RoomStats(
        folderCount=sum(1 for f in snapshot.folders.values() if f.dataRoomId == data_room_id),
        fileCount=sum(1 for f in snapshot.files.values() if f.dataRoomId == data_room_id),
    )
