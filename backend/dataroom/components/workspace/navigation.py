"""Navigation and selection state.

Tracks the active room and folder, the breadcrumb chain, the multi-select
set and the free-text search filter. Transitions are pure state changes with
no validation and no persistence; visible items are re-derived from the
entity store on every call.
"""

import threading

from dataroom.components.workspace.models import (
    BreadcrumbItem,
    FileSystemItem,
    NavigationSnapshot,
    root_breadcrumb,
)
from dataroom.components.workspace.paths import list_current_items, resolve_path
from dataroom.components.workspace.storage import EntityStore


class NavigationState:
    """Explorer view state over an EntityStore."""

    def __init__(self, store: EntityStore):
        self._store = store
        self._lock = threading.RLock()
        self.current_room_id: str | None = None
        self.current_folder_id: str | None = None
        self.breadcrumbs: list[BreadcrumbItem] = []
        # Insertion-ordered set of selected item ids
        self._selected: dict[str, None] = {}
        self.search_query: str = ""

    @property
    def selected_items(self) -> list[str]:
        with self._lock:
            return list(self._selected)

    def set_active_room(self, room_id: str | None) -> None:
        with self._lock:
            self.current_room_id = room_id
            self.current_folder_id = None
            self._selected.clear()
            self.breadcrumbs = [root_breadcrumb()] if room_id else []

    def navigate_to_folder(self, folder_id: str | None) -> None:
        with self._lock:
            self.current_folder_id = folder_id
            self._selected.clear()
            self.breadcrumbs = resolve_path(self._store.snapshot(), folder_id)

    def refresh_breadcrumbs(self) -> None:
        """Recompute breadcrumbs for the current folder after a rename."""
        with self._lock:
            if self.current_room_id:
                self.breadcrumbs = resolve_path(self._store.snapshot(), self.current_folder_id)

    # Selection

    def toggle_select(self, item_id: str) -> None:
        with self._lock:
            if item_id in self._selected:
                del self._selected[item_id]
            else:
                self._selected[item_id] = None

    def select(self, item_id: str) -> None:
        with self._lock:
            self._selected.setdefault(item_id, None)

    def deselect(self, item_id: str) -> None:
        with self._lock:
            self._selected.pop(item_id, None)

    def clear_selection(self) -> None:
        with self._lock:
            self._selected.clear()

    def select_all(self) -> None:
        """Select every currently visible item."""
        with self._lock:
            self._selected = {item.id: None for item in self.current_items()}

    def set_search_query(self, query: str) -> None:
        # Stored verbatim; the listing filter trims and lower-cases
        with self._lock:
            self.search_query = query

    # Reconciliation after deletes

    def forget(self, item_ids: list[str]) -> None:
        """Drop deleted ids from the selection.

        If the active folder was among them the view falls back to the room
        root.
        """
        with self._lock:
            for item_id in item_ids:
                self._selected.pop(item_id, None)
            if self.current_folder_id is not None and self.current_folder_id in item_ids:
                self.current_folder_id = None
                self.breadcrumbs = [root_breadcrumb()] if self.current_room_id else []

    def leave_room(self, room_id: str) -> None:
        """Reset the view when room_id is deleted."""
        with self._lock:
            if self.current_room_id == room_id:
                self.current_room_id = None
                self.current_folder_id = None
                self.breadcrumbs = []
                self._selected.clear()

    # Derived views

    def current_items(self) -> list[FileSystemItem]:
        with self._lock:
            if not self.current_room_id:
                return []
            return list_current_items(
                self._store.snapshot(),
                self.current_room_id,
                self.current_folder_id,
                self.search_query,
            )

    def snapshot(self) -> NavigationSnapshot:
        with self._lock:
            return NavigationSnapshot(
                currentDataRoomId=self.current_room_id,
                currentFolderId=self.current_folder_id,
                breadcrumbs=list(self.breadcrumbs),
                selectedItems=list(self._selected),
                searchQuery=self.search_query,
            )
