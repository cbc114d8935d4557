"""Explorer API endpoints.

Expose the navigation and selection state of the open room: where the user
is, what is visible there, and what is selected.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from dataroom.api.deps import get_workspace
from dataroom.components.workspace import FileSystemItem, NavigationSnapshot, Workspace
from dataroom.components.workspace.models import NavigateRequest, SearchRequest

router = APIRouter()


class ExplorerView(BaseModel):
    """Navigation state plus the items visible at the current location."""

    state: NavigationSnapshot
    items: list[FileSystemItem] = Field(default_factory=list)


def _view(workspace: Workspace) -> ExplorerView:
    return ExplorerView(
        state=workspace.navigation.snapshot(),
        items=workspace.navigation.current_items(),
    )


@router.get("", response_model=ExplorerView)
async def get_explorer(workspace: Workspace = Depends(get_workspace)) -> ExplorerView:
    return _view(workspace)


@router.post("/navigate", response_model=ExplorerView)
async def navigate(request: NavigateRequest, workspace: Workspace = Depends(get_workspace)) -> ExplorerView:
    """Move to a folder of the open room (null = room root)."""
    navigation = workspace.navigation
    if navigation.current_room_id is None:
        raise HTTPException(status_code=400, detail="No data room selected")
    if request.folderId is not None:
        folder = workspace.store.get_folder(request.folderId)
        if folder is None or folder.dataRoomId != navigation.current_room_id:
            raise HTTPException(status_code=404, detail="Folder not found")
    navigation.navigate_to_folder(request.folderId)
    return _view(workspace)


@router.post("/search", response_model=ExplorerView)
async def search(request: SearchRequest, workspace: Workspace = Depends(get_workspace)) -> ExplorerView:
    """Filter the current listing by name."""
    workspace.navigation.set_search_query(request.query)
    return _view(workspace)


@router.post("/select/{item_id}", response_model=NavigationSnapshot)
async def toggle_select(item_id: str, workspace: Workspace = Depends(get_workspace)) -> NavigationSnapshot:
    workspace.navigation.toggle_select(item_id)
    return workspace.navigation.snapshot()


@router.post("/select-all", response_model=NavigationSnapshot)
async def select_all(workspace: Workspace = Depends(get_workspace)) -> NavigationSnapshot:
    workspace.navigation.select_all()
    return workspace.navigation.snapshot()


@router.delete("/selection", response_model=NavigationSnapshot)
async def clear_selection(workspace: Workspace = Depends(get_workspace)) -> NavigationSnapshot:
    workspace.navigation.clear_selection()
    return workspace.navigation.snapshot()
