"""Room API endpoints.

Rooms are top-level document collections; deleting one removes its whole
folder tree and every stored file.
"""

from fastapi import APIRouter, Depends, HTTPException

from dataroom.api.deps import get_workspace, unwrap
from dataroom.components.workspace import DeleteResult, NavigationSnapshot, Room, RoomSummary, Workspace
from dataroom.components.workspace.models import CreateRoomRequest, UpdateRoomRequest

router = APIRouter()


@router.get("", response_model=list[RoomSummary])
async def list_rooms(workspace: Workspace = Depends(get_workspace)) -> list[RoomSummary]:
    """List the current user's rooms, newest first, with folder and file counts."""
    return workspace.service.list_room_summaries()


@router.post("", response_model=Room)
async def create_room(request: CreateRoomRequest, workspace: Workspace = Depends(get_workspace)) -> Room:
    """Create a new room."""
    return unwrap(await workspace.service.create_room(request.name, request.description))


@router.patch("/{room_id}", response_model=Room)
async def update_room(
    room_id: str,
    request: UpdateRoomRequest,
    workspace: Workspace = Depends(get_workspace),
) -> Room:
    """Rename a room or change its description."""
    return unwrap(await workspace.service.rename_room(room_id, request.name, request.description))


@router.delete("/{room_id}", response_model=DeleteResult)
async def delete_room(room_id: str, workspace: Workspace = Depends(get_workspace)) -> DeleteResult:
    """Delete a room with all of its folders and files.

    Deleting an unknown room is not an error; the result reports deleted=false.
    """
    return await workspace.service.delete_room(room_id)


@router.post("/{room_id}/open", response_model=NavigationSnapshot)
async def open_room(room_id: str, workspace: Workspace = Depends(get_workspace)) -> NavigationSnapshot:
    """Make a room the active one in the explorer."""
    if workspace.store.get_room(room_id) is None:
        raise HTTPException(status_code=404, detail="Data room not found")
    workspace.navigation.set_active_room(room_id)
    return workspace.navigation.snapshot()
