"""Folder API endpoints."""

from fastapi import APIRouter, Depends

from dataroom.api.deps import get_workspace, unwrap
from dataroom.components.workspace import DeleteResult, Folder, Workspace
from dataroom.components.workspace.models import CreateFolderRequest, RenameRequest

router = APIRouter()


@router.post("", response_model=Folder)
async def create_folder(request: CreateFolderRequest, workspace: Workspace = Depends(get_workspace)) -> Folder:
    """Create a folder.

    Args:
        request: Name, parent folder (null = room root) and optional room;
            the room defaults to the one open in the explorer

    Raises:
        HTTPException: 400 for invalid or duplicate names, 404 for an
            unknown room or parent
    """
    return unwrap(
        await workspace.service.create_folder(request.name, request.parentId, data_room_id=request.dataRoomId)
    )


@router.patch("/{folder_id}", response_model=Folder)
async def rename_folder(
    folder_id: str,
    request: RenameRequest,
    workspace: Workspace = Depends(get_workspace),
) -> Folder:
    return unwrap(await workspace.service.rename_folder(folder_id, request.name))


@router.delete("/{folder_id}", response_model=DeleteResult)
async def delete_folder(folder_id: str, workspace: Workspace = Depends(get_workspace)) -> DeleteResult:
    """Delete a folder with all descendant folders and their files."""
    return await workspace.service.delete_folder(folder_id)
