"""Health check endpoint."""

from fastapi import APIRouter, Depends

from dataroom.api.deps import get_workspace
from dataroom.components.workspace import Workspace

router = APIRouter()


@router.get("")
async def health(workspace: Workspace = Depends(get_workspace)) -> dict:
    service = workspace.service
    return {
        "status": "healthy",
        "initialized": service.is_initialized,
        "persistence": type(service.persistence).__name__,
        "objectStorage": type(service.object_storage).__name__,
    }
