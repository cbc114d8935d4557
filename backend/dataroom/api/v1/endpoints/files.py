"""File API endpoints.

Uploads arrive as JSON with base64 content. Downloads go through signed,
expiring URLs issued by GET /files/{file_id}/url.
"""

import base64
import binascii

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from dataroom.api.deps import get_workspace, unwrap
from dataroom.components.workspace import DeleteResult, File, Workspace
from dataroom.components.workspace.models import RenameRequest
from dataroom.services.url_signing import UrlSigner
from dataroom.settings import settings

router = APIRouter()


class UploadFileRequest(BaseModel):
    """Request to upload a file into a room location."""

    name: str
    mimeType: str
    contentBase64: str
    dataRoomId: str | None = None
    folderId: str | None = None


class FileUrlResponse(BaseModel):
    url: str
    expiresIn: int


@router.post("", response_model=File)
async def upload_file(request: UploadFileRequest, workspace: Workspace = Depends(get_workspace)) -> File:
    """Upload a PDF. A name already taken in the location gets a " (n)" suffix."""
    try:
        content = base64.b64decode(request.contentBase64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="File content is not valid base64")

    return unwrap(
        await workspace.service.upload_file(
            request.name,
            content,
            request.mimeType,
            data_room_id=request.dataRoomId,
            folder_id=request.folderId,
        )
    )


@router.get("/content")
async def download_content(token: str, workspace: Workspace = Depends(get_workspace)) -> Response:
    """Serve file bytes for a valid signed token."""
    key = UrlSigner().verify(token)
    if key is None:
        raise HTTPException(status_code=403, detail="Invalid or expired link")

    data = await workspace.service.read_content(key)
    if data is None:
        raise HTTPException(status_code=404, detail="File not found")
    return Response(content=data, media_type=settings.accepted_mime_type)


@router.get("/{file_id}/url", response_model=FileUrlResponse)
async def get_file_url(file_id: str, workspace: Workspace = Depends(get_workspace)) -> FileUrlResponse:
    ttl = settings.signed_url_ttl_seconds
    url = await workspace.service.get_file_url(file_id, ttl)
    if url is None:
        raise HTTPException(status_code=404, detail="File not found")
    return FileUrlResponse(url=url, expiresIn=ttl)


@router.patch("/{file_id}", response_model=File)
async def rename_file(
    file_id: str,
    request: RenameRequest,
    workspace: Workspace = Depends(get_workspace),
) -> File:
    """Rename a file; ".pdf" is appended when missing."""
    return unwrap(await workspace.service.rename_file(file_id, request.name))


@router.delete("/{file_id}", response_model=DeleteResult)
async def delete_file(file_id: str, workspace: Workspace = Depends(get_workspace)) -> DeleteResult:
    return await workspace.service.delete_file(file_id)
