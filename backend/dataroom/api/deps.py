"""FastAPI dependencies and result helpers shared by the endpoints."""

from typing import TypeVar

from fastapi import HTTPException, Request

from dataroom.components.workspace import ErrorCode, OperationError, Workspace

T = TypeVar("T")


def get_workspace(request: Request) -> Workspace:
    """The Workspace owned by the running application."""
    return request.app.state.workspace


def unwrap(result: T | OperationError) -> T:
    """Return a successful result or raise the matching HTTP error.

    Validation failures map to 400, unknown ids to 404.
    """
    if isinstance(result, OperationError):
        status = 404 if result.code == ErrorCode.not_found else 400
        raise HTTPException(status_code=status, detail=result.error)
    return result
