"""Workspace error taxonomy.

Caller-correctable failures (empty or invalid names, duplicates, wrong file
type, oversized upload, missing room, unknown id) are returned as an
OperationError value and never raised. Collaborator failures raise
PersistenceError, since the caller can only retry or inform the user.
AuthenticationError is raised when loading without a signed-in user.
"""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Kind of a returned operation failure."""

    validation = "validation"
    not_found = "not_found"


class OperationError(BaseModel):
    """Typed failure value returned by workspace operations."""

    error: str
    code: ErrorCode = ErrorCode.validation

    @classmethod
    def validation(cls, message: str) -> "OperationError":
        return cls(error=message, code=ErrorCode.validation)

    @classmethod
    def not_found(cls, message: str) -> "OperationError":
        return cls(error=message, code=ErrorCode.not_found)


class DataRoomError(Exception):
    """Base class for raised DataRoom errors."""


class PersistenceError(DataRoomError):
    """A persistence collaborator call failed."""


class StorageError(PersistenceError):
    """An object storage call failed."""


class AuthenticationError(DataRoomError):
    """No user is signed in."""
