"""Workspace business logic.

WorkspaceService is the only writer of the entity store. Each operation runs
through the same stages:

    Requested -> Validating -> (Rejected | Committing) -> (Applied | Failed)

Validation is synchronous against the current store. Rejections come back as
an OperationError value and leave everything untouched. Committing calls the
persistence collaborator; the store only changes once that call has
succeeded, so a failed commit (PersistenceError) never shows up locally.

Duplicate names are rejected for folder creation and for renames, but an
upload whose name is taken is renamed automatically ("report (1).pdf").

Mutations are serialized by one asyncio.Lock held from validation until the
store is updated, so concurrent requests cannot both pass a duplicate check
while a commit is in flight.
"""

import asyncio
import functools
import re
from enum import Enum

from dataroom.components.workspace.errors import (
    AuthenticationError,
    OperationError,
    PersistenceError,
    StorageError,
)
from dataroom.components.workspace.models import (
    DeleteResult,
    File,
    FileSystemItem,
    Folder,
    Room,
    RoomSummary,
)
from dataroom.components.workspace.navigation import NavigationState
from dataroom.components.workspace.paths import (
    collect_descendant_folder_ids,
    collect_files_in_folders,
    ensure_pdf_extension,
    find_sibling_file,
    find_sibling_folder,
    get_item_by_id,
    room_stats,
    unique_file_name,
)
from dataroom.components.workspace.storage import EntityStore
from dataroom.components.workspace.storage_provider import (
    IdentityProtocol,
    ObjectStorageProtocol,
    PersistenceProtocol,
)
from dataroom.settings import settings
from dataroom.utils import generate_id, get_logger, get_timestamp_ms

logger = get_logger(__name__)

MAX_ROOM_NAME_LENGTH = 100
MAX_ITEM_NAME_LENGTH = 255

_INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


class OperationStage(str, Enum):
    """Lifecycle stage of a single mutation."""

    requested = "requested"
    validating = "validating"
    rejected = "rejected"
    committing = "committing"
    applied = "applied"
    failed = "failed"


def _trace(operation: str, stage: OperationStage, detail: str = "") -> None:
    logger.debug(f"{operation}: {stage.value}{f' ({detail})' if detail else ''}")


def _reject(operation: str, failure: OperationError) -> OperationError:
    _trace(operation, OperationStage.rejected, failure.error)
    return failure


def _serialized(method):
    """Run a mutation while holding the service write lock."""

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        async with self._write_lock:
            return await method(self, *args, **kwargs)

    return wrapper


def validate_item_name(name: str, label: str) -> str | OperationError:
    """Trim and check a folder or file name.

    Returns:
        The trimmed name, or an OperationError describing the problem
    """
    trimmed = (name or "").strip()
    if not trimmed:
        return OperationError.validation(f"{label} name cannot be empty")
    if len(trimmed) > MAX_ITEM_NAME_LENGTH:
        return OperationError.validation(f"Name must be less than {MAX_ITEM_NAME_LENGTH} characters")
    if _INVALID_NAME_CHARS.search(trimmed):
        return OperationError.validation("Name contains invalid characters")
    return trimmed


def validate_room_name(name: str) -> str | OperationError:
    trimmed = (name or "").strip()
    if not trimmed:
        return OperationError.validation("Name is required")
    if len(trimmed) > MAX_ROOM_NAME_LENGTH:
        return OperationError.validation(f"Name must be less than {MAX_ROOM_NAME_LENGTH} characters")
    return trimmed


class WorkspaceService:
    """Mutation engine for rooms, folders and files.

    Args:
        store: Canonical in-memory entity store
        navigation: Explorer state, reconciled after deletes
        persistence: Durable record store
        object_storage: File content store
        identity: Source of the acting user id
    """

    def __init__(
        self,
        store: EntityStore,
        navigation: NavigationState,
        persistence: PersistenceProtocol,
        object_storage: ObjectStorageProtocol,
        identity: IdentityProtocol,
        max_upload_bytes: int | None = None,
        accepted_mime_type: str | None = None,
    ):
        self.store = store
        self.navigation = navigation
        self.persistence = persistence
        self.object_storage = object_storage
        self.identity = identity
        self.max_upload_bytes = max_upload_bytes or settings.max_upload_bytes
        self.accepted_mime_type = accepted_mime_type or settings.accepted_mime_type
        self._initialized = False
        self._write_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self, force: bool = False) -> None:
        """Load the durable copy for the current user into the store.

        Idempotent unless force is set.

        Raises:
            AuthenticationError: If no user is signed in
            PersistenceError: If loading fails
        """
        if self._initialized and not force:
            return

        user_id = self.identity.current_user_id()
        if not user_id:
            raise AuthenticationError("Not authenticated")

        rooms = await self.persistence.list_rooms(user_id)
        room_ids = [r.id for r in rooms]
        folders = await self.persistence.list_folders(room_ids)
        files = await self.persistence.list_files(room_ids)

        self.store.load(rooms, folders, files)
        self._initialized = True
        logger.info(
            f"Workspace loaded for {user_id}: {len(rooms)} rooms, {len(folders)} folders, {len(files)} files"
        )

    # ==================== Queries ====================

    def list_rooms(self) -> list[Room]:
        return self.store.list_rooms(self.identity.current_user_id())

    def list_room_summaries(self) -> list[RoomSummary]:
        """Rooms with their folder and file counts, for the room list."""
        snapshot = self.store.snapshot()
        return [
            RoomSummary(**room.model_dump(), **room_stats(snapshot, room.id).model_dump())
            for room in self.list_rooms()
        ]

    def get_item(self, item_id: str) -> FileSystemItem | None:
        return get_item_by_id(self.store.snapshot(), item_id)

    # ==================== Rooms ====================

    @_serialized
    async def create_room(self, name: str, description: str | None = None) -> Room | OperationError:
        """Create a room owned by the current user.

        Room names need not be unique.
        """
        op = "create_room"
        _trace(op, OperationStage.requested, name)
        _trace(op, OperationStage.validating)

        checked = validate_room_name(name)
        if isinstance(checked, OperationError):
            return _reject(op, checked)
        owner_id = self.identity.current_user_id()
        if not owner_id:
            return _reject(op, OperationError.validation("Not authenticated"))

        now = get_timestamp_ms()
        room = Room(
            id=generate_id("room"),
            name=checked,
            description=(description or "").strip() or None,
            ownerId=owner_id,
            createdAt=now,
            updatedAt=now,
        )

        _trace(op, OperationStage.committing)
        saved = await self._commit(op, self.persistence.insert_room(room))
        self.store.add_room(saved)
        _trace(op, OperationStage.applied, saved.id)
        logger.info(f"Created room {saved.id} ({saved.name})")
        return saved

    @_serialized
    async def rename_room(
        self,
        room_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> Room | OperationError:
        """Rename a room and/or change its description. No uniqueness check."""
        op = "rename_room"
        _trace(op, OperationStage.requested, room_id)
        _trace(op, OperationStage.validating)

        room = self.store.get_room(room_id)
        if room is None:
            return _reject(op, OperationError.not_found("Data room not found"))

        fields: dict = {}
        if name is not None:
            checked = validate_room_name(name)
            if isinstance(checked, OperationError):
                return _reject(op, checked)
            fields["name"] = checked
        if description is not None:
            fields["description"] = description.strip() or None
        fields["updatedAt"] = get_timestamp_ms()

        _trace(op, OperationStage.committing)
        saved = await self._commit(op, self.persistence.update_room(room_id, fields))
        self.store.update_room(saved)
        _trace(op, OperationStage.applied, room_id)
        return saved

    @_serialized
    async def delete_room(self, room_id: str) -> DeleteResult:
        """Delete a room with every folder and file scoped to it.

        Storage objects are removed best-effort first; failures are reported
        in the result and do not stop the record delete.
        """
        op = "delete_room"
        _trace(op, OperationStage.requested, room_id)

        if self.store.get_room(room_id) is None:
            logger.debug(f"delete_room: {room_id} already gone")
            return DeleteResult(deleted=False)

        files = self.store.list_files(room_id)
        storage_errors = await self._remove_objects([f.storageKey for f in files])

        _trace(op, OperationStage.committing)
        await self._commit(op, self.persistence.delete_room(room_id))

        folder_ids, file_ids = self.store.remove_room(room_id)
        self.navigation.forget(folder_ids + file_ids)
        self.navigation.leave_room(room_id)
        _trace(op, OperationStage.applied, room_id)
        logger.info(f"Deleted room {room_id}: {len(folder_ids)} folders, {len(file_ids)} files")

        return DeleteResult(
            deleted=True,
            roomIds=[room_id],
            folderIds=folder_ids,
            fileIds=file_ids,
            storageErrors=storage_errors,
        )

    # ==================== Folders ====================

    @_serialized
    async def create_folder(
        self,
        name: str,
        parent_id: str | None = None,
        data_room_id: str | None = None,
    ) -> Folder | OperationError:
        """Create a folder under parent_id (None = room root).

        The room defaults to the active room of the navigation state.
        """
        op = "create_folder"
        _trace(op, OperationStage.requested, name)
        _trace(op, OperationStage.validating)

        checked = validate_item_name(name, "Folder")
        if isinstance(checked, OperationError):
            return _reject(op, checked)

        room_id = data_room_id or self.navigation.current_room_id
        if not room_id:
            return _reject(op, OperationError.validation("No data room selected"))

        snapshot = self.store.snapshot()
        if room_id not in snapshot.rooms:
            return _reject(op, OperationError.not_found("Data room not found"))
        if parent_id is not None:
            parent = snapshot.folders.get(parent_id)
            if parent is None or parent.dataRoomId != room_id:
                return _reject(op, OperationError.not_found("Parent folder not found"))

        if find_sibling_folder(snapshot, room_id, parent_id, checked):
            return _reject(
                op, OperationError.validation(f'A folder named "{checked}" already exists in this location')
            )

        now = get_timestamp_ms()
        folder = Folder(
            id=generate_id("folder"),
            name=checked,
            parentId=parent_id,
            dataRoomId=room_id,
            createdAt=now,
            updatedAt=now,
        )

        _trace(op, OperationStage.committing)
        saved = await self._commit(op, self.persistence.insert_folder(folder))
        self.store.add_folder(saved)
        _trace(op, OperationStage.applied, saved.id)
        return saved

    @_serialized
    async def rename_folder(self, folder_id: str, name: str) -> Folder | OperationError:
        """Rename a folder, rejecting a name taken by a sibling folder."""
        op = "rename_folder"
        _trace(op, OperationStage.requested, folder_id)
        _trace(op, OperationStage.validating)

        checked = validate_item_name(name, "Folder")
        if isinstance(checked, OperationError):
            return _reject(op, checked)

        snapshot = self.store.snapshot()
        folder = snapshot.folders.get(folder_id)
        if folder is None:
            return _reject(op, OperationError.not_found("Folder not found"))

        if find_sibling_folder(snapshot, folder.dataRoomId, folder.parentId, checked, exclude_id=folder_id):
            return _reject(
                op, OperationError.validation(f'A folder named "{checked}" already exists in this location')
            )

        _trace(op, OperationStage.committing)
        saved = await self._commit(
            op,
            self.persistence.update_folder(folder_id, {"name": checked, "updatedAt": get_timestamp_ms()}),
        )
        self.store.update_folder(saved)
        # The renamed folder may be on the active breadcrumb path
        self.navigation.refresh_breadcrumbs()
        _trace(op, OperationStage.applied, folder_id)
        return saved

    @_serialized
    async def delete_folder(self, folder_id: str) -> DeleteResult:
        """Delete a folder, all its descendant folders and their files."""
        op = "delete_folder"
        _trace(op, OperationStage.requested, folder_id)

        snapshot = self.store.snapshot()
        if folder_id not in snapshot.folders:
            logger.debug(f"delete_folder: {folder_id} already gone")
            return DeleteResult(deleted=False)

        folder_ids = collect_descendant_folder_ids(snapshot, folder_id)
        files = collect_files_in_folders(snapshot, folder_ids)
        file_ids = [f.id for f in files]

        storage_errors = await self._remove_objects([f.storageKey for f in files])

        _trace(op, OperationStage.committing, f"{len(folder_ids)} folders, {len(file_ids)} files")
        await self._commit(op, self.persistence.delete_folder(folder_id))

        self.store.remove_files(file_ids)
        self.store.remove_folders(folder_ids)
        self.navigation.forget(folder_ids + file_ids)
        _trace(op, OperationStage.applied, folder_id)

        return DeleteResult(
            deleted=True,
            folderIds=folder_ids,
            fileIds=file_ids,
            storageErrors=storage_errors,
        )

    # ==================== Files ====================

    @_serialized
    async def upload_file(
        self,
        name: str,
        content: bytes,
        mime_type: str,
        data_room_id: str | None = None,
        folder_id: str | None = None,
    ) -> File | OperationError:
        """Store a PDF and record it in the target location.

        A name already used in the location gets a " (n)" counter instead of
        being rejected.

        Raises:
            PersistenceError: If writing the object or the record fails. A
                record failure removes the object that was just written.
        """
        op = "upload_file"
        _trace(op, OperationStage.requested, name)
        _trace(op, OperationStage.validating)

        user_id = self.identity.current_user_id()
        if not user_id:
            return _reject(op, OperationError.validation("Not authenticated"))

        room_id = data_room_id or self.navigation.current_room_id
        if not room_id:
            return _reject(op, OperationError.validation("No data room selected"))

        if mime_type != self.accepted_mime_type:
            return _reject(op, OperationError.validation("Only PDF files are supported"))

        size = len(content)
        if size > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            return _reject(op, OperationError.validation(f"File size exceeds {limit_mb}MB limit"))

        if not (name or "").strip():
            return _reject(op, OperationError.validation("File name cannot be empty"))

        snapshot = self.store.snapshot()
        if room_id not in snapshot.rooms:
            return _reject(op, OperationError.not_found("Data room not found"))
        if folder_id is not None:
            target = snapshot.folders.get(folder_id)
            if target is None or target.dataRoomId != room_id:
                return _reject(op, OperationError.not_found("Folder not found"))

        file_name = unique_file_name(snapshot, room_id, folder_id, name)
        if file_name != name:
            logger.debug(f"upload_file: '{name}' taken, storing as '{file_name}'")

        file_id = generate_id("file")
        storage_key = f"{user_id}/{room_id}/{file_id}.pdf"
        now = get_timestamp_ms()
        file = File(
            id=file_id,
            name=file_name,
            folderId=folder_id,
            dataRoomId=room_id,
            size=size,
            mimeType=mime_type,
            storageKey=storage_key,
            uploadedBy=user_id,
            createdAt=now,
            updatedAt=now,
        )

        _trace(op, OperationStage.committing)
        await self._commit(op, self.object_storage.put_object(storage_key, content, mime_type))
        try:
            saved = await self.persistence.insert_file(file)
        except PersistenceError:
            _trace(op, OperationStage.failed, "record insert")
            await self._remove_objects([storage_key])
            raise

        self.store.add_file(saved)
        _trace(op, OperationStage.applied, saved.id)
        logger.info(f"Uploaded {saved.name} ({size} bytes) to room {room_id}")
        return saved

    @_serialized
    async def rename_file(self, file_id: str, name: str) -> File | OperationError:
        """Rename a file. The .pdf extension is appended when missing."""
        op = "rename_file"
        _trace(op, OperationStage.requested, file_id)
        _trace(op, OperationStage.validating)

        base = validate_item_name(name, "File")
        if isinstance(base, OperationError):
            return _reject(op, base)
        checked = ensure_pdf_extension(base)

        snapshot = self.store.snapshot()
        file = snapshot.files.get(file_id)
        if file is None:
            return _reject(op, OperationError.not_found("File not found"))

        if find_sibling_file(snapshot, file.dataRoomId, file.folderId, checked, exclude_id=file_id):
            return _reject(
                op, OperationError.validation(f'A file named "{checked}" already exists in this location')
            )

        _trace(op, OperationStage.committing)
        saved = await self._commit(
            op,
            self.persistence.update_file(file_id, {"name": checked, "updatedAt": get_timestamp_ms()}),
        )
        self.store.update_file(saved)
        _trace(op, OperationStage.applied, file_id)
        return saved

    @_serialized
    async def delete_file(self, file_id: str) -> DeleteResult:
        """Delete a file record and its storage object."""
        op = "delete_file"
        _trace(op, OperationStage.requested, file_id)

        file = self.store.get_file(file_id)
        if file is None:
            logger.debug(f"delete_file: {file_id} already gone")
            return DeleteResult(deleted=False)

        storage_errors = await self._remove_objects([file.storageKey])

        _trace(op, OperationStage.committing)
        await self._commit(op, self.persistence.delete_file(file_id))

        self.store.remove_files([file_id])
        self.navigation.forget([file_id])
        _trace(op, OperationStage.applied, file_id)
        return DeleteResult(deleted=True, fileIds=[file_id], storageErrors=storage_errors)

    async def get_file_url(self, file_id: str, ttl_seconds: int | None = None) -> str | None:
        """Signed, expiring URL for a file's content. None for unknown ids."""
        file = self.store.get_file(file_id)
        if file is None:
            return None
        return await self.object_storage.get_signed_url(
            file.storageKey, ttl_seconds or settings.signed_url_ttl_seconds
        )

    async def read_content(self, storage_key: str) -> bytes | None:
        """Bytes behind a storage key, only while a file record still points at it."""
        if not any(f.storageKey == storage_key for f in self.store.list_files()):
            return None
        return await self.object_storage.get_object(storage_key)

    # ==================== Internals ====================

    async def _commit(self, operation: str, call):
        """Await a collaborator call, tracing a failure before re-raising."""
        try:
            return await call
        except PersistenceError as e:
            _trace(operation, OperationStage.failed, str(e))
            logger.error(f"{operation} failed: {e}")
            raise

    async def _remove_objects(self, keys: list[str]) -> list[str]:
        """Best-effort object removal. Returns the keys that failed."""
        if not keys:
            return []
        try:
            failed = await self.object_storage.remove_objects(keys)
        except StorageError as e:
            logger.warning(f"Storage removal failed for {len(keys)} objects: {e}")
            return list(keys)
        if failed:
            logger.warning(f"Storage removal failed for keys: {failed}")
        return failed
