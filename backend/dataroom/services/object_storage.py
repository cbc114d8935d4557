"""Object storage adapters for file contents.

Two modes, selected by settings.use_memory_store:
- MemoryObjectStorage: bytes kept in a dict, lost on restart
- LocalObjectStorage: one file per storage key under the storage root

Directory Structure (filesystem mode):
{storage_root}/
└── {user_id}/
    └── {data_room_id}/
        └── {file_id}.pdf

Concurrency Safety:
- Writes use temp file + rename so readers never see a partial object
- Blocking filesystem calls run in worker threads
"""

import asyncio
import os
import tempfile
import threading
from pathlib import Path

from dataroom.components.workspace.errors import StorageError
from dataroom.services.url_signing import UrlSigner
from dataroom.utils import get_logger

logger = get_logger(__name__)


class MemoryObjectStorage:
    """Thread-safe in-memory object store.

    Uses a reentrant lock (RLock) for all operations.
    """

    def __init__(self, signer: UrlSigner | None = None):
        self._lock = threading.RLock()
        self._objects: dict[str, tuple[bytes, str]] = {}
        self.signer = signer or UrlSigner()

    async def put_object(self, key: str, data: bytes, content_type: str) -> None:
        with self._lock:
            self._objects[key] = (bytes(data), content_type)

    async def get_object(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._objects.get(key)
        return entry[0] if entry else None

    async def remove_objects(self, keys: list[str]) -> list[str]:
        with self._lock:
            for key in keys:
                self._objects.pop(key, None)
        return []

    async def get_signed_url(self, key: str, ttl_seconds: int) -> str | None:
        with self._lock:
            if key not in self._objects:
                return None
        return self.signer.sign(key, ttl_seconds)

    def has_object(self, key: str) -> bool:
        with self._lock:
            return key in self._objects


class LocalObjectStorage:
    """Filesystem-backed object store rooted at a directory."""

    def __init__(self, root: Path, signer: UrlSigner | None = None):
        self.root = Path(root)
        self.signer = signer or UrlSigner()

    def _path_for(self, key: str) -> Path:
        """Map a storage key to a path, refusing keys that escape the root."""
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise StorageError(f"Invalid storage key: {key}")
        return path

    async def put_object(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path_for(key)
        try:
            size = await asyncio.to_thread(self._write_atomic, path, data)
        except OSError as e:
            raise StorageError(f"Failed to store object {key}: {e}") from e
        logger.debug(f"Stored object {key} ({size} bytes, {content_type})")

    async def get_object(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            logger.debug(f"Object not found: {key}")
            return None
        except OSError as e:
            raise StorageError(f"Failed to read object {key}: {e}") from e

    async def remove_objects(self, keys: list[str]) -> list[str]:
        """Remove each key independently. Returns keys that could not be removed."""
        failed: list[str] = []
        for key in keys:
            try:
                path = self._path_for(key)
                await asyncio.to_thread(path.unlink, True)
            except (OSError, StorageError) as e:
                logger.warning(f"Failed to remove object {key}: {e}")
                failed.append(key)
        return failed

    async def get_signed_url(self, key: str, ttl_seconds: int) -> str | None:
        if not await asyncio.to_thread(self._path_for(key).is_file):
            return None
        return self.signer.sign(key, ttl_seconds)

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> int:
        """Write bytes via temp file + rename in the target directory."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        return path.stat().st_size
