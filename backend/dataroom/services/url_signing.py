"""Signed download URLs.

A signed URL carries a JWT whose claims name the storage key and an expiry.
The download endpoint verifies the token and serves the object, so storage
keys never appear in clear in links handed to clients.
"""

from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

from jose import JWTError, jwt

from dataroom.settings import settings
from dataroom.utils import get_logger

logger = get_logger(__name__)

CONTENT_PATH = "/files/content"


class UrlSigner:
    """Create and verify expiring storage-key tokens."""

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        base_path: str | None = None,
    ):
        self.secret_key = secret_key or settings.signing_secret_key
        self.algorithm = algorithm or settings.signing_algorithm
        self.base_path = base_path if base_path is not None else f"{settings.api_prefix}{CONTENT_PATH}"

    def create_token(self, key: str, ttl_seconds: int) -> str:
        expire = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
        return jwt.encode({"key": key, "exp": expire}, self.secret_key, algorithm=self.algorithm)

    def sign(self, key: str, ttl_seconds: int) -> str:
        """Return a relative URL granting access to key for ttl_seconds."""
        return f"{self.base_path}?{urlencode({'token': self.create_token(key, ttl_seconds)})}"

    def verify(self, token: str) -> str | None:
        """Return the storage key for a valid, unexpired token, else None."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Signed URL verification failed: {e}")
            return None
        key = payload.get("key")
        return key if isinstance(key, str) else None
