"""
Blob storage for vault documents.

A blob is addressed by the URL handle returned from ``put``. The local
backend writes files under one root directory; the stored name carries a
random prefix so two uploads called "id.pdf" never overwrite each other.
"""

import logging
import re
import secrets
from abc import ABC, abstractmethod
from pathlib import Path

from lifeos.errors import NotFoundError

from . import BLOB_DIR, BLOB_URL_PREFIX


logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(name: str) -> str:
    """Reduce a client-supplied filename to a safe basename."""
    base = Path(name.replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "file"


class BlobStorage(ABC):
    """Store, fetch and delete named binaries by URL handle."""

    @abstractmethod
    def put(self, name: str, data: bytes) -> str:
        """Store ``data`` and return its URL handle."""

    @abstractmethod
    def get(self, url: str) -> bytes:
        """Return the bytes behind a URL handle. Raises NotFoundError."""

    @abstractmethod
    def delete(self, url: str) -> None:
        """Remove a blob. Deleting a missing blob is not an error."""


class LocalBlobStorage(BlobStorage):
    """Filesystem-backed blob storage."""

    def __init__(self, root: Path | None = None):
        self.root = Path(root or BLOB_DIR)

    def _path_for(self, url: str) -> Path:
        if not url.startswith(BLOB_URL_PREFIX):
            raise ValueError(f"Not a vault blob URL: {url}")
        key = url[len(BLOB_URL_PREFIX):]
        if not key or key != Path(key).name:
            raise ValueError(f"Invalid blob key: {key!r}")
        return self.root / key

    def put(self, name: str, data: bytes) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        key = f"{secrets.token_hex(8)}-{safe_filename(name)}"
        (self.root / key).write_bytes(data)
        logger.info(f"Stored blob {key} ({len(data)} bytes)")
        return f"{BLOB_URL_PREFIX}{key}"

    def get(self, url: str) -> bytes:
        path = self._path_for(url)
        if not path.exists():
            raise NotFoundError(f"Blob not found: {url}")
        return path.read_bytes()

    def delete(self, url: str) -> None:
        path = self._path_for(url)
        path.unlink(missing_ok=True)


__all__ = ["BlobStorage", "LocalBlobStorage", "safe_filename"]
