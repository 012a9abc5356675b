"""Digital Vault - keep the paperwork that proves who you are

IDs, discharge papers, benefit letters and leases get lost during a
crisis. The vault stores uploaded documents as blobs and keeps their
metadata (title, type, category) per user.

Components:
    storage.py: Blob storage interface and local filesystem backend
    manager.py: Per-user listing, upload and delete with ownership checks
"""

from lifeos import DATA_DIR


BLOB_DIR = DATA_DIR / "vault"
BLOB_URL_PREFIX = "vault://"
DEFAULT_CATEGORY = "General"

__all__ = ["BLOB_DIR", "BLOB_URL_PREFIX", "DEFAULT_CATEGORY"]
