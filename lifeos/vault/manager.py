"""
Tool: Vault Manager
Purpose: Per-user document metadata on top of blob storage

Usage:
    python -m lifeos.vault.manager --action list --user alice
    python -m lifeos.vault.manager --action upload --user alice --file ./state_id.pdf --category ID
    python -m lifeos.vault.manager --action delete --user alice --item-id abc123

Output:
    JSON result with success status and data
"""

import argparse
import json
import logging
import mimetypes
import sys
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from lifeos.database import generate_id, get_connection
from lifeos.errors import LifeOSError, NotFoundError, UnauthorizedError

from . import DEFAULT_CATEGORY
from .storage import BlobStorage, LocalBlobStorage


logger = logging.getLogger(__name__)


@dataclass
class VaultItem:
    id: str
    user_id: str
    title: str
    file_url: str
    file_type: str | None
    category: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class VaultManager:
    """
    Document vault for authenticated users.

    Args:
        storage: Blob backend holding file contents
        db_path: Metadata database (defaults to the shared LifeOS database)
        max_upload_bytes: Reject uploads larger than this (None = no limit)
    """

    def __init__(
        self,
        storage: BlobStorage | None = None,
        db_path: Path | None = None,
        max_upload_bytes: int | None = None,
    ):
        self.storage = storage or LocalBlobStorage()
        self.db_path = db_path
        self.max_upload_bytes = max_upload_bytes

    def list_items(self, actor: str | None) -> list[VaultItem]:
        """Newest first. Anonymous callers see an empty vault."""
        if not actor:
            return []

        conn = get_connection(self.db_path)
        rows = conn.execute(
            "SELECT * FROM vault_items WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
            (actor,),
        ).fetchall()
        conn.close()
        return [VaultItem(**dict(row)) for row in rows]

    def get_item(self, actor: str | None, item_id: str) -> VaultItem:
        """Fetch one item the actor owns."""
        if not actor:
            raise UnauthorizedError("Unauthorized")

        conn = get_connection(self.db_path)
        row = conn.execute("SELECT * FROM vault_items WHERE id = ?", (item_id,)).fetchone()
        conn.close()

        if row is None or row["user_id"] != actor:
            raise UnauthorizedError("Unauthorized")
        return VaultItem(**dict(row))

    def read_item(self, actor: str | None, item_id: str) -> tuple[VaultItem, bytes]:
        item = self.get_item(actor, item_id)
        return item, self.storage.get(item.file_url)

    def upload_item(
        self,
        actor: str | None,
        filename: str,
        data: bytes,
        content_type: str | None = None,
        category: str | None = None,
    ) -> VaultItem:
        """
        Store a document and record its metadata.

        Raises:
            UnauthorizedError: No authenticated actor
            ValueError: Empty or oversized file
            NotFoundError: Actor has no user record yet
        """
        if not actor:
            raise UnauthorizedError("Unauthorized")
        if not filename or not data:
            raise ValueError("No file provided")
        if self.max_upload_bytes is not None and len(data) > self.max_upload_bytes:
            raise ValueError(f"File exceeds the {self.max_upload_bytes} byte upload limit")

        conn = get_connection(self.db_path)
        try:
            user = conn.execute("SELECT id FROM users WHERE id = ?", (actor,)).fetchone()
            if user is None:
                raise NotFoundError("User not found")

            file_url = self.storage.put(filename, data)

            item = VaultItem(
                id=generate_id(),
                user_id=actor,
                title=filename,
                file_url=file_url,
                file_type=content_type or mimetypes.guess_type(filename)[0],
                category=category or DEFAULT_CATEGORY,
                created_at=datetime.now().isoformat(),
            )
            try:
                conn.execute(
                    """
                    INSERT INTO vault_items (id, user_id, title, file_url, file_type, category, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (item.id, item.user_id, item.title, item.file_url, item.file_type, item.category, item.created_at),
                )
                conn.commit()
            except Exception:
                # Keep storage and metadata consistent
                self.storage.delete(file_url)
                raise
        finally:
            conn.close()

        logger.info(f"Vault upload {item.id} for {actor}")
        return item

    def delete_item(self, actor: str | None, item_id: str) -> None:
        """Remove the blob, then the metadata row. Non-owners get UnauthorizedError."""
        item = self.get_item(actor, item_id)

        self.storage.delete(item.file_url)

        conn = get_connection(self.db_path)
        conn.execute("DELETE FROM vault_items WHERE id = ?", (item_id,))
        conn.commit()
        conn.close()
        logger.info(f"Vault item {item_id} deleted by {actor}")


def main():
    parser = argparse.ArgumentParser(description="Vault Manager")
    parser.add_argument(
        "--action", required=True, choices=["list", "upload", "delete"], help="Action to perform"
    )
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument("--file", help="File to upload")
    parser.add_argument("--category", default=DEFAULT_CATEGORY, help="Document category")
    parser.add_argument("--item-id", help="Vault item ID (delete)")

    args = parser.parse_args()
    manager = VaultManager()

    try:
        if args.action == "list":
            items = manager.list_items(args.user)
            result = {"success": True, "data": [item.to_dict() for item in items]}

        elif args.action == "upload":
            if not args.file:
                print("Error: --file required for upload")
                sys.exit(1)
            path = Path(args.file)
            item = manager.upload_item(args.user, path.name, path.read_bytes(), category=args.category)
            result = {"success": True, "data": item.to_dict(), "message": f"Stored {item.title}"}

        else:
            if not args.item_id:
                print("Error: --item-id required for delete")
                sys.exit(1)
            manager.delete_item(args.user, args.item_id)
            result = {"success": True, "message": f"Deleted {args.item_id}"}

    except (LifeOSError, ValueError, OSError) as e:
        result = {"success": False, "error": str(e)}

    print(json.dumps(result, indent=2))
    if not result["success"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
