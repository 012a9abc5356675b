"""
Tool: Session Manager
Purpose: Track authenticated dashboard sessions with security controls

Features:
- 256-bit random session tokens
- Configurable TTL (default 24h, max 7d)
- Activity tracking with idle timeout
- At most MAX_CONCURRENT_SESSIONS per user (oldest revoked first)
- Force logout capability

Usage:
    python -m lifeos.security.session --action create --user alice
    python -m lifeos.security.session --action validate --token "abc123..."
    python -m lifeos.security.session --action revoke --token "abc123..."
    python -m lifeos.security.session --action revoke-all --user alice
    python -m lifeos.security.session --action cleanup

Security Notes:
    - Only token hash is stored, never raw token
    - Raw token returned only on creation
    - Validates both token and expiry on every check
"""

import argparse
import hashlib
import json
import logging
import secrets
import sqlite3
import sys
from datetime import datetime, timedelta
from typing import Any

from lifeos import DATA_DIR


logger = logging.getLogger(__name__)

# Database path
DB_PATH = DATA_DIR / "sessions.db"

DEFAULT_TTL_HOURS = 24
MAX_TTL_HOURS = 168  # 7 days
IDLE_TIMEOUT_HOURS = 4
MAX_CONCURRENT_SESSIONS = 5
TOKEN_BYTES = 32  # 256 bits


def get_connection() -> sqlite3.Connection:
    """Get database connection, creating tables if needed."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row

    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS sessions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            token_hash TEXT UNIQUE NOT NULL,
            user_id TEXT NOT NULL,
            created_at DATETIME NOT NULL,
            expires_at DATETIME NOT NULL,
            last_activity DATETIME NOT NULL,
            is_active INTEGER DEFAULT 1,
            metadata TEXT
        )
    """)

    cursor.execute("CREATE INDEX IF NOT EXISTS idx_sessions_user ON sessions(user_id)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_sessions_active ON sessions(is_active)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_sessions_expires ON sessions(expires_at)")

    conn.commit()
    return conn


def generate_token() -> str:
    """Generate a secure random session token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def hash_token(token: str) -> str:
    """Hash a token for secure storage."""
    return hashlib.sha256(token.encode()).hexdigest()


def create_session(
    user_id: str,
    ttl_hours: int = DEFAULT_TTL_HOURS,
    metadata: dict | None = None,
) -> dict[str, Any]:
    """
    Create a new session.

    Args:
        user_id: User identifier
        ttl_hours: Session lifetime in hours
        metadata: Additional session metadata

    Returns:
        dict with session info and RAW TOKEN (only time it's returned)
    """
    if not user_id:
        return {"success": False, "error": "user_id is required"}

    ttl_hours = min(ttl_hours, MAX_TTL_HOURS)

    token = generate_token()
    now = datetime.now()
    expires_at = now + timedelta(hours=ttl_hours)

    conn = get_connection()
    cursor = conn.cursor()

    cursor.execute(
        "SELECT COUNT(*) as count FROM sessions WHERE user_id = ? AND is_active = 1", (user_id,)
    )
    active_count = cursor.fetchone()["count"]

    if active_count >= MAX_CONCURRENT_SESSIONS:
        # Revoke oldest sessions to make room for this one
        cursor.execute(
            """
            UPDATE sessions SET is_active = 0
            WHERE id IN (
                SELECT id FROM sessions
                WHERE user_id = ? AND is_active = 1
                ORDER BY created_at ASC, id ASC
                LIMIT ?
            )
        """,
            (user_id, active_count - MAX_CONCURRENT_SESSIONS + 1),
        )

    cursor.execute(
        """
        INSERT INTO sessions
        (token_hash, user_id, created_at, expires_at, last_activity, metadata)
        VALUES (?, ?, ?, ?, ?, ?)
    """,
        (
            hash_token(token),
            user_id,
            now.isoformat(),
            expires_at.isoformat(),
            now.isoformat(),
            json.dumps(metadata) if metadata else None,
        ),
    )

    session_id = cursor.lastrowid
    conn.commit()
    conn.close()

    logger.info(f"Session {session_id} created for {user_id}")

    return {
        "success": True,
        "token": token,  # Only time raw token is returned!
        "session_id": session_id,
        "user_id": user_id,
        "expires_at": expires_at.isoformat(),
        "message": "Session created",
    }


def validate_session(token: str, update_activity: bool = True) -> dict[str, Any]:
    """
    Validate a session token.

    Returns:
        dict with ``valid`` plus session info, or ``reason`` when invalid
    """
    conn = get_connection()
    cursor = conn.cursor()

    cursor.execute("SELECT * FROM sessions WHERE token_hash = ?", (hash_token(token),))
    row = cursor.fetchone()

    if not row:
        conn.close()
        return {"success": True, "valid": False, "reason": "token_not_found"}

    if not row["is_active"]:
        conn.close()
        return {"success": True, "valid": False, "reason": "session_revoked"}

    now = datetime.now()

    if now > datetime.fromisoformat(row["expires_at"]):
        cursor.execute("UPDATE sessions SET is_active = 0 WHERE id = ?", (row["id"],))
        conn.commit()
        conn.close()
        return {"success": True, "valid": False, "reason": "session_expired"}

    idle_seconds = (now - datetime.fromisoformat(row["last_activity"])).total_seconds()
    if idle_seconds > IDLE_TIMEOUT_HOURS * 3600:
        cursor.execute("UPDATE sessions SET is_active = 0 WHERE id = ?", (row["id"],))
        conn.commit()
        conn.close()
        return {"success": True, "valid": False, "reason": "idle_timeout"}

    if update_activity:
        cursor.execute(
            "UPDATE sessions SET last_activity = ? WHERE id = ?", (now.isoformat(), row["id"])
        )
        conn.commit()

    conn.close()

    metadata = None
    if row["metadata"]:
        try:
            metadata = json.loads(row["metadata"])
        except json.JSONDecodeError:
            logger.warning(f"Session {row['id']} has unreadable metadata")

    return {
        "success": True,
        "valid": True,
        "session_id": row["id"],
        "user_id": row["user_id"],
        "created_at": row["created_at"],
        "expires_at": row["expires_at"],
        "last_activity": row["last_activity"],
        "metadata": metadata,
    }


def refresh_session(token: str, extend_hours: int = DEFAULT_TTL_HOURS) -> dict[str, Any]:
    """Extend a valid session's expiry from now."""
    validation = validate_session(token, update_activity=False)
    if not validation.get("valid"):
        return validation

    extend_hours = min(extend_hours, MAX_TTL_HOURS)
    now = datetime.now()
    new_expires = now + timedelta(hours=extend_hours)

    conn = get_connection()
    conn.execute(
        "UPDATE sessions SET expires_at = ?, last_activity = ? WHERE token_hash = ?",
        (new_expires.isoformat(), now.isoformat(), hash_token(token)),
    )
    conn.commit()
    conn.close()

    return {
        "success": True,
        "session_id": validation["session_id"],
        "user_id": validation["user_id"],
        "new_expires_at": new_expires.isoformat(),
        "message": "Session refreshed",
    }


def revoke_session(token: str) -> dict[str, Any]:
    """Revoke a single session."""
    token_hash = hash_token(token)

    conn = get_connection()
    cursor = conn.cursor()

    cursor.execute("SELECT id, user_id FROM sessions WHERE token_hash = ?", (token_hash,))
    row = cursor.fetchone()

    if not row:
        conn.close()
        return {"success": False, "error": "Session not found"}

    cursor.execute("UPDATE sessions SET is_active = 0 WHERE token_hash = ?", (token_hash,))
    conn.commit()
    conn.close()

    logger.info(f"Session {row['id']} revoked for {row['user_id']}")

    return {"success": True, "session_id": row["id"], "message": "Session revoked"}


def revoke_all_sessions(user_id: str) -> dict[str, Any]:
    """Revoke all sessions for a user."""
    conn = get_connection()
    cursor = conn.cursor()

    cursor.execute(
        "UPDATE sessions SET is_active = 0 WHERE user_id = ? AND is_active = 1", (user_id,)
    )
    count = cursor.rowcount
    conn.commit()
    conn.close()

    logger.info(f"Revoked {count} sessions for {user_id}")

    return {
        "success": True,
        "user_id": user_id,
        "revoked_count": count,
        "message": f"Revoked {count} sessions",
    }


def cleanup_expired() -> dict[str, Any]:
    """Deactivate expired sessions and delete old inactive ones."""
    conn = get_connection()
    cursor = conn.cursor()

    now = datetime.now()

    cursor.execute(
        "UPDATE sessions SET is_active = 0 WHERE expires_at < ? AND is_active = 1",
        (now.isoformat(),),
    )
    expired = cursor.rowcount

    cutoff = (now - timedelta(days=30)).isoformat()
    cursor.execute("DELETE FROM sessions WHERE is_active = 0 AND created_at < ?", (cutoff,))
    deleted = cursor.rowcount

    conn.commit()
    conn.close()

    return {
        "success": True,
        "expired_count": expired,
        "deleted_count": deleted,
        "message": f"Marked {expired} expired, deleted {deleted} old sessions",
    }


def main():
    parser = argparse.ArgumentParser(description="Session Manager")
    parser.add_argument(
        "--action",
        required=True,
        choices=["create", "validate", "refresh", "revoke", "revoke-all", "cleanup"],
        help="Action to perform",
    )
    parser.add_argument("--user", help="User ID")
    parser.add_argument("--token", help="Session token")
    parser.add_argument(
        "--ttl",
        type=int,
        default=DEFAULT_TTL_HOURS,
        help=f"Session TTL in hours (default: {DEFAULT_TTL_HOURS})",
    )

    args = parser.parse_args()

    if args.action in ("create", "revoke-all") and not args.user:
        print(f"Error: --user required for {args.action}")
        sys.exit(1)
    if args.action in ("validate", "refresh", "revoke") and not args.token:
        print(f"Error: --token required for {args.action}")
        sys.exit(1)

    if args.action == "create":
        result = create_session(user_id=args.user, ttl_hours=args.ttl)
    elif args.action == "validate":
        result = validate_session(token=args.token)
    elif args.action == "refresh":
        result = refresh_session(token=args.token, extend_hours=args.ttl)
    elif args.action == "revoke":
        result = revoke_session(token=args.token)
    elif args.action == "revoke-all":
        result = revoke_all_sessions(user_id=args.user)
    else:
        result = cleanup_expired()

    if result.get("success"):
        print(f"OK {result.get('message', 'Success')}")
    else:
        print(f"ERROR {result.get('error')}")
        sys.exit(1)

    output = result.copy()
    if "token" in output:
        print(f"\n** SESSION TOKEN (save this!) **\n{output['token']}\n")
        output["token"] = "***CREATED***"

    print(json.dumps(output, indent=2, default=str))


if __name__ == "__main__":
    main()
