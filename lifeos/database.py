"""
LifeOS Database Module

Handles the SQLite schema shared by the domain packages:
- users: Identity, profile and streak fields
- tasks: Momentum task list (insertion order kept by seq)
- vault_items: Document metadata (blobs live in the vault storage)
- accounts: Financial accounts entered during intake
- transactions: Imported transaction rows
"""

import logging
import sqlite3
import uuid
from pathlib import Path

from lifeos import DATA_DIR


logger = logging.getLogger(__name__)


# Database path
DB_PATH = DATA_DIR / "lifeos.db"


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Get database connection, creating tables if needed."""
    path = Path(db_path or DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), timeout=10.0)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT,
            name TEXT,
            currency TEXT DEFAULT 'USD',
            time_zone TEXT DEFAULT 'UTC',
            current_streak INTEGER NOT NULL DEFAULT 0 CHECK(current_streak >= 0),
            last_active_date TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS tasks (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT UNIQUE NOT NULL,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            category TEXT NOT NULL CHECK(category IN ('admin', 'health', 'financial')),
            is_urgent INTEGER NOT NULL DEFAULT 0,
            is_completed INTEGER NOT NULL DEFAULT 0,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(user_id) REFERENCES users(id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS vault_items (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            file_url TEXT NOT NULL,
            file_type TEXT,
            category TEXT DEFAULT 'General',
            created_at DATETIME NOT NULL,
            FOREIGN KEY(user_id) REFERENCES users(id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            label TEXT NOT NULL,
            type TEXT NOT NULL CHECK(type IN ('checking', 'savings', 'credit', 'investment', 'other')),
            starting_balance REAL NOT NULL DEFAULT 0,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(user_id) REFERENCES users(id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            account_id TEXT,
            date TEXT,
            description TEXT,
            amount REAL,
            raw TEXT,
            imported_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(user_id) REFERENCES users(id),
            FOREIGN KEY(account_id) REFERENCES accounts(id)
        )
    """)

    cursor.execute("CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks(user_id, seq)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_vault_user ON vault_items(user_id, created_at DESC)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_accounts_user ON accounts(user_id)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_transactions_user ON transactions(user_id)")

    conn.commit()
    return conn


def generate_id() -> str:
    """Generate a short unique ID."""
    return uuid.uuid4().hex[:12]


__all__ = ["DB_PATH", "generate_id", "get_connection"]
