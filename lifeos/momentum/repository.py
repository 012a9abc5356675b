"""
Task and user storage for the momentum engine.

The manager depends only on the abstract repositories below, so storage
can be swapped without touching the streak or toggle logic. The SQLite
implementations open a short-lived connection per call.

The one write that needs care is the streak update: two tasks completed
back-to-back must not both read the old streak. ``update_streak`` runs
the read-modify-write inside a ``BEGIN IMMEDIATE`` transaction, which
takes the database write lock before the read.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass
from datetime import date
from pathlib import Path
from typing import Any

from lifeos.database import generate_id, get_connection
from lifeos.errors import NotFoundError

from . import TASK_CATEGORIES


logger = logging.getLogger(__name__)

StreakUpdate = Callable[[int, date | None], tuple[int, date]]


@dataclass
class Task:
    """One entry in a user's task list."""

    id: str
    user_id: str
    title: str
    category: str
    is_urgent: bool = False
    is_completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class User:
    """User record; streak fields change only when a task is completed."""

    id: str
    email: str | None = None
    name: str | None = None
    currency: str = "USD"
    time_zone: str = "UTC"
    current_streak: int = 0
    last_active_date: date | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["last_active_date"] = (
            self.last_active_date.isoformat() if self.last_active_date else None
        )
        return data


# =============================================================================
# Interfaces
# =============================================================================


class TaskRepository(ABC):
    """Storage for tasks."""

    @abstractmethod
    def get(self, task_id: str) -> Task | None:
        """Fetch a task by ID, or None."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Task]:
        """All tasks owned by a user, in insertion order."""

    @abstractmethod
    def add(self, user_id: str, title: str, category: str, is_urgent: bool = False) -> Task:
        """Append a task to the end of a user's list."""

    @abstractmethod
    def set_completed(self, task_id: str, completed: bool) -> None:
        """Persist the completion flag. Raises NotFoundError if missing."""

    def add_many(self, user_id: str, tasks: Iterable[tuple[str, str, bool]]) -> list[Task]:
        """Append several (title, category, is_urgent) tasks in order."""
        return [self.add(user_id, title, category, is_urgent) for title, category, is_urgent in tasks]


class UserRepository(ABC):
    """Storage for users."""

    @abstractmethod
    def get(self, user_id: str) -> User | None:
        """Fetch a user by ID, or None."""

    @abstractmethod
    def create(self, user_id: str, email: str | None = None, name: str | None = None) -> bool:
        """Create a user if absent. Returns True only when a row was inserted."""

    @abstractmethod
    def update_streak(self, user_id: str, update: StreakUpdate) -> User:
        """
        Atomically apply ``update`` to the user's streak fields.

        ``update`` receives (current_streak, last_active_date) and returns
        (new_streak, new_last_active_date). Raises NotFoundError if missing.
        """

    @abstractmethod
    def update_profile(self, user_id: str, **fields: Any) -> User:
        """Update profile fields (name, email, currency, time_zone)."""


# =============================================================================
# SQLite Implementations
# =============================================================================


PROFILE_FIELDS = ("email", "name", "currency", "time_zone")


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    # Tolerate full timestamps written by older rows
    return date.fromisoformat(value[:10])


def _row_to_task(row: sqlite3.Row) -> Task:
    return Task(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        category=row["category"],
        is_urgent=bool(row["is_urgent"]),
        is_completed=bool(row["is_completed"]),
    )


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        currency=row["currency"] or "USD",
        time_zone=row["time_zone"] or "UTC",
        current_streak=row["current_streak"],
        last_active_date=_parse_date(row["last_active_date"]),
    )


class SQLiteTaskRepository(TaskRepository):
    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path

    def get(self, task_id: str) -> Task | None:
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        conn.close()
        return _row_to_task(row) if row else None

    def list_for_user(self, user_id: str) -> list[Task]:
        conn = get_connection(self.db_path)
        rows = conn.execute(
            "SELECT * FROM tasks WHERE user_id = ? ORDER BY seq ASC", (user_id,)
        ).fetchall()
        conn.close()
        return [_row_to_task(row) for row in rows]

    def add(self, user_id: str, title: str, category: str, is_urgent: bool = False) -> Task:
        if category not in TASK_CATEGORIES:
            raise ValueError(f"Invalid category. Must be one of: {TASK_CATEGORIES}")

        task = Task(
            id=generate_id(),
            user_id=user_id,
            title=title,
            category=category,
            is_urgent=is_urgent,
        )
        conn = get_connection(self.db_path)
        conn.execute(
            """
            INSERT INTO tasks (id, user_id, title, category, is_urgent, is_completed)
            VALUES (?, ?, ?, ?, ?, 0)
            """,
            (task.id, user_id, title, category, int(is_urgent)),
        )
        conn.commit()
        conn.close()
        return task

    def add_many(self, user_id: str, tasks: Iterable[tuple[str, str, bool]]) -> list[Task]:
        """Single-transaction version: either every task is appended or none."""
        created = []
        conn = get_connection(self.db_path)
        try:
            for title, category, is_urgent in tasks:
                if category not in TASK_CATEGORIES:
                    raise ValueError(f"Invalid category. Must be one of: {TASK_CATEGORIES}")
                task = Task(generate_id(), user_id, title, category, is_urgent)
                conn.execute(
                    """
                    INSERT INTO tasks (id, user_id, title, category, is_urgent, is_completed)
                    VALUES (?, ?, ?, ?, ?, 0)
                    """,
                    (task.id, user_id, title, category, int(is_urgent)),
                )
                created.append(task)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        return created

    def set_completed(self, task_id: str, completed: bool) -> None:
        conn = get_connection(self.db_path)
        cursor = conn.execute(
            "UPDATE tasks SET is_completed = ? WHERE id = ?", (int(completed), task_id)
        )
        conn.commit()
        conn.close()
        if cursor.rowcount == 0:
            raise NotFoundError(f"Task not found: {task_id}")


class SQLiteUserRepository(UserRepository):
    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path

    def get(self, user_id: str) -> User | None:
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        conn.close()
        return _row_to_user(row) if row else None

    def create(self, user_id: str, email: str | None = None, name: str | None = None) -> bool:
        conn = get_connection(self.db_path)
        cursor = conn.execute(
            "INSERT OR IGNORE INTO users (id, email, name) VALUES (?, ?, ?)",
            (user_id, email, name),
        )
        conn.commit()
        conn.close()
        return cursor.rowcount == 1

    def update_streak(self, user_id: str, update: StreakUpdate) -> User:
        conn = get_connection(self.db_path)
        cursor = conn.cursor()
        try:
            cursor.execute("BEGIN IMMEDIATE")
            row = cursor.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            if row is None:
                raise NotFoundError(f"User not found: {user_id}")

            user = _row_to_user(row)
            new_streak, new_last_active = update(user.current_streak, user.last_active_date)

            cursor.execute(
                "UPDATE users SET current_streak = ?, last_active_date = ? WHERE id = ?",
                (new_streak, new_last_active.isoformat(), user_id),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        user.current_streak = new_streak
        user.last_active_date = new_last_active
        return user

    def update_profile(self, user_id: str, **fields: Any) -> User:
        unknown = set(fields) - set(PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")

        updates = {k: v for k, v in fields.items() if v is not None}
        conn = get_connection(self.db_path)
        if updates:
            assignments = ", ".join(f"{column} = ?" for column in updates)
            cursor = conn.execute(
                f"UPDATE users SET {assignments} WHERE id = ?",
                (*updates.values(), user_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                conn.close()
                raise NotFoundError(f"User not found: {user_id}")

        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        conn.close()
        if row is None:
            raise NotFoundError(f"User not found: {user_id}")
        return _row_to_user(row)


__all__ = [
    "SQLiteTaskRepository",
    "SQLiteUserRepository",
    "Task",
    "TaskRepository",
    "User",
    "UserRepository",
]
