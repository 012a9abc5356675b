"""Momentum Engine - daily tasks and consecutive-day streaks

Philosophy:
    Rebuilding stability is slow. Showing up on consecutive days is the
    signal worth rewarding, so the streak counts days with at least one
    completed task, not the number of tasks.

Components:
    streak.py: Pure streak computation (calendar-day arithmetic)
    repository.py: Task and user storage interfaces with SQLite backends
    manager.py: Task list reads, task appends and the completion toggle

Usage:
    from lifeos.momentum.manager import MomentumManager
    from lifeos.momentum.repository import SQLiteTaskRepository, SQLiteUserRepository

    manager = MomentumManager(SQLiteTaskRepository(), SQLiteUserRepository())
    snapshot = manager.get_tasks("alice")
    manager.toggle_task("alice", snapshot.tasks[0].id, completed=True)
"""

# Valid task categories
TASK_CATEGORIES = ("admin", "health", "financial")

# Tasks every new user starts with: (title, category, is_urgent)
SEED_TASKS = (
    ("Upload Discharge Paperwork", "admin", True),
    ("Review Housing Options", "admin", True),
    ("15 Minute Journal", "health", False),
)

__all__ = ["SEED_TASKS", "TASK_CATEGORIES"]
