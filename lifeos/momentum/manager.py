"""
Tool: Momentum Manager
Purpose: Task list reads, task appends and the completion toggle with streak tracking

Every operation receives an already-authenticated actor ID. Ownership is
checked against the task's owner before anything is written.

Marking a task complete always re-runs the streak computation, even if the
task was already complete. That is safe because a second completion on the
same day hits the "already credited today" branch and changes nothing.

Usage:
    python -m lifeos.momentum.manager --action list --user alice
    python -m lifeos.momentum.manager --action add --user alice --title "Call caseworker" --category admin
    python -m lifeos.momentum.manager --action toggle --user alice --task-id abc123 --completed true

Output:
    JSON result with success status and data
"""

import argparse
import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from lifeos.config import get_section
from lifeos.errors import LifeOSError, NotFoundError, UnauthorizedError
from lifeos.roadmap.models import Roadmap

from . import SEED_TASKS, TASK_CATEGORIES
from .repository import (
    SQLiteTaskRepository,
    SQLiteUserRepository,
    Task,
    TaskRepository,
    UserRepository,
)
from .streak import compute_streak, to_day


logger = logging.getLogger(__name__)


@dataclass
class MomentumSnapshot:
    """What the momentum view shows: ordered tasks, streak and today's progress."""

    tasks: list[Task] = field(default_factory=list)
    streak: int = 0

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.is_completed)

    @property
    def progress_percent(self) -> float:
        if not self.tasks:
            return 0.0
        return round(self.completed_count / len(self.tasks) * 100, 1)

    @property
    def all_completed(self) -> bool:
        return bool(self.tasks) and all(task.is_completed for task in self.tasks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks": [task.to_dict() for task in self.tasks],
            "streak": self.streak,
            "completed_count": self.completed_count,
            "total": len(self.tasks),
            "progress_percent": self.progress_percent,
            "all_completed": self.all_completed,
        }


def order_tasks(tasks: list[Task]) -> list[Task]:
    """Incomplete tasks first; insertion order kept within each group."""
    # sorted() is stable, so equal keys keep their relative order
    return sorted(tasks, key=lambda task: task.is_completed)


def _require_actor(actor: str | None) -> str:
    if not actor:
        raise UnauthorizedError("Unauthorized")
    return actor


class MomentumManager:
    """
    Coordinates the task store, the user store and the streak engine.

    Args:
        tasks: Task storage
        users: User storage
        today: Zero-argument callable returning the current day
        seed_tasks: Give new users the starter task list
    """

    def __init__(
        self,
        tasks: TaskRepository,
        users: UserRepository,
        today: Callable[[], date] = date.today,
        seed_tasks: bool = True,
    ):
        self.tasks = tasks
        self.users = users
        self.today = today
        self.seed_tasks = seed_tasks

    def ensure_user(self, actor: str, email: str | None = None, name: str | None = None) -> None:
        """Create the user record (and starter tasks) on first sight."""
        if self.users.create(actor, email=email, name=name):
            logger.info(f"Created user {actor}")
            if self.seed_tasks:
                self.tasks.add_many(actor, SEED_TASKS)

    def get_tasks(
        self, actor: str | None, email: str | None = None, name: str | None = None
    ) -> MomentumSnapshot:
        """
        Return the actor's tasks and streak, creating the user on first visit.

        Raises:
            UnauthorizedError: No authenticated actor
        """
        actor = _require_actor(actor)
        self.ensure_user(actor, email=email, name=name)

        user = self.users.get(actor)
        if user is None:
            raise NotFoundError(f"User not found: {actor}")

        return MomentumSnapshot(
            tasks=order_tasks(self.tasks.list_for_user(actor)),
            streak=user.current_streak,
        )

    def add_task(
        self, actor: str | None, title: str, category: str, is_urgent: bool = False
    ) -> Task:
        """Append a task to the end of the actor's list."""
        actor = _require_actor(actor)
        title = title.strip()
        if not title:
            raise ValueError("Task title is required")
        if category not in TASK_CATEGORIES:
            raise ValueError(f"Invalid category. Must be one of: {TASK_CATEGORIES}")

        self.ensure_user(actor)
        return self.tasks.add(actor, title, category, is_urgent)

    def add_roadmap_tasks(self, actor: str | None, roadmap: Roadmap, phase_index: int = 0) -> list[Task]:
        """Append every task from one roadmap phase to the actor's list."""
        actor = _require_actor(actor)
        if not 0 <= phase_index < len(roadmap.phases):
            raise ValueError(f"Roadmap has no phase {phase_index}")

        self.ensure_user(actor)
        phase = roadmap.phases[phase_index]
        created = self.tasks.add_many(
            actor, [(t.title, t.category, t.is_urgent) for t in phase.tasks]
        )
        logger.info(f"Added {len(created)} tasks from '{phase.phase_name}' for {actor}")
        return created

    def toggle_task(self, actor: str | None, task_id: str, completed: bool) -> None:
        """
        Set a task's completion flag and credit the owner's streak on completion.

        Raises:
            NotFoundError: No task with this ID
            UnauthorizedError: Actor missing or not the task's owner

        The flag and the streak live in separate transactions. If the streak
        write fails, the flag is restored to its previous value and the
        error is re-raised.
        """
        actor = _require_actor(actor)

        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"Task not found: {task_id}")
        if task.user_id != actor:
            logger.warning(f"User {actor} attempted to toggle task {task_id} owned by another user")
            raise UnauthorizedError("Unauthorized access to task")

        self.tasks.set_completed(task_id, completed)

        if not completed:
            return

        today = to_day(self.today())
        try:
            user = self.users.update_streak(
                task.user_id, lambda streak, last_active: compute_streak(streak, last_active, today)
            )
        except Exception:
            logger.error(f"Streak update failed for {task.user_id}, restoring task {task_id}")
            self.tasks.set_completed(task_id, task.is_completed)
            raise
        logger.info(f"Streak for {user.id} is now {user.current_streak} (last active {today})")


def default_manager() -> MomentumManager:
    """Manager backed by the default SQLite database."""
    config = get_section("momentum")
    return MomentumManager(
        SQLiteTaskRepository(),
        SQLiteUserRepository(),
        seed_tasks=config.get("seed_tasks", True),
    )


def main():
    parser = argparse.ArgumentParser(description="Momentum Manager")
    parser.add_argument(
        "--action", required=True, choices=["list", "add", "toggle"], help="Action to perform"
    )
    parser.add_argument("--user", required=True, help="User ID")
    parser.add_argument("--task-id", help="Task ID (toggle)")
    parser.add_argument(
        "--completed", choices=["true", "false"], default="true", help="New completion state"
    )
    parser.add_argument("--title", help="Task title (add)")
    parser.add_argument("--category", choices=TASK_CATEGORIES, default="admin", help="Task category")
    parser.add_argument("--urgent", action="store_true", help="Mark task urgent")

    args = parser.parse_args()
    manager = default_manager()

    try:
        if args.action == "list":
            result = {"success": True, "data": manager.get_tasks(args.user).to_dict()}

        elif args.action == "add":
            if not args.title:
                print("Error: --title required for add")
                sys.exit(1)
            task = manager.add_task(args.user, args.title, args.category, args.urgent)
            result = {"success": True, "data": task.to_dict(), "message": f"Task created with ID {task.id}"}

        else:
            if not args.task_id:
                print("Error: --task-id required for toggle")
                sys.exit(1)
            manager.toggle_task(args.user, args.task_id, args.completed == "true")
            result = {"success": True, "data": manager.get_tasks(args.user).to_dict()}

    except (LifeOSError, ValueError) as e:
        result = {"success": False, "error": str(e)}

    print(json.dumps(result, indent=2, default=str))
    if not result["success"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
