"""
Tasks Route - Momentum task list and completion toggle

Provides endpoints for the momentum tracker:
- List tasks (incomplete first) with streak and progress
- Append a task
- Toggle a task's completion flag (credits the streak on completion)
"""

import logging

from fastapi import APIRouter, Depends, status

from lifeos.dashboard.backend.dependencies import get_current_user, get_momentum_manager
from lifeos.dashboard.backend.models import MomentumResponse, NewTask, TaskItem, ToggleRequest
from lifeos.momentum.manager import MomentumManager


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=MomentumResponse)
async def list_tasks(
    user: dict = Depends(get_current_user),
    manager: MomentumManager = Depends(get_momentum_manager),
):
    """
    Get the user's tasks and current streak.

    First visit creates the user with a starter task list.
    """
    snapshot = manager.get_tasks(user["user_id"])
    return MomentumResponse(**snapshot.to_dict())


@router.post("", response_model=TaskItem, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: NewTask,
    user: dict = Depends(get_current_user),
    manager: MomentumManager = Depends(get_momentum_manager),
):
    """Append a task to the end of the user's list."""
    task = manager.add_task(user["user_id"], request.title, request.category, request.is_urgent)
    return TaskItem(**task.to_dict())


@router.patch("/{task_id}", response_model=MomentumResponse)
async def toggle_task(
    task_id: str,
    request: ToggleRequest,
    user: dict = Depends(get_current_user),
    manager: MomentumManager = Depends(get_momentum_manager),
):
    """
    Set a task's completion flag.

    Returns the refreshed list so the streak change is visible immediately.
    """
    manager.toggle_task(user["user_id"], task_id, request.completed)
    snapshot = manager.get_tasks(user["user_id"])
    return MomentumResponse(**snapshot.to_dict())
