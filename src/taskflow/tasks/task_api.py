# src/taskflow/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.state import AppState
from .task_models import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)


def create_task(
    state: AppState,
    *,
    owner_id: int,
    board_id: int,
    title: str,
    description: str = "",
    priority: TaskPriority = TaskPriority.MEDIUM,
    due_at: float | None = None,
    reminder_at: float | None = None,
    tags: list[str] | None = None,
    notes: str = "",
) -> int:
    """
    Create a task on one of the owner's boards.
    Raises LookupError if the board does not exist or belongs to someone else.
    """
    board = state.task_store.get_board(board_id, owner_id=owner_id)
    if board is None:
        raise LookupError(f"board {board_id} not found")

    return state.task_store.add_task(
        owner_id=owner_id,
        board_id=board.id,
        title=title,
        description=description,
        priority=priority,
        due_at=due_at,
        reminder_at=reminder_at,
        tags=tags,
        notes=notes,
    )


def reschedule_reminder(state: AppState, task_id: int, reminder_at: float | None) -> Task | None:
    """Point the task at a new reminder time (or clear it). The reminder is re-armed."""
    task = state.task_store.update_task(task_id, reminder_at=reminder_at)
    if task is not None:
        logger.info("Reminder rescheduled task_id=%s reminder_at=%s", task_id, reminder_at)
    return task


def complete_task(state: AppState, task_id: int) -> Task | None:
    """Completed tasks drop out of reminder selection."""
    return state.task_store.update_task(task_id, status=TaskStatus.COMPLETED)
