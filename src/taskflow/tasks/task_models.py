# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

DEFAULT_BOARD_COLOR = "#7694b8"


class TaskStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


class ReminderState(StrEnum):
    """
    Reminder sub-lifecycle of a task (independent of TaskStatus).

    - NONE:  no reminder_at
    - ARMED: reminder_at set, not delivered yet
    - FIRED: delivered; terminal until reminder_at is reassigned
    """

    NONE = "none"
    ARMED = "armed"
    FIRED = "fired"


@dataclass(slots=True)
class Task:
    id: int
    owner_id: int
    board_id: int | None
    title: str
    description: str
    priority: TaskPriority
    status: TaskStatus
    due_at: float | None
    reminder_at: float | None
    reminder_sent: bool
    created_at: float
    updated_at: float

    tags: list[str] = field(default_factory=list)
    notes: str = ""

    @property
    def reminder_state(self) -> ReminderState:
        if self.reminder_sent:
            return ReminderState.FIRED
        if self.reminder_at is None:
            return ReminderState.NONE
        return ReminderState.ARMED


@dataclass(slots=True)
class Board:
    id: int
    owner_id: int
    title: str
    description: str
    color: str
    created_at: float
    updated_at: float

    task_count: int = 0
    completed_count: int = 0
