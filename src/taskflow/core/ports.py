# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the reminder core.

The scanner depends on Protocols instead of concrete implementations.
This keeps storage/mail transports swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..mail.smtp_sender import DeliveryStatus
    from ..reminders.reporting import ReminderEvent
    from ..tasks.task_models import Task
    from ..users.user_models import User

Clock = Callable[[], float]
# Wall-clock source returning epoch seconds; time.time in production.


class ReminderTaskRepo(Protocol):
    def find_due_reminders(
            self,
            *,
            now_ts: float,
            window_end_ts: float,
            limit: int | None = None,
    ) -> list[Task]: ...

    def mark_reminder_sent(self, task_id: int, *, reminder_at: float) -> bool: ...


class UserRepo(Protocol):
    def find_user_by_id(self, user_id: int) -> User | None: ...


class MailSender(Protocol):
    """
    Outbound reminder mail.

    Returns DeliveryStatus.SENT or DeliveryStatus.SKIPPED (transport not configured).
    Transport failures are raised; callers decide what a failure means.
    """

    async def send_reminder(self, email: str, task: Task) -> DeliveryStatus: ...


class ReminderReporter(Protocol):
    """Receives one event per processed reminder (and per failed query)."""

    def report(self, event: ReminderEvent) -> None: ...
