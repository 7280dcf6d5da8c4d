# src/taskflow/reminders/reminder_scanner.py

from __future__ import annotations

"""
Reminder scanner.

One scan:
- selects pending, un-notified tasks whose reminder_at is in [now, now + lookahead],
- resolves each owner's email,
- sends the reminder (bounded by a timeout),
- and only after a successful send flips reminder_sent (conditional update).

Every per-task failure ends up as a reported outcome; the batch always runs to the end.
A failed task stays armed and is picked up again by the next scan while its
reminder is still inside the window.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field

from ..core.ports import Clock, MailSender, ReminderReporter, ReminderTaskRepo, UserRepo
from ..mail.smtp_sender import DeliveryStatus
from ..tasks.task_models import Task
from .reporting import ReminderEvent, ReminderOutcome

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_SECONDS = 5 * 60


@dataclass(slots=True)
class ScanReport:
    scanned_at: float
    window_end: float
    events: list[ReminderEvent] = field(default_factory=list)

    @property
    def selected(self) -> int:
        return sum(1 for e in self.events if e.task_id is not None)

    @property
    def sent(self) -> int:
        return self.count(ReminderOutcome.SENT)

    @property
    def failed(self) -> int:
        return sum(1 for e in self.events if e.outcome.is_failure)

    def count(self, outcome: ReminderOutcome) -> int:
        return sum(1 for e in self.events if e.outcome == outcome)


class ReminderScanner:
    def __init__(
            self,
            task_store: ReminderTaskRepo,
            user_store: UserRepo,
            mail_sender: MailSender,
            reporter: ReminderReporter,
            *,
            lookahead_seconds: float = DEFAULT_LOOKAHEAD_SECONDS,
            send_timeout_seconds: float = 30.0,
            batch_limit: int | None = None,
            clock: Clock = time.time,
    ) -> None:
        if lookahead_seconds <= 0:
            raise ValueError("lookahead_seconds must be positive")
        self.task_store = task_store
        self.user_store = user_store
        self.mail_sender = mail_sender
        self.reporter = reporter
        self.lookahead_seconds = float(lookahead_seconds)
        self.send_timeout_seconds = max(0.01, float(send_timeout_seconds))
        self.batch_limit = batch_limit or None
        self.clock = clock

    def _emit(self, report: ScanReport, event: ReminderEvent) -> None:
        report.events.append(event)
        try:
            self.reporter.report(event)
        except Exception:
            logger.exception("Reminder reporter failed outcome=%s task_id=%s", event.outcome, event.task_id)

    async def scan_once(self) -> ScanReport:
        now = float(self.clock())
        window_end = now + self.lookahead_seconds
        report = ScanReport(scanned_at=now, window_end=window_end)

        try:
            tasks = self.task_store.find_due_reminders(
                now_ts=now,
                window_end_ts=window_end,
                limit=self.batch_limit,
            )
        except Exception as e:
            self._emit(
                report,
                ReminderEvent(outcome=ReminderOutcome.QUERY_FAILED, scanned_at=now, error=repr(e)),
            )
            return report

        if tasks:
            logger.debug("Reminder scan selected %d task(s) window=[%.0f, %.0f]", len(tasks), now, window_end)

        for task in tasks:
            outcome, error = await self.deliver(task)
            self._emit(
                report,
                ReminderEvent(
                    outcome=outcome,
                    scanned_at=now,
                    task_id=task.id,
                    owner_id=task.owner_id,
                    reminder_at=task.reminder_at,
                    error=error,
                ),
            )

        if report.events:
            logger.info(
                "Reminder scan done selected=%d sent=%d failed=%d",
                report.selected,
                report.sent,
                report.failed,
            )
        return report

    async def deliver(self, task: Task) -> tuple[ReminderOutcome, str | None]:
        """
        Deliver one reminder. Never raises (except on cancellation).

        Send strictly precedes mark: a crash in between costs a duplicate mail,
        never a silently missed reminder.
        """
        try:
            user = self.user_store.find_user_by_id(task.owner_id)
        except Exception as e:
            return ReminderOutcome.LOOKUP_FAILED, repr(e)

        if user is None:
            return ReminderOutcome.SKIPPED_NO_OWNER, None
        if not user.can_receive_mail:
            return ReminderOutcome.SKIPPED_NO_EMAIL, None

        try:
            status = await asyncio.wait_for(
                self.mail_sender.send_reminder(str(user.email), task),
                timeout=self.send_timeout_seconds,
            )
        except asyncio.TimeoutError:
            return ReminderOutcome.SEND_TIMEOUT, f"send exceeded {self.send_timeout_seconds:.1f}s"
        except Exception as e:
            return ReminderOutcome.SEND_FAILED, repr(e)

        if status == DeliveryStatus.SKIPPED:
            return ReminderOutcome.SKIPPED_MAIL_DISABLED, None

        if task.reminder_at is None:
            # Unreachable for rows selected by find_due_reminders.
            return ReminderOutcome.MARK_CONFLICT, "task has no reminder_at"

        try:
            marked = self.task_store.mark_reminder_sent(task.id, reminder_at=task.reminder_at)
        except Exception as e:
            return ReminderOutcome.MARK_FAILED, repr(e)

        if not marked:
            return ReminderOutcome.MARK_CONFLICT, None
        return ReminderOutcome.SENT, None
