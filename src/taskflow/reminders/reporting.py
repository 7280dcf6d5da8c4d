# src/taskflow/reminders/reporting.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from ..core.ports import ReminderReporter

logger = logging.getLogger(__name__)


class ReminderOutcome(StrEnum):
    SENT = "sent"
    SKIPPED_NO_OWNER = "skipped_no_owner"
    SKIPPED_NO_EMAIL = "skipped_no_email"
    SKIPPED_MAIL_DISABLED = "skipped_mail_disabled"
    LOOKUP_FAILED = "lookup_failed"
    SEND_FAILED = "send_failed"
    SEND_TIMEOUT = "send_timeout"
    MARK_FAILED = "mark_failed"
    MARK_CONFLICT = "mark_conflict"
    QUERY_FAILED = "query_failed"

    @property
    def is_failure(self) -> bool:
        return self in _FAILURES


_FAILURES = frozenset(
    {
        ReminderOutcome.LOOKUP_FAILED,
        ReminderOutcome.SEND_FAILED,
        ReminderOutcome.SEND_TIMEOUT,
        ReminderOutcome.MARK_FAILED,
        ReminderOutcome.QUERY_FAILED,
    }
)


@dataclass(slots=True, frozen=True)
class ReminderEvent:
    outcome: ReminderOutcome
    scanned_at: float
    task_id: int | None = None
    owner_id: int | None = None
    reminder_at: float | None = None
    error: str | None = None


class LoggingReminderReporter:
    """Default reporter: one log line per event, level by outcome."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def report(self, event: ReminderEvent) -> None:
        outcome = event.outcome

        if outcome == ReminderOutcome.SENT:
            self._log.info("Reminder sent task_id=%s owner_id=%s", event.task_id, event.owner_id)
        elif outcome == ReminderOutcome.MARK_FAILED:
            # Mail went out but the flag was not stored: next scan re-sends.
            self._log.error(
                "Reminder sent but mark_reminder_sent failed task_id=%s (duplicate expected): %s",
                event.task_id,
                event.error,
            )
        elif outcome == ReminderOutcome.QUERY_FAILED:
            self._log.error("Reminder query failed: %s", event.error)
        elif outcome.is_failure:
            self._log.error(
                "Reminder %s task_id=%s owner_id=%s: %s",
                outcome.value,
                event.task_id,
                event.owner_id,
                event.error,
            )
        else:
            self._log.warning(
                "Reminder %s task_id=%s owner_id=%s",
                outcome.value,
                event.task_id,
                event.owner_id,
            )


@dataclass(slots=True)
class RecordingReminderReporter:
    """Keeps every event in memory."""

    events: list[ReminderEvent] = field(default_factory=list)

    def report(self, event: ReminderEvent) -> None:
        self.events.append(event)

    def outcomes(self) -> list[ReminderOutcome]:
        return [e.outcome for e in self.events]


class FanoutReminderReporter:
    """Forward each event to several reporters; a broken reporter never breaks a scan."""

    def __init__(self, reporters: Iterable[ReminderReporter]) -> None:
        self._reporters = list(reporters)

    def report(self, event: ReminderEvent) -> None:
        for r in self._reporters:
            try:
                r.report(event)
            except Exception:
                logger.exception("Reminder reporter %r failed", r)
