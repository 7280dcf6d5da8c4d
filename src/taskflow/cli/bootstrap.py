# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete stores and the mail sender into AppState,
- builds the reminder scanner + scheduler from settings.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import ReminderReporter
from ..core.state import AppState
from ..mail.smtp_sender import SmtpMailSender
from ..reminders.reminder_scanner import ReminderScanner
from ..reminders.reminder_scheduler import ReminderScheduler
from ..reminders.reporting import LoggingReminderReporter
from ..tasks.task_store import TaskStore
from ..users.user_store import UserStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(
        settings=settings,
        task_store=TaskStore(settings.db_path),
        user_store=UserStore(settings.db_path),
        mail_sender=SmtpMailSender.from_settings(settings),
    )


def create_reminder_scanner(state: AppState, *, reporter: ReminderReporter | None = None) -> ReminderScanner:
    settings = state.settings
    return ReminderScanner(
        state.task_store,
        state.user_store,
        state.mail_sender,
        reporter or LoggingReminderReporter(),
        lookahead_seconds=settings.reminder_lookahead_seconds,
        send_timeout_seconds=settings.smtp_timeout_seconds,
        batch_limit=settings.reminder_batch_limit or None,
    )


def create_reminder_scheduler(
    state: AppState,
    *,
    reporter: ReminderReporter | None = None,
) -> ReminderScheduler:
    settings = state.settings
    return ReminderScheduler(
        create_reminder_scanner(state, reporter=reporter),
        interval_seconds=settings.reminder_interval_seconds,
        scan_timeout_seconds=settings.reminder_scan_timeout_seconds or None,
    )
