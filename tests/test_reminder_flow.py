# tests/test_reminder_flow.py

from __future__ import annotations

import time

import pytest

from taskflow.cli.bootstrap import create_reminder_scanner, create_reminder_scheduler
from taskflow.reminders.reporting import RecordingReminderReporter, ReminderOutcome
from taskflow.tasks.task_api import complete_task, create_task, reschedule_reminder
from taskflow.tasks.task_models import ReminderState

from .fakes import FakeMailSender


def _with_fake_mail(state) -> FakeMailSender:
    mail = FakeMailSender()
    state.mail_sender = mail
    return mail


def test_create_task_requires_owned_board(state) -> None:
    alice = state.user_store.add_user(email="alice@x.com")
    bob = state.user_store.add_user(email="bob@x.com")
    board = state.task_store.add_board(owner_id=alice, title="Inbox")

    with pytest.raises(LookupError):
        create_task(state, owner_id=bob, board_id=board, title="intrude")

    task_id = create_task(state, owner_id=alice, board_id=board, title="mine")
    task = state.task_store.get_task(task_id)
    assert task is not None and task.board_id == board


@pytest.mark.asyncio
async def test_end_to_end_scan_against_sqlite(state) -> None:
    mail = _with_fake_mail(state)
    reporter = RecordingReminderReporter()
    scanner = create_reminder_scanner(state, reporter=reporter)

    alice = state.user_store.add_user(email="alice@x.com")
    ghost = 424242
    board = state.task_store.add_board(owner_id=alice, title="Inbox")
    now = time.time()
    a = create_task(state, owner_id=alice, board_id=board, title="A", reminder_at=now + 120)
    b = create_task(state, owner_id=alice, board_id=board, title="B", reminder_at=now + 600)
    orphan = state.task_store.add_task(owner_id=ghost, board_id=board, title="orphan", reminder_at=now + 60)

    report = await scanner.scan_once()

    assert report.selected == 2
    assert [s.task_id for s in mail.sent] == [a]
    assert sorted(reporter.outcomes()) == sorted([ReminderOutcome.SENT, ReminderOutcome.SKIPPED_NO_OWNER])

    task_a = state.task_store.get_task(a)
    task_b = state.task_store.get_task(b)
    task_orphan = state.task_store.get_task(orphan)
    assert task_a is not None and task_a.reminder_state == ReminderState.FIRED
    assert task_b is not None and task_b.reminder_state == ReminderState.ARMED
    assert task_orphan is not None and task_orphan.reminder_state == ReminderState.ARMED

    second = await scanner.scan_once()
    assert second.sent == 0
    assert len(mail.sent) == 1


@pytest.mark.asyncio
async def test_reschedule_rearms_and_complete_disarms(state) -> None:
    mail = _with_fake_mail(state)
    scanner = create_reminder_scanner(state, reporter=RecordingReminderReporter())

    alice = state.user_store.add_user(email="alice@x.com")
    board = state.task_store.add_board(owner_id=alice, title="Inbox")
    now = time.time()
    task_id = create_task(state, owner_id=alice, board_id=board, title="A", reminder_at=now + 60)

    await scanner.scan_once()
    task = reschedule_reminder(state, task_id, now + 90)
    assert task is not None and task.reminder_state == ReminderState.ARMED

    await scanner.scan_once()
    assert len(mail.sent) == 2

    reschedule_reminder(state, task_id, now + 120)
    complete_task(state, task_id)
    report = await scanner.scan_once()

    assert report.selected == 0
    assert len(mail.sent) == 2


@pytest.mark.asyncio
async def test_default_state_has_unconfigured_mail(state) -> None:
    reporter = RecordingReminderReporter()
    scanner = create_reminder_scanner(state, reporter=reporter)

    alice = state.user_store.add_user(email="alice@x.com")
    board = state.task_store.add_board(owner_id=alice, title="Inbox")
    task_id = create_task(state, owner_id=alice, board_id=board, title="A", reminder_at=time.time() + 60)

    await scanner.scan_once()

    assert reporter.outcomes() == [ReminderOutcome.SKIPPED_MAIL_DISABLED]
    task = state.task_store.get_task(task_id)
    assert task is not None and task.reminder_sent is False


def test_scheduler_is_built_from_settings(state) -> None:
    scheduler = create_reminder_scheduler(state)

    assert scheduler.interval_seconds == 60.0
    assert scheduler.scanner.lookahead_seconds == 300.0
    assert scheduler.scanner.batch_limit is None
    assert scheduler.scan_timeout_seconds == 240.0


@pytest.mark.asyncio
async def test_cli_single_scan_prints_summary(state, capsys: pytest.CaptureFixture[str]) -> None:
    from taskflow.cli.main import _scan_once

    _with_fake_mail(state)
    alice = state.user_store.add_user(email="alice@x.com")
    board = state.task_store.add_board(owner_id=alice, title="Inbox")
    create_task(state, owner_id=alice, board_id=board, title="A", reminder_at=time.time() + 60)

    exit_code = await _scan_once(state)

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "selected=1 sent=1 failed=0" in out
    assert "outcome=sent" in out


@pytest.mark.asyncio
async def test_cli_single_scan_is_bounded_by_scan_timeout(state, capsys: pytest.CaptureFixture[str]) -> None:
    from taskflow.cli.main import _scan_once

    mail = _with_fake_mail(state)
    mail.hang_emails.add("alice@x.com")
    state.settings.reminder_scan_timeout_seconds = 0.05
    alice = state.user_store.add_user(email="alice@x.com")
    board = state.task_store.add_board(owner_id=alice, title="Inbox")
    task_id = create_task(state, owner_id=alice, board_id=board, title="A", reminder_at=time.time() + 60)

    exit_code = await _scan_once(state)

    assert exit_code == 1
    assert "scan did not complete" in capsys.readouterr().out
    task = state.task_store.get_task(task_id)
    assert task is not None and task.reminder_state == ReminderState.ARMED
