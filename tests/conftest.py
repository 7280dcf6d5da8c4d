# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.cli.bootstrap import create_initial_state
from taskflow.core.state import AppState


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic (no SMTP credentials => mail skipped).
    """
    return SimpleNamespace(
        app_name="TaskFlow",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "taskflow.sqlite3",
        reminder_interval_seconds=60.0,
        reminder_lookahead_seconds=300.0,
        reminder_batch_limit=0,
        reminder_scan_timeout_seconds=0.0,
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user=None,
        smtp_password=None,
        smtp_from=None,
        smtp_use_tls=True,
        smtp_timeout_seconds=5.0,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState with real SQLite stores in tmp_path.

    Store correctness is part of what we test, so no fakes here.
    """
    return create_initial_state(settings=settings)
