# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (mail degrades to "skipped" without credentials).
- Plain SMTP_* names (no prefix) are still honoured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "TASKFLOW"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path

    # ---- Reminder scanner ----
    reminder_interval_seconds: float
    reminder_lookahead_seconds: float
    reminder_batch_limit: int  # 0 => unlimited
    reminder_scan_timeout_seconds: float  # 0 => derived from send timeout / interval

    # ---- SMTP ----
    smtp_host: str
    smtp_port: int
    smtp_user: Optional[str]
    smtp_password: Optional[str]
    smtp_from: Optional[str]
    smtp_use_tls: bool
    smtp_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "TaskFlow")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskflow.sqlite3")

        reminder_interval_seconds = _env_float(_k("REMINDER_INTERVAL_SECONDS"), 60.0)
        reminder_lookahead_seconds = _env_float(_k("REMINDER_LOOKAHEAD_SECONDS"), 300.0)
        reminder_batch_limit = max(0, _env_int(_k("REMINDER_BATCH_LIMIT"), 0))
        reminder_scan_timeout_seconds = max(0.0, _env_float(_k("REMINDER_SCAN_TIMEOUT_SECONDS"), 0.0))

        smtp_host = (_first_env(_k("SMTP_HOST"), "SMTP_HOST", default="smtp.gmail.com") or "").strip()
        smtp_port = _env_int(_k("SMTP_PORT"), _env_int("SMTP_PORT", 587))
        smtp_user = _first_env(_k("SMTP_USER"), "SMTP_USER", default=None)
        smtp_password = _first_env(_k("SMTP_PASS"), "SMTP_PASS", default=None)
        smtp_from = _first_env(_k("SMTP_FROM"), "SMTP_FROM", default=smtp_user)
        smtp_use_tls = _env_bool(_k("SMTP_USE_TLS"), True)
        smtp_timeout_seconds = _env_float(_k("SMTP_TIMEOUT_SECONDS"), 30.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            reminder_interval_seconds=reminder_interval_seconds,
            reminder_lookahead_seconds=reminder_lookahead_seconds,
            reminder_batch_limit=reminder_batch_limit,
            reminder_scan_timeout_seconds=reminder_scan_timeout_seconds,
            smtp_host=smtp_host,
            smtp_port=smtp_port,
            smtp_user=smtp_user,
            smtp_password=smtp_password,
            smtp_from=smtp_from,
            smtp_use_tls=smtp_use_tls,
            smtp_timeout_seconds=smtp_timeout_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
