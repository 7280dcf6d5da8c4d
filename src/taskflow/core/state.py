# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..mail.smtp_sender import SmtpMailSender
from ..tasks.task_store import TaskStore
from ..users.user_store import UserStore


@dataclass
class AppState:
    # Settings object (or a test stand-in with the same attributes).
    settings: Any

    task_store: TaskStore
    user_store: UserStore
    mail_sender: SmtpMailSender
