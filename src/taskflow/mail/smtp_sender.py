# src/taskflow/mail/smtp_sender.py

from __future__ import annotations

"""
SMTP reminder sender (aiosmtplib).

Without credentials the sender is "unconfigured": it never opens a connection
and reports DeliveryStatus.SKIPPED so the caller can keep the reminder armed.
Transport errors are raised as-is.
"""

import logging
from email.message import EmailMessage
from enum import StrEnum

import aiosmtplib

from ..tasks.task_models import Task
from .rendering import ReminderEmailRenderer

logger = logging.getLogger(__name__)


class DeliveryStatus(StrEnum):
    SENT = "sent"
    SKIPPED = "skipped"


class SmtpMailSender:
    def __init__(
            self,
            *,
            host: str,
            port: int = 587,
            username: str | None = None,
            password: str | None = None,
            from_address: str | None = None,
            use_tls: bool = True,
            timeout_seconds: float = 30.0,
            renderer: ReminderEmailRenderer | None = None,
    ) -> None:
        self._host = host
        self._port = int(port)
        self._username = username
        self._password = password
        self._from = from_address or username
        self._use_tls = use_tls
        self._timeout = max(1.0, float(timeout_seconds))
        self._renderer = renderer or ReminderEmailRenderer()

        if self.is_configured:
            logger.info("SMTP sender ready host=%s port=%s tls=%s", self._host, self._port, self._use_tls)
        else:
            logger.warning("Email credentials not configured; reminder emails will be skipped.")

    @classmethod
    def from_settings(cls, settings) -> SmtpMailSender:
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            from_address=settings.smtp_from,
            use_tls=settings.smtp_use_tls,
            timeout_seconds=settings.smtp_timeout_seconds,
            renderer=ReminderEmailRenderer(app_name=settings.app_name),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._host and self._username and self._password)

    def build_message(self, email: str, task: Task) -> EmailMessage:
        rendered = self._renderer.render(task)

        msg = EmailMessage()
        msg["From"] = self._from or ""
        msg["To"] = email
        msg["Subject"] = rendered.subject
        msg.set_content(rendered.text)
        msg.add_alternative(rendered.html, subtype="html")
        return msg

    async def send_reminder(self, email: str, task: Task) -> DeliveryStatus:
        if not self.is_configured:
            logger.debug("Mail not configured; skipping reminder task_id=%s", task.id)
            return DeliveryStatus.SKIPPED

        await aiosmtplib.send(
            self.build_message(email, task),
            hostname=self._host,
            port=self._port,
            username=self._username,
            password=self._password,
            start_tls=self._use_tls,
            timeout=self._timeout,
        )
        logger.info("Email reminder sent to %s task_id=%s", email, task.id)
        return DeliveryStatus.SENT
