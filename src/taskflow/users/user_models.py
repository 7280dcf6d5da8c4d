# src/taskflow/users/user_models.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class User:
    id: int
    email: str | None
    name: str
    created_at: float

    @property
    def can_receive_mail(self) -> bool:
        return bool(self.email and self.email.strip())
