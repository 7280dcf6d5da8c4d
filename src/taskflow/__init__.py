"""TaskFlow: boards, tasks and email reminders."""

__version__ = "0.1.0"
