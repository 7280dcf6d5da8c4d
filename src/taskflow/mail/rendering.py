# src/taskflow/mail/rendering.py

"""
Reminder email rendering (Jinja2).

Templates live in this module so the worker has no package-data to ship.
HTML is autoescaped: task titles and notes are user input.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from jinja2 import DictLoader, Environment, select_autoescape

from ..tasks.task_models import Task

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
  <style>
    body { font-family: 'Public Sans', Arial, sans-serif; background-color: #f5f7fa; margin: 0; padding: 20px; }
    .container { max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 32px; }
    .header { border-bottom: 2px solid #7694b8; padding-bottom: 16px; margin-bottom: 24px; }
    .title { font-size: 24px; font-weight: 600; color: #293648; margin: 0; }
    .task-title { font-size: 20px; font-weight: 600; color: #2e4057; margin: 16px 0 8px 0; }
    .task-description { color: #53769d; margin: 8px 0; line-height: 1.6; }
    .priority { display: inline-block; padding: 4px 12px; border-radius: 4px; font-size: 14px; font-weight: 500; }
    .priority-high { background-color: #fce4e4; color: #c81e1e; }
    .priority-medium { background-color: #e6f2ff; color: #2563eb; }
    .priority-low { background-color: #f0f1f3; color: #5a6678; }
    .due-date { color: #7694b8; font-size: 14px; margin: 12px 0; }
    .footer { margin-top: 24px; padding-top: 16px; border-top: 1px solid #d0d9e7; color: #a6b9d2; font-size: 14px; text-align: center; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1 class="title">{{ app_name }} Reminder</h1>
    </div>
    <p style="color: #53769d; margin-bottom: 16px;">You have a task reminder:</p>
    <h2 class="task-title">{{ task.title }}</h2>
{% if task.description %}
    <p class="task-description">{{ task.description }}</p>
{% endif %}
    <div>
      <span class="priority priority-{{ priority }}">{{ priority | upper }} Priority</span>
    </div>
{% if due %}
    <p class="due-date">Due: {{ due }}</p>
{% endif %}
{% if task.notes %}
    <p class="task-description"><strong>Notes:</strong> {{ task.notes }}</p>
{% endif %}
    <div class="footer">
      <p>This is an automated reminder from {{ app_name }}.</p>
    </div>
  </div>
</body>
</html>
"""

_TEXT_TEMPLATE = """\
{{ app_name }} Reminder

You have a task reminder:

{{ task.title }}
{% if task.description %}
{{ task.description }}
{% endif %}

Priority: {{ priority | upper }}
{% if due %}
Due: {{ due }}
{% endif %}
{% if task.notes %}
Notes: {{ task.notes }}
{% endif %}

This is an automated reminder from {{ app_name }}.
"""


@dataclass(slots=True, frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


def format_timestamp(ts: float | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M %Z")


class ReminderEmailRenderer:
    def __init__(self, *, app_name: str = "TaskFlow") -> None:
        self.app_name = app_name
        self.env = Environment(
            loader=DictLoader({"reminder.html": _HTML_TEMPLATE, "reminder.txt": _TEXT_TEMPLATE}),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, task: Task) -> RenderedEmail:
        context = {
            "app_name": self.app_name,
            "task": task,
            "priority": task.priority.value,
            "due": format_timestamp(task.due_at),
        }
        return RenderedEmail(
            subject=f"Task Reminder: {task.title}",
            html=self.env.get_template("reminder.html").render(**context),
            text=self.env.get_template("reminder.txt").render(**context),
        )
