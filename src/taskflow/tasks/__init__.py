"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Board, TaskStatus, TaskPriority, ReminderState)
- task_store.py: SQLite-backed storage for boards and tasks + reminder queries
- task_api.py: small high-level helpers used by the rest of the app
"""
