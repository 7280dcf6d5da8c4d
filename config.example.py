# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real SMTP credentials. Use a local, gitignored .env.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "Display name used in reminder emails (default: TaskFlow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "TASKFLOW_DATA_DIR": "Local data directory, also holds taskflow.log (default: .local/taskflow).",
    "TASKFLOW_DB_PATH": "SQLite database path (default: <data_dir>/taskflow.sqlite3).",
    # Reminder worker
    "TASKFLOW_REMINDER_INTERVAL_SECONDS": "Scan cadence (default: 60). Must be shorter than the lookahead.",
    "TASKFLOW_REMINDER_LOOKAHEAD_SECONDS": "Reminder window length after 'now' (default: 300).",
    "TASKFLOW_REMINDER_BATCH_LIMIT": "Max reminders per scan, 0 = unlimited (default: 0).",
    "TASKFLOW_REMINDER_SCAN_TIMEOUT_SECONDS": "Upper bound for one scan, at most lookahead - interval; 0 = derived (default: 0).",
    # SMTP (SMTP_HOST / SMTP_PORT / SMTP_USER / SMTP_PASS / SMTP_FROM are accepted too)
    "TASKFLOW_SMTP_HOST": "SMTP host (default: smtp.gmail.com).",
    "TASKFLOW_SMTP_PORT": "SMTP port (default: 587).",
    "TASKFLOW_SMTP_USER": "SMTP login. Without user+password, reminders are skipped (kept armed).",
    "TASKFLOW_SMTP_PASS": "SMTP password.",
    "TASKFLOW_SMTP_FROM": "From address (default: SMTP user).",
    "TASKFLOW_SMTP_USE_TLS": "Use STARTTLS (default: true).",
    "TASKFLOW_SMTP_TIMEOUT_SECONDS": "Per-send timeout; a timeout counts as a failed send (default: 30).",
}
