"""Reminder email rendering (Jinja2) and SMTP delivery (aiosmtplib)."""
