"""
Reminder delivery.

Components:
- reminder_scanner.py: select due reminders, deliver, mark sent
- reminder_scheduler.py: fixed-cadence, non-overlapping harness around the scanner
- reporting.py: per-reminder outcome events and reporters
"""
