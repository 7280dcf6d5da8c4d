# src/taskflow/cli/main.py

"""
CLI entrypoint for the reminder worker.

Initializes logging, builds AppState, then either:
- runs a single reminder scan and prints a summary (--once), or
- runs the reminder scheduler until SIGINT/SIGTERM.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal

from ..cli.bootstrap import create_initial_state, create_reminder_scheduler
from ..config import get_settings
from ..logging_setup import setup_logging
from ..reminders.reporting import FanoutReminderReporter, LoggingReminderReporter, RecordingReminderReporter

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="taskflow-reminders", description="TaskFlow reminder email worker.")
    parser.add_argument("--once", action="store_true", help="run a single scan and exit")
    return parser.parse_args(argv)


async def _scan_once(state) -> int:
    recorder = RecordingReminderReporter()
    scheduler = create_reminder_scheduler(
        state,
        reporter=FanoutReminderReporter([LoggingReminderReporter(), recorder]),
    )
    report = await scheduler.run_once()
    if report is None:
        print(f"scan did not complete within {scheduler.scan_timeout_seconds:.0f}s")
        return 1

    print(f"selected={report.selected} sent={report.sent} failed={report.failed}")
    for event in recorder.events:
        print(f"  task={event.task_id} outcome={event.outcome.value}" + (f" error={event.error}" if event.error else ""))
    return 1 if report.failed else 0


async def _serve(state) -> None:
    scheduler = create_reminder_scheduler(state)
    stop = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Some platforms (Windows) have no loop signal handlers; Ctrl+C still raises.
            pass

    scheduler.start()
    logger.info("Reminder worker running. Press Ctrl+C to stop.")
    try:
        await stop.wait()
        logger.info("Shutdown requested")
    finally:
        await scheduler.stop()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s reminder worker...", settings.app_name)
    state = create_initial_state(settings=settings)

    try:
        if args.once:
            return asyncio.run(_scan_once(state))
        asyncio.run(_serve(state))
        return 0
    except KeyboardInterrupt:
        return 0
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    raise SystemExit(main())
