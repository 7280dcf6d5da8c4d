# src/taskflow/reminders/reminder_scheduler.py

from __future__ import annotations

"""
Reminder scheduling harness.

Owns a single asyncio.Task that ticks on a fixed wall-clock cadence
(start + k * interval) and runs one scan per tick.

Non-overlap:
- scans are serialized through one asyncio.Lock (run_once from elsewhere included),
- a tick that finds a scan in progress is skipped, never queued,
- ticks missed while a scan overran are skipped as well,
- each scan is bounded by scan_timeout_seconds.

Coverage: the next scan starts at most one interval after the previous one
ended, so scan starts are at most scan_timeout + interval apart. Keeping that
within the lookahead makes consecutive scan windows touch, hence
scan_timeout_seconds <= lookahead - interval.

Nothing escaping a scan stops the loop; only stop() / cancellation does.
"""

import asyncio
import contextlib
import logging
import math
import time

from ..core.ports import Clock
from .reminder_scanner import ReminderScanner, ScanReport

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60.0


class ReminderScheduler:
    def __init__(
            self,
            scanner: ReminderScanner,
            *,
            interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
            scan_timeout_seconds: float | None = None,
            clock: Clock = time.time,
    ) -> None:
        interval_seconds = float(interval_seconds)
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        # Longest scan that still lets the next window start before this one ends.
        max_scan_seconds = scanner.lookahead_seconds - interval_seconds
        if max_scan_seconds <= 0:
            raise ValueError(
                f"lookahead ({scanner.lookahead_seconds}s) must exceed interval ({interval_seconds}s)"
            )
        if scan_timeout_seconds is not None and not 0 < scan_timeout_seconds <= max_scan_seconds:
            raise ValueError(
                f"scan_timeout_seconds ({scan_timeout_seconds}s) must be in (0, {max_scan_seconds}s] "
                f"for lookahead {scanner.lookahead_seconds}s and interval {interval_seconds}s"
            )

        self.scanner = scanner
        self.interval_seconds = interval_seconds
        self.scan_timeout_seconds = (
            float(scan_timeout_seconds)
            if scan_timeout_seconds is not None
            else self._default_scan_timeout(scanner, interval_seconds, max_scan_seconds)
        )
        self.clock = clock

        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self.last_report: ScanReport | None = None

    @staticmethod
    def _default_scan_timeout(scanner: ReminderScanner, interval_seconds: float, max_scan_seconds: float) -> float:
        if scanner.batch_limit:
            wanted = scanner.send_timeout_seconds * scanner.batch_limit + interval_seconds
        else:
            wanted = interval_seconds * 10
        return min(wanted, max_scan_seconds)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running loop. Calling start twice is a no-op."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="reminder-scheduler")
        logger.info(
            "Reminder scheduler started interval=%.0fs lookahead=%.0fs scan_timeout=%.0fs",
            self.interval_seconds,
            self.scanner.lookahead_seconds,
            self.scan_timeout_seconds,
        )

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Reminder scheduler stopped")

    async def run_once(self) -> ScanReport | None:
        """
        Run one bounded scan unless one is already in progress.

        Returns the scan report, or None if the tick was skipped, timed out or crashed.
        """
        if self._lock.locked():
            logger.warning("Reminder scan still running; skipping tick")
            return None

        async with self._lock:
            try:
                report = await asyncio.wait_for(self.scanner.scan_once(), timeout=self.scan_timeout_seconds)
            except asyncio.TimeoutError:
                logger.error("Reminder scan exceeded %.0fs; abandoned", self.scan_timeout_seconds)
                return None
            except Exception:
                logger.exception("Reminder scan crashed")
                return None

        self.last_report = report
        return report

    async def _run(self) -> None:
        started = float(self.clock())
        tick = 0

        while True:
            await self.run_once()

            elapsed = float(self.clock()) - started
            next_tick = math.floor(elapsed / self.interval_seconds) + 1
            if next_tick > tick + 1:
                logger.warning("Reminder scan overran; skipped %d tick(s)", next_tick - tick - 1)
            tick = next_tick

            delay = started + tick * self.interval_seconds - float(self.clock())
            await asyncio.sleep(max(0.0, delay))
