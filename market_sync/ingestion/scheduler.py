"""Cron-driven scheduler for the ingestion cycle.

The scheduler sleeps until the next slot of a cron expression, runs one
cycle, and repeats. A failed or crashing cycle is logged and never stops
the loop.

Typical usage::

    from market_sync.ingestion.scheduler import IngestionScheduler
    scheduler = IngestionScheduler("*/10 * * * *", lambda: run_configured_cycle(settings))
    scheduler.run_forever()  # blocks until Ctrl-C / SIGTERM

Inside the API server the same scheduler runs in a daemon thread via
``start()`` and ``stop()``.
"""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable
from datetime import datetime

from croniter import croniter

from market_sync.errors import ConfigurationError
from market_sync.ingestion.job import IngestionResult
from market_sync.utils.logger import get_logger

logger = get_logger(__name__)


class IngestionScheduler:
    """Runs an ingestion cycle on every slot of a cron expression."""

    def __init__(
        self,
        schedule: str,
        cycle: Callable[[], IngestionResult],
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            schedule: Five-field cron expression (e.g., "*/10 * * * *")
            cycle: Zero-argument callable running one cycle
            clock: Returns the current local time (defaults to datetime.now)

        Raises:
            ConfigurationError: If the cron expression is invalid
        """
        if not croniter.is_valid(schedule):
            raise ConfigurationError(f"Invalid cron expression for job schedule: {schedule!r}")
        self.schedule = schedule
        self.cycle = cycle
        self.clock = clock
        self.cycles_run = 0
        self.last_slot: datetime | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def next_run(self, after: datetime | None = None) -> datetime:
        """Return the first cron slot strictly after *after* (default: now)."""
        base = after or self.clock()
        return croniter(self.schedule, base).get_next(datetime)

    def following_slot(self, now: datetime) -> datetime:
        """Return the slot to wait for next; never the slot that already ran."""
        base = now if self.last_slot is None else max(now, self.last_slot)
        return self.next_run(base)

    def run_cycle(self) -> IngestionResult | None:
        """Run one cycle. Returns ``None`` if the cycle raised."""
        self.cycles_run += 1
        logger.info("=== Ingestion cycle %d starting at %s ===", self.cycles_run, self.clock().isoformat(timespec="seconds"))
        try:
            result = self.cycle()
        except Exception:
            logger.exception("Ingestion cycle %d crashed; continuing", self.cycles_run)
            return None

        if result.ok:
            logger.info(
                "Ingestion cycle %d %s: fetched=%d candidates=%d inserted=%d",
                self.cycles_run,
                result.status,
                result.fetched,
                result.candidates,
                result.inserted,
            )
        else:
            logger.warning("Ingestion cycle %d failed: %s", self.cycles_run, result.error)
        return result

    def _loop(self) -> None:
        logger.info("Scheduler started with schedule %r", self.schedule)
        while not self._stop_event.is_set():
            now = self.clock()
            upcoming = self.following_slot(now)
            wait_seconds = max(0.0, (upcoming - now).total_seconds())
            logger.debug("Next ingestion cycle at %s (in %.0fs)", upcoming.isoformat(timespec="seconds"), wait_seconds)
            if self._stop_event.wait(wait_seconds):
                break
            # Event.wait is monotonic; the wall clock may still read before the slot
            self.last_slot = upcoming
            self.run_cycle()
        logger.info("Scheduler stopped after %d cycles", self.cycles_run)

    def run_forever(self) -> None:
        """Block, running cycles until stopped by SIGINT/SIGTERM or ``stop()``."""
        self._stop_event.clear()
        if threading.current_thread() is threading.main_thread():
            signal.signal(signal.SIGINT, self._handle_signal)
            signal.signal(signal.SIGTERM, self._handle_signal)
        self._loop()

    def _handle_signal(self, signum: int, frame: object) -> None:
        logger.info("Received signal %d, stopping scheduler", signum)
        self._stop_event.set()

    def start(self) -> None:
        """Run the loop in a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="ingestion-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Prevent further cycles and wait for the thread to finish.

        A cycle already in flight is not interrupted.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
