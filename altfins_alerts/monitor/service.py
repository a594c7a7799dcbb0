"""
Monitor Service
===============

Runs a monitor's tick on a schedule until stopped.

Two schedule kinds:
1. Fixed rate: a tick every N seconds, measured from the previous trigger
2. Aligned: a tick on every N-second wall-clock boundary
   (N=60 fires at second 0 of every minute)
"""

import logging
import signal
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Optional

import pytz

if TYPE_CHECKING:
    from ..alerts.telegram import TelegramNotifier
    from ..core.monitor import Monitor

# Timezone for schedule logging
EST = pytz.timezone('America/New_York')

# Longest single sleep, so shutdown signals are noticed quickly
MAX_SLEEP_SECONDS = 1.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Schedule:
    """When ticks fire."""
    interval_seconds: float
    aligned: bool = False

    def __post_init__(self):
        if self.interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {self.interval_seconds}")

    def next_run(self, now: datetime, last_run: Optional[datetime] = None) -> datetime:
        """
        Get the next trigger time.

        Args:
            now: Current time (aware)
            last_run: Previous trigger time, used by fixed-rate schedules

        Returns:
            datetime of the next tick (never before now)
        """
        if self.aligned:
            epoch = now.timestamp()
            slots = int(epoch // self.interval_seconds) + 1
            return datetime.fromtimestamp(slots * self.interval_seconds, tz=timezone.utc)

        if last_run is None:
            return now
        next_time = last_run + timedelta(seconds=self.interval_seconds)
        # Missed slots are dropped rather than run back to back
        return next_time if next_time > now else now

    def describe(self) -> str:
        kind = "aligned" if self.aligned else "fixed rate"
        return f"every {self.interval_seconds:g}s ({kind})"


class MonitorService:
    """
    Continuous scheduler for a single monitor.

    Ticks never overlap here: the loop waits for each tick to return before
    computing the next trigger. The monitor's own guard covers ticks invoked
    from elsewhere.
    """

    def __init__(
        self,
        monitor: "Monitor",
        schedule: Schedule,
        status_notifier: "TelegramNotifier" = None,
        clock: Callable[[], datetime] = None,
        sleep: Callable[[float], None] = None,
    ):
        """
        Initialize the monitor service.

        Args:
            monitor: Monitor whose tick() is run
            schedule: When to run ticks
            status_notifier: If set, receives started/stopped/error messages
            clock: Returns the current aware datetime (default: UTC now)
            sleep: Sleep function (default: time.sleep)
        """
        self.monitor = monitor
        self.schedule = schedule
        self.status_notifier = status_notifier
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sleep = sleep or time.sleep
        self.running = False
        self.last_run: Optional[datetime] = None

    def _handle_shutdown(self, signum, frame):
        """Handle shutdown signals gracefully."""
        logger.info("Shutdown signal received, stopping monitor...")
        self.running = False

    def _install_signal_handlers(self) -> dict:
        """Install SIGINT/SIGTERM handlers, returning the ones replaced."""
        previous = {}
        try:
            for signum in (signal.SIGINT, signal.SIGTERM):
                previous[signum] = signal.signal(signum, self._handle_shutdown)
        except ValueError:
            # Not on the main thread
            logger.debug("Signal handlers not installed (not main thread)")
        return previous

    @staticmethod
    def _restore_signal_handlers(previous: dict):
        for signum, handler in previous.items():
            if handler is not None:
                signal.signal(signum, handler)

    def _send_status(self, status: str, details: str = ""):
        if self.status_notifier is not None:
            self.status_notifier.send_service_status(status, details)

    def _wait_until(self, target: datetime):
        """Sleep until target, waking regularly to check for shutdown."""
        while self.running:
            remaining = (target - self._clock()).total_seconds()
            if remaining <= 0:
                return
            self._sleep(min(remaining, MAX_SLEEP_SECONDS))

    def run_once(self) -> bool:
        """Run a single tick immediately."""
        self.last_run = self._clock()
        return self.monitor.tick()

    def run(self, max_ticks: int = None):
        """
        Main entry point - run ticks on the schedule until stopped.

        Args:
            max_ticks: Stop after this many ticks (default: run forever)
        """
        self.running = True
        previous_handlers = self._install_signal_handlers()

        logger.info("=" * 60)
        logger.info(f"{self.monitor.name.upper()} STARTING")
        logger.info("=" * 60)
        logger.info(f"Schedule: {self.schedule.describe()}")

        self._send_status("started", f"{self.monitor.name} | {self.schedule.describe()}")

        ticks = 0
        try:
            while self.running:
                next_time = self.schedule.next_run(self._clock(), self.last_run)
                next_est = next_time.astimezone(EST)
                logger.debug(f"Next tick at {next_est.strftime('%H:%M:%S %Z')}")

                self._wait_until(next_time)
                if not self.running:
                    break

                self.last_run = next_time
                self.monitor.tick()
                ticks += 1

                if max_ticks is not None and ticks >= max_ticks:
                    break

        except KeyboardInterrupt:
            logger.info("Service interrupted by user")
        except Exception as e:
            # Log type only to avoid exposing sensitive data
            error_msg = f"Unexpected error: {type(e).__name__}"
            logger.error(f"Service error: {error_msg}")
            self._send_status("error", error_msg)
            raise
        finally:
            self.running = False
            self._restore_signal_handlers(previous_handlers)
            logger.info(f"{self.monitor.name.upper()} STOPPED")
            self._send_status("stopped")

    def stop(self):
        """Stop the monitor service gracefully."""
        self.running = False
