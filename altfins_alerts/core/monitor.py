"""
Monitor Base

Shared tick handling for the price and signal monitors:
- a non-reentrant guard so overlapping ticks are skipped
- a top-level catch so one failing tick never stops the service
- delivery through an injected Notifier
"""

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..alerts.telegram import Notifier

logger = logging.getLogger(__name__)


class Monitor:
    """
    Base class for a polling monitor.

    Subclasses implement _run_tick(). State is owned by the monitor instance
    and only mutated inside a tick.
    """

    name = "monitor"

    def __init__(self, notifier: "Notifier", destination: str):
        """
        Args:
            notifier: Alert delivery (send(destination, text) -> bool)
            destination: Chat/channel identifier alerts are sent to
        """
        self.notifier = notifier
        self.destination = destination
        self._tick_lock = threading.Lock()
        self.ticks_run = 0
        self.ticks_skipped = 0
        self.ticks_failed = 0

    def tick(self) -> bool:
        """
        Run one scheduled check.

        Returns:
            True if the tick ran to completion, False if it was skipped
            (previous tick still running) or aborted by an error
        """
        if not self._tick_lock.acquire(blocking=False):
            self.ticks_skipped += 1
            logger.warning(f"{self.name}: previous tick still running, skipping")
            return False

        try:
            self._run_tick()
            self.ticks_run += 1
            return True
        except Exception as e:
            self.ticks_failed += 1
            logger.exception(f"{self.name}: error during tick: {e}")
            return False
        finally:
            self._tick_lock.release()

    def _run_tick(self):
        raise NotImplementedError

    def _notify(self, text: str) -> bool:
        """Send one alert. Delivery failure is logged, never raised."""
        sent = self.notifier.send(self.destination, text)
        if not sent:
            logger.error(f"{self.name}: failed to deliver alert")
        return sent
