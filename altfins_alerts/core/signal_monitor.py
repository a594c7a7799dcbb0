"""
Signal Monitor

Polls the signals feed and alerts once per signal newer than the watermark.

The feed is not guaranteed to be ordered, so new signals are sorted by
timestamp before alerting. The watermark advances after each alert rather
than once per batch: if an alert fails partway through, signals already
alerted stay recorded and only the failing one can repeat on the next tick.
"""

import logging
from typing import TYPE_CHECKING, Iterable, List, Set

from ..alerts.messages import format_signal_alert
from ..exceptions import FetchError
from ..models import SignalId, SignalRecord, SignalState
from .monitor import Monitor

if TYPE_CHECKING:
    from ..alerts.telegram import Notifier
    from ..api.altfins import AltfinsClient

logger = logging.getLogger(__name__)


def select_new_signals(records: Iterable[SignalRecord], state: SignalState) -> List[SignalRecord]:
    """
    Filter a batch down to unseen signals, oldest first.

    A signal is new if its timestamp is after the watermark, or equal to it
    with an id not yet processed. Duplicates within the batch are dropped.
    """
    seen: Set[SignalId] = set()
    fresh = []
    for record in records or []:
        if record.signal_id in seen or not state.is_new(record):
            continue
        seen.add(record.signal_id)
        fresh.append(record)

    return sorted(fresh, key=lambda r: r.timestamp)


def advance(state: SignalState, record: SignalRecord) -> SignalState:
    """
    Record a processed signal. The watermark never moves backward.
    """
    if record.timestamp > state.watermark:
        return SignalState(watermark=record.timestamp, seen_ids=frozenset([record.signal_id]))
    if record.timestamp == state.watermark:
        return SignalState(watermark=state.watermark, seen_ids=state.seen_ids | {record.signal_id})
    return state


class SignalMonitor(Monitor):
    """Watermark-based monitor for the signals feed."""

    name = "signal-monitor"

    def __init__(
        self,
        client: "AltfinsClient",
        notifier: "Notifier",
        destination: str,
        signals: List[str] = None,
        symbols: List[str] = None,
        page_size: int = None,
        state: SignalState = None,
    ):
        super().__init__(notifier, destination)
        self.client = client
        self.signals = signals
        self.symbols = symbols
        # None or 0 leaves the page size to the API
        self.page_size = page_size or None
        # Signals from before startup are never reported
        self.state = state or SignalState.starting_now()

    @property
    def watermark(self):
        return self.state.watermark

    def _run_tick(self):
        logger.info("Checking signals...")

        try:
            batch = self.client.fetch_signals(
                signals=self.signals,
                symbols=self.symbols,
                size=self.page_size,
            )
        except FetchError as e:
            logger.warning(f"Failed to retrieve signals: {e}")
            return

        if not batch:
            logger.debug("No signals found.")
            return

        new_signals = select_new_signals(batch, self.state)
        if not new_signals:
            logger.info(f"No new signals since {self.state.watermark.isoformat()}")
            return

        logger.info(f"Found {len(new_signals)} new signals.")

        for record in new_signals:
            self._notify(format_signal_alert(record))
            self.state = advance(self.state, record)
