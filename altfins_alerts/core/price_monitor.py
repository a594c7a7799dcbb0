"""
Price Monitor

Tracks the latest price of one asset and alerts when it moves more than a
threshold away from the last alerted price.

State machine over PriceState:
- Uninitialized (last_price is None): first sample becomes the baseline, no alert
- Tracking(last_price): alert and move the baseline only when
  |sample - last_price| > threshold
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from ..alerts.messages import format_price_alert
from ..exceptions import FetchError
from ..models import PriceAlert, PriceSample, PriceState
from .monitor import Monitor

if TYPE_CHECKING:
    from ..alerts.telegram import Notifier
    from ..api.altfins import AltfinsClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceDecision:
    """Result of comparing a sample against the current state."""
    state: PriceState
    alert: Optional[PriceAlert] = None


def evaluate_price(state: PriceState, sample: PriceSample, threshold: Decimal) -> PriceDecision:
    """
    Compare a fetched sample against the last alerted price.

    Small moves do not update the baseline, so each tick compares against
    the last alerted price rather than the previous sample.

    Args:
        state: Current price state
        sample: Freshly fetched price
        threshold: Minimum absolute move (exclusive) that triggers an alert

    Returns:
        PriceDecision with the new state and an optional alert
    """
    if not state.initialized:
        return PriceDecision(state=PriceState(last_price=sample.last_price))

    delta = sample.last_price - state.last_price
    if abs(delta) <= threshold:
        return PriceDecision(state=state)

    alert = PriceAlert(
        symbol=sample.symbol,
        name=sample.name,
        direction="increased" if delta > 0 else "decreased",
        delta=abs(delta),
        new_price=sample.last_price,
    )
    return PriceDecision(state=PriceState(last_price=sample.last_price), alert=alert)


class PriceMonitor(Monitor):
    """Price-delta monitor for a single asset."""

    name = "price-monitor"

    def __init__(
        self,
        client: "AltfinsClient",
        notifier: "Notifier",
        destination: str,
        threshold: Decimal,
        symbols: List[str] = None,
        time_interval: str = None,
        display_types: List[str] = None,
        coin_type_filter: str = None,
        state: PriceState = None,
    ):
        super().__init__(notifier, destination)
        self.client = client
        self.threshold = Decimal(threshold)
        self.symbols = symbols
        self.time_interval = time_interval
        self.display_types = display_types
        self.coin_type_filter = coin_type_filter
        self.state = state or PriceState()

    def _fetch(self) -> Optional[PriceSample]:
        return self.client.fetch_price(
            symbols=self.symbols,
            time_interval=self.time_interval,
            display_types=self.display_types,
            coin_type_filter=self.coin_type_filter,
        )

    def _run_tick(self):
        logger.info("Checking price...")

        try:
            sample = self._fetch()
        except FetchError as e:
            logger.warning(f"Failed to retrieve price data: {e}")
            return

        if sample is None:
            logger.warning("Failed to retrieve price data: empty response")
            return

        logger.info(f"Current {sample.symbol} price: {sample.last_price}")

        decision = evaluate_price(self.state, sample, self.threshold)
        if not self.state.initialized:
            logger.info(f"Initial price set to: {decision.state.last_price}")

        if decision.alert is not None:
            self._notify(format_price_alert(decision.alert))

        self.state = decision.state
