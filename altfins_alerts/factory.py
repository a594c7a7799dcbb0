"""
Monitor Factory
===============

Builds configured monitors and their schedules from settings.
"""

import logging
from decimal import Decimal
from typing import Tuple

from . import settings
from .alerts.telegram import Notifier
from .api.altfins import AltfinsClient
from .core.monitor import Monitor
from .core.price_monitor import PriceMonitor
from .core.signal_monitor import SignalMonitor
from .monitor.service import Schedule

logger = logging.getLogger(__name__)

MONITOR_TYPES = ("price", "signal")


def build_monitor(
    kind: str,
    client: AltfinsClient,
    notifier: Notifier,
    destination: str = None,
    threshold: Decimal = None,
    interval_seconds: float = None,
) -> Tuple[Monitor, Schedule]:
    """
    Create a monitor and its default schedule.

    Args:
        kind: "price" or "signal"
        client: altFINS API client
        notifier: Alert delivery
        destination: Chat ID (default: TELEGRAM_CHAT_ID)
        threshold: Price alert threshold (price monitor only)
        interval_seconds: Override the configured poll interval

    Returns:
        (monitor, schedule)
    """
    destination = destination if destination is not None else settings.TELEGRAM_CHAT_ID

    if kind == "price":
        monitor = PriceMonitor(
            client=client,
            notifier=notifier,
            destination=destination,
            threshold=threshold if threshold is not None else settings.PRICE_THRESHOLD,
            symbols=settings.PRICE_SYMBOLS,
            time_interval=settings.PRICE_TIME_INTERVAL,
            display_types=settings.PRICE_DISPLAY_TYPES,
            coin_type_filter=settings.PRICE_COIN_TYPE_FILTER,
        )
        schedule = Schedule(
            interval_seconds=interval_seconds or settings.PRICE_POLL_INTERVAL_SECONDS,
            aligned=True,
        )
        logger.info(f"Price monitor: symbols={settings.PRICE_SYMBOLS} threshold={monitor.threshold}")
        return monitor, schedule

    if kind == "signal":
        monitor = SignalMonitor(
            client=client,
            notifier=notifier,
            destination=destination,
            signals=settings.SIGNALS,
            symbols=settings.SIGNAL_SYMBOLS,
            page_size=settings.SIGNAL_PAGE_SIZE,
        )
        schedule = Schedule(
            interval_seconds=interval_seconds or settings.SIGNAL_POLL_INTERVAL_SECONDS,
            aligned=False,
        )
        logger.info(
            f"Signal monitor: signals={settings.SIGNALS or 'all'} symbols={settings.SIGNAL_SYMBOLS} "
            f"watermark={monitor.watermark.isoformat()}"
        )
        return monitor, schedule

    raise ValueError(f"Unknown monitor type {kind!r} (expected one of {MONITOR_TYPES})")
