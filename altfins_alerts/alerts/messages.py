"""
Alert Messages
==============

Plain-text formatting for price and signal alerts.
"""

from ..models import PriceAlert, SignalRecord

INCREASE_ICON = "📈 ⬆️"
DECREASE_ICON = "📉 ⬇️"


def format_price_alert(alert: PriceAlert) -> str:
    """
    Format a price alert as a single line.

    Example:
        📈 ⬆️ Bitcoin price increased by 150.25$! New price: 97150.25$
    """
    icon = INCREASE_ICON if alert.is_increase else DECREASE_ICON
    return (
        f"{icon} {alert.name} price {alert.direction} by {alert.delta:.2f}$! "
        f"New price: {alert.new_price:.2f}$"
    )


def format_signal_alert(record: SignalRecord) -> str:
    """Format a signal as six labeled lines."""
    lines = [
        f"Direction: {record.direction}",
        f"Coin: {record.symbol} ({record.symbol_name})",
        f"Signal: {record.signal_name}",
        f"Price: ${record.last_price}",
        f"Change: {record.price_change}",
        f"Time: {record.raw_timestamp or record.timestamp.isoformat()}",
    ]
    return "\n".join(lines)
