"""
Alerts Package
==============

Notification delivery and message formatting.

Components:
- telegram.py: Notifier interface, TelegramNotifier, AlertConfig
- messages.py: price and signal alert text
"""

from .messages import format_price_alert, format_signal_alert
from .telegram import AlertConfig, Notifier, TelegramNotifier, send_test_alert

__all__ = [
    "AlertConfig",
    "Notifier",
    "TelegramNotifier",
    "send_test_alert",
    "format_price_alert",
    "format_signal_alert",
]
