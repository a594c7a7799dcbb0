"""
altFINS Telegram Alerts
=======================

Polls the altFINS API for an asset price or the signals feed and forwards
alerts to a Telegram chat.
"""

__version__ = "0.1.0"
