"""
Monitor Configuration
=====================

Configuration for the altFINS price and signal monitors.

Values are read once at import time from environment variables. A .env file
in the project root is loaded first if present.
"""

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List

# Load .env file from project root
from dotenv import load_dotenv

_project_root = Path(__file__).parent.parent
_env_path = _project_root / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


def parse_list(value: str) -> List[str]:
    """
    Split a comma-separated setting into a list.

    Entries are stripped and blanks are dropped, so "" yields [].
    """
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_decimal(value: str, name: str) -> Decimal:
    """Parse a decimal setting, raising ValueError with the setting name."""
    try:
        return Decimal(value.strip())
    except (InvalidOperation, AttributeError):
        raise ValueError(f"{name} must be a decimal number, got {value!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


# =============================================================================
# ALTFINS API
# =============================================================================

ALTFINS_API_BASE_URL = os.environ.get("ALTFINS_API_BASE_URL", "https://altfins.com")
ALTFINS_API_KEY = os.environ.get("ALTFINS_API_KEY", "")

# Endpoint paths (relative to ALTFINS_API_BASE_URL)
ALTFINS_SCREENER_PATH = os.environ.get(
    "ALTFINS_SCREENER_PATH", "/api/v2/public/screener-data/search-requests"
)
ALTFINS_SIGNALS_PATH = os.environ.get(
    "ALTFINS_SIGNALS_PATH", "/api/v2/public/signals-feed/search-requests"
)
ALTFINS_SIGNAL_KEYS_PATH = "/api/v2/public/signals-feed/signal-keys"

ALTFINS_REQUEST_TIMEOUT = _env_int("ALTFINS_REQUEST_TIMEOUT", 30)  # seconds

# =============================================================================
# PRICE MONITOR
# =============================================================================

# Screener request parameters. Only the first returned coin is tracked.
PRICE_SYMBOLS = parse_list(os.environ.get("PRICE_SYMBOLS", "BTC"))
PRICE_TIME_INTERVAL = os.environ.get("PRICE_TIME_INTERVAL", "DAILY")
PRICE_DISPLAY_TYPES = parse_list(os.environ.get("PRICE_DISPLAY_TYPES", "MARKET_CAP,DOLLAR_VOLUME"))
PRICE_COIN_TYPE_FILTER = os.environ.get("PRICE_COIN_TYPE_FILTER", "REGULAR")

# Alert when |new price - last alerted price| exceeds this (USD)
PRICE_THRESHOLD = parse_decimal(os.environ.get("PRICE_THRESHOLD", "100"), "PRICE_THRESHOLD")

# Polled once a minute, on the minute
PRICE_POLL_INTERVAL_SECONDS = _env_int("PRICE_POLL_INTERVAL_SECONDS", 60)

# =============================================================================
# SIGNAL MONITOR
# =============================================================================

# Empty list = all signal types
SIGNALS = parse_list(os.environ.get("SIGNALS", ""))
SIGNAL_SYMBOLS = parse_list(os.environ.get("SIGNAL_SYMBOLS", "BTC,ETH"))

# Fixed rate between signal polls
SIGNAL_POLL_INTERVAL_SECONDS = _env_int("SIGNAL_POLL_INTERVAL_SECONDS", 60)

# Signals requested per poll (0 = API default page size)
SIGNAL_PAGE_SIZE = _env_int("SIGNAL_PAGE_SIZE", 0)

# =============================================================================
# TELEGRAM SETTINGS
# =============================================================================

# Set via environment variables
TELEGRAM_BOT_TOKEN = os.environ.get("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_CHAT_ID = os.environ.get("TELEGRAM_CHAT_ID", "")

# Message formatting
MAX_MESSAGE_LENGTH = 4000  # Telegram limit is 4096

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FILE = os.environ.get("LOG_FILE", "logs/monitor.log")
