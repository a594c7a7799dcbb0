"""
Signal Models
=============

Dataclasses for the signal monitor: records from the signals feed and the
watermark state used to decide which of them are new.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional, Tuple

from ..exceptions import PayloadError

# (signal_key, symbol, timestamp) - identifies one signal occurrence
SignalId = Tuple[str, str, datetime]

# Seconds followed by a fraction of any length (the API may send nanoseconds)
_FRACTION_RE = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def _to_microseconds(match: "re.Match") -> str:
    digits = (match.group(2) + "000000")[:6]
    return f"{match.group(1)}.{digits}"


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp from the API into an aware UTC datetime.

    Accepts a trailing "Z" and 1 to 9 fraction digits (truncated to
    microseconds). Naive timestamps are treated as UTC.

    Raises:
        PayloadError: If the value is not a valid timestamp
    """
    if not isinstance(value, str) or not value:
        raise PayloadError(f"Invalid timestamp {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # datetime.fromisoformat only takes 3 or 6 digits before Python 3.11
    text = _FRACTION_RE.sub(_to_microseconds, text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise PayloadError(f"Invalid timestamp {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _text(item: Dict[str, Any], key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class SignalRecord:
    """One entry of the signals feed."""
    timestamp: datetime
    signal_key: str
    signal_name: str
    symbol: str
    symbol_name: str
    last_price: str
    price_change: str
    direction: str
    raw_timestamp: str = ""
    market_cap: Optional[str] = None

    @property
    def signal_id(self) -> SignalId:
        """Secondary dedupe key for signals sharing a timestamp."""
        return (self.signal_key, self.symbol, self.timestamp)

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "SignalRecord":
        """
        Build a record from one signals-feed `content` entry.

        Prices are kept as the strings the API sends so alerts show them
        unchanged. Unrecognized fields are ignored.

        Raises:
            PayloadError: If the entry is not an object or has a bad timestamp
        """
        if not isinstance(item, dict):
            raise PayloadError(f"Expected an object, got {type(item).__name__}")

        raw_timestamp = item.get("timestamp")
        return cls(
            timestamp=parse_timestamp(raw_timestamp),
            signal_key=_text(item, "signalKey"),
            signal_name=_text(item, "signalName"),
            symbol=_text(item, "symbol"),
            symbol_name=_text(item, "symbolName"),
            last_price=_text(item, "lastPrice"),
            price_change=_text(item, "priceChange"),
            direction=_text(item, "direction"),
            raw_timestamp=raw_timestamp,
            market_cap=item.get("marketCap"),
        )


@dataclass(frozen=True)
class SignalState:
    """
    Watermark for the signal monitor.

    watermark is the timestamp of the latest processed signal (or the
    monitor start time). seen_ids holds the ids already processed at exactly
    that timestamp, so a later signal with an equal timestamp is still
    reported once.
    """
    watermark: datetime
    seen_ids: FrozenSet[SignalId] = field(default_factory=frozenset)

    @classmethod
    def starting_now(cls) -> "SignalState":
        """State for a freshly started monitor: nothing before now is reported."""
        return cls(watermark=datetime.now(timezone.utc))

    def is_new(self, record: SignalRecord) -> bool:
        if record.timestamp > self.watermark:
            return True
        return record.timestamp == self.watermark and record.signal_id not in self.seen_ids
