"""Fakes shared by the test modules."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import requests

from altfins_alerts.models import PriceSample, SignalRecord

T0 = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeNotifier:
    """Records sent messages; can be told to fail or raise."""

    def __init__(self, succeed: bool = True, raise_on: int = None):
        self.sent = []
        self.succeed = succeed
        self.raise_on = raise_on

    def send(self, destination, text):
        if self.raise_on is not None and len(self.sent) == self.raise_on:
            self.raise_on = None
            raise RuntimeError("delivery blew up")
        self.sent.append((destination, text))
        return self.succeed

    @property
    def texts(self):
        return [text for _, text in self.sent]


class FakeClient:
    """Stands in for AltfinsClient, returning queued results."""

    def __init__(self, prices=None, batches=None):
        self.prices = list(prices or [])
        self.batches = list(batches or [])
        self.calls = []

    def fetch_price(self, **kwargs):
        self.calls.append(("price", kwargs))
        result = self.prices.pop(0)
        if isinstance(result, Exception):
            raise result
        if result is None:
            return None
        return PriceSample(symbol="BTC", name="Bitcoin", last_price=Decimal(str(result)))

    def fetch_signals(self, **kwargs):
        self.calls.append(("signals", kwargs))
        result = self.batches.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ""

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code}", response=self)


class FakeSession:
    """Minimal requests.Session replacement recording every call."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)

    def close(self):
        self.closed = True


def make_signal(offset_seconds: int, key: str = "SMA_CROSS", symbol: str = "BTC") -> SignalRecord:
    ts = T0 + timedelta(seconds=offset_seconds)
    return SignalRecord(
        timestamp=ts,
        signal_key=key,
        signal_name=f"{key} signal",
        symbol=symbol,
        symbol_name="Bitcoin" if symbol == "BTC" else symbol,
        last_price="65000.5",
        price_change="1.25",
        direction="BULLISH",
        raw_timestamp=ts.isoformat().replace("+00:00", "Z"),
    )
