from decimal import Decimal

import pytest
import requests

from altfins_alerts.api.altfins import AltfinsClient
from altfins_alerts.exceptions import FetchError, PayloadError

from helpers import FakeResponse, FakeSession


def _client(response=None, error=None):
    session = FakeSession(response=response, error=error)
    client = AltfinsClient(
        api_key="secret-key",
        base_url="https://api.example.test/",
        timeout=7,
        session=session,
    )
    return client, session


PRICE_PAYLOAD = {
    "content": [
        {
            "symbol": "BTC",
            "name": "Bitcoin",
            "lastPrice": "97123.45",
            "additionalData": {"MARKET_CAP": "1900000000000"},
            "somethingNew": True,
        },
        {"symbol": "ETH", "name": "Ethereum", "lastPrice": "3500"},
    ],
    "totalElements": 2,
}

SIGNALS_PAYLOAD = {
    "content": [
        {
            "timestamp": "2025-03-01T12:00:05Z",
            "signalKey": "SIGNALS_SUMMARY_SMA_50_200",
            "signalName": "SMA 50/200 cross",
            "symbol": "ETH",
            "symbolName": "Ethereum",
            "lastPrice": "3500.1",
            "marketCap": "420000000000",
            "priceChange": "-0.5",
            "direction": "BEARISH",
            "unknownField": 1,
        },
    ],
    "totalElements": 1,
}


def test_fetch_price_posts_screener_request():
    client, session = _client(FakeResponse(payload=PRICE_PAYLOAD))
    sample = client.fetch_price(
        symbols=["BTC", " "],
        time_interval="DAILY",
        display_types=["MARKET_CAP", "DOLLAR_VOLUME"],
        coin_type_filter="REGULAR",
    )

    assert sample.symbol == "BTC"
    assert sample.name == "Bitcoin"
    assert sample.last_price == Decimal("97123.45")

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.example.test/api/v2/public/screener-data/search-requests"
    assert call["headers"]["x-api-key"] == "secret-key"
    assert call["timeout"] == 7
    assert call["json"] == {
        "symbols": ["BTC"],
        "timeInterval": "DAILY",
        "displayType": ["MARKET_CAP", "DOLLAR_VOLUME"],
        "coinTypeFilter": "REGULAR",
    }


def test_fetch_price_empty_content_returns_none():
    client, _ = _client(FakeResponse(payload={"content": []}))
    assert client.fetch_price(symbols=["BTC"]) is None


def test_fetch_price_missing_content_returns_none():
    client, _ = _client(FakeResponse(payload={"totalElements": 0}))
    assert client.fetch_price(symbols=["BTC"]) is None


def test_fetch_signals_parses_records():
    client, session = _client(FakeResponse(payload=SIGNALS_PAYLOAD))
    records = client.fetch_signals(signals=["", "SIGNALS_SUMMARY_SMA_50_200"], symbols=["ETH"])

    assert len(records) == 1
    record = records[0]
    assert record.symbol == "ETH"
    assert record.direction == "BEARISH"
    assert record.raw_timestamp == "2025-03-01T12:00:05Z"
    assert record.market_cap == "420000000000"

    call = session.calls[0]
    assert call["url"].endswith("/api/v2/public/signals-feed/search-requests")
    assert call["json"] == {"signals": ["SIGNALS_SUMMARY_SMA_50_200"], "symbols": ["ETH"]}
    assert call["params"] is None


def test_fetch_signals_passes_pagination():
    client, session = _client(FakeResponse(payload={"content": []}))
    assert client.fetch_signals(signals=[], symbols=["BTC"], page=0, size=50) == []
    assert session.calls[0]["params"] == {"page": 0, "size": 50}


def test_non_success_status_raises_fetch_error():
    client, _ = _client(FakeResponse(status_code=401, text="bad key"))
    with pytest.raises(FetchError) as excinfo:
        client.fetch_signals(signals=[], symbols=["BTC"])
    assert excinfo.value.status_code == 401


def test_transport_error_raises_fetch_error():
    client, _ = _client(error=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(FetchError):
        client.fetch_price(symbols=["BTC"])


def test_timeout_raises_fetch_error():
    client, _ = _client(error=requests.exceptions.Timeout())
    with pytest.raises(FetchError, match="timed out"):
        client.fetch_price(symbols=["BTC"])


def test_invalid_json_raises_payload_error():
    client, _ = _client(FakeResponse(payload=ValueError("not json")))
    with pytest.raises(PayloadError):
        client.fetch_price(symbols=["BTC"])


def test_bad_record_raises_payload_error():
    payload = {"content": [{"symbol": "BTC", "timestamp": "yesterday"}]}
    client, _ = _client(FakeResponse(payload=payload))
    with pytest.raises(PayloadError):
        client.fetch_signals(signals=[], symbols=["BTC"])


def test_non_finite_price_raises_payload_error():
    payload = {"content": [{"symbol": "BTC", "name": "Bitcoin", "lastPrice": "NaN"}]}
    client, _ = _client(FakeResponse(payload=payload))
    with pytest.raises(PayloadError):
        client.fetch_price(symbols=["BTC"])


def test_fetch_signals_accepts_nanosecond_timestamps():
    item = dict(SIGNALS_PAYLOAD["content"][0], timestamp="2025-03-01T12:00:05.123456789Z")
    client, _ = _client(FakeResponse(payload={"content": [item]}))
    (record,) = client.fetch_signals(signals=[], symbols=["ETH"])
    assert record.timestamp.microsecond == 123456
    assert record.raw_timestamp == "2025-03-01T12:00:05.123456789Z"


def test_content_not_a_list_raises_payload_error():
    client, _ = _client(FakeResponse(payload={"content": "oops"}))
    with pytest.raises(PayloadError):
        client.fetch_signals(signals=[], symbols=["BTC"])


def test_get_signal_keys():
    keys = [
        {"signalKey": "SIGNALS_SUMMARY_CHANNEL_UP", "nameBullish": "Channel up"},
        {"signalKey": "SIGNALS_SUMMARY_SMA_50_200"},
        {"nameBullish": "no key"},
    ]
    client, session = _client(FakeResponse(payload=keys))
    assert client.get_signal_keys() == ["SIGNALS_SUMMARY_CHANNEL_UP", "SIGNALS_SUMMARY_SMA_50_200"]
    assert session.calls[0]["method"] == "GET"
    assert session.calls[0]["json"] is None


def test_context_manager_closes_session():
    client, session = _client()
    with client:
        pass
    assert session.closed
