"""
altFINS API Client

Single responsibility: communicate with the altFINS public REST API.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .. import settings
from ..exceptions import FetchError, PayloadError
from ..models import PriceSample, SignalRecord

logger = logging.getLogger(__name__)


def _clean(values: Optional[List[str]]) -> List[str]:
    """Drop blank entries from a configured filter list."""
    return [v.strip() for v in (values or []) if v and v.strip()]


class AltfinsClient:
    """
    Synchronous client for the altFINS API.

    Handles:
    - Fetching the latest price of an asset (screener endpoint)
    - Fetching the signals feed
    - Listing valid signal keys

    One request per call, no retries. Every failure is raised as FetchError
    so callers can skip the tick.
    """

    def __init__(
        self,
        api_key: str = None,
        base_url: str = None,
        timeout: float = None,
        session: requests.Session = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ALTFINS_API_KEY
        self.base_url = (base_url or settings.ALTFINS_API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.ALTFINS_REQUEST_TIMEOUT
        self._session = session or requests.Session()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the HTTP session."""
        self._session.close()

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        payload: dict = None,
        params: dict = None,
    ) -> Any:
        """
        Make a single request to the altFINS API.

        Args:
            method: "GET" or "POST"
            path: Endpoint path or absolute URL
            payload: JSON body for POST requests
            params: Query parameters (None values are dropped)

        Returns:
            Decoded JSON response

        Raises:
            FetchError: On transport errors and non-success statuses
            PayloadError: If the body is not valid JSON
        """
        headers = {
            "Accept": "application/json",
            "x-api-key": self.api_key,
        }
        if payload is not None:
            headers["Content-Type"] = "application/json"

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        url = self._url(path)
        try:
            response = self._session.request(
                method,
                url,
                json=payload,
                params=params or None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            raise FetchError(f"Request to {path} timed out after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request to {path} failed: {type(e).__name__}")

        if not 200 <= response.status_code < 300:
            body = (response.text or "")[:200]
            raise FetchError(
                f"API error {response.status_code} from {path}: {body}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            raise PayloadError(f"Invalid JSON from {path}")

    @staticmethod
    def _content(response: Any) -> List[Dict[str, Any]]:
        """Extract the `content` array from a paginated response."""
        if response is None:
            return []
        if not isinstance(response, dict):
            raise PayloadError(f"Expected an object, got {type(response).__name__}")

        content = response.get("content")
        if content is None:
            return []
        if not isinstance(content, list):
            raise PayloadError("`content` is not a list")
        return content

    # -------------------------------------------------------------------------
    # Public Methods
    # -------------------------------------------------------------------------

    def fetch_price(
        self,
        symbols: List[str] = None,
        time_interval: str = None,
        display_types: List[str] = None,
        coin_type_filter: str = None,
    ) -> Optional[PriceSample]:
        """
        Get the latest price from the screener endpoint.

        Args:
            symbols: Asset filter list (default: PRICE_SYMBOLS)
            time_interval: Screener interval, e.g. "DAILY"
            display_types: Extra screener columns to request
            coin_type_filter: Coin type filter, e.g. "REGULAR"

        Returns:
            PriceSample for the first returned coin, or None if none returned
        """
        payload = {
            "symbols": _clean(symbols if symbols is not None else settings.PRICE_SYMBOLS),
            "timeInterval": time_interval or settings.PRICE_TIME_INTERVAL,
            "displayType": _clean(
                display_types if display_types is not None else settings.PRICE_DISPLAY_TYPES
            ),
            "coinTypeFilter": coin_type_filter or settings.PRICE_COIN_TYPE_FILTER,
        }

        response = self._request("POST", settings.ALTFINS_SCREENER_PATH, payload=payload)
        content = self._content(response)
        if not content:
            return None

        return PriceSample.from_api(content[0])

    def fetch_signals(
        self,
        signals: List[str] = None,
        symbols: List[str] = None,
        page: int = None,
        size: int = None,
    ) -> List[SignalRecord]:
        """
        Get the signals feed.

        Args:
            signals: Signal key filter (empty = all signals)
            symbols: Asset filter list
            page: Optional page index
            size: Optional page size

        Returns:
            List of SignalRecord in API order (possibly empty)
        """
        payload = {
            "signals": _clean(signals if signals is not None else settings.SIGNALS),
            "symbols": _clean(symbols if symbols is not None else settings.SIGNAL_SYMBOLS),
        }

        response = self._request(
            "POST",
            settings.ALTFINS_SIGNALS_PATH,
            payload=payload,
            params={"page": page, "size": size},
        )
        return [SignalRecord.from_api(item) for item in self._content(response)]

    def get_signal_keys(self) -> List[str]:
        """
        Get all valid signal keys.

        Returns:
            List of signal key identifiers
        """
        response = self._request("GET", settings.ALTFINS_SIGNAL_KEYS_PATH)
        if not isinstance(response, list):
            raise PayloadError("Expected a list of signal keys")

        keys = []
        for item in response:
            if isinstance(item, dict) and item.get("signalKey"):
                keys.append(str(item["signalKey"]))
        return keys
