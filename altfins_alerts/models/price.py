"""
Price Models
============

Dataclasses for the price monitor: the sample fetched each tick and the
in-memory state it is compared against.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from ..exceptions import PayloadError


@dataclass(frozen=True)
class PriceSample:
    """Latest price of a single asset from the screener endpoint."""
    symbol: str
    name: str
    last_price: Decimal

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "PriceSample":
        """
        Build a sample from one screener `content` entry.

        Unrecognized fields (additionalData, timeInterval, ...) are ignored.

        Raises:
            PayloadError: If the entry has no usable lastPrice
        """
        if not isinstance(item, dict):
            raise PayloadError(f"Expected an object, got {type(item).__name__}")

        raw_price = item.get("lastPrice")
        if raw_price is None:
            raise PayloadError(f"Missing lastPrice for {item.get('symbol', '?')}")

        try:
            last_price = Decimal(str(raw_price))
        except InvalidOperation:
            raise PayloadError(f"Invalid lastPrice {raw_price!r}")
        if not last_price.is_finite():
            raise PayloadError(f"Invalid lastPrice {raw_price!r}")

        symbol = str(item.get("symbol") or "")
        return cls(
            symbol=symbol,
            name=str(item.get("name") or symbol),
            last_price=last_price,
        )


@dataclass(frozen=True)
class PriceState:
    """
    Last alerted price of the tracked asset.

    last_price is None until the first successful fetch (Uninitialized).
    """
    last_price: Optional[Decimal] = None

    @property
    def initialized(self) -> bool:
        return self.last_price is not None


@dataclass(frozen=True)
class PriceAlert:
    """A price move that crossed the threshold."""
    symbol: str
    name: str
    direction: str  # "increased" or "decreased"
    delta: Decimal  # absolute change
    new_price: Decimal

    @property
    def is_increase(self) -> bool:
        return self.direction == "increased"
