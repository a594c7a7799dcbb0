"""
Shared Data Models
==================

This package contains dataclasses used across the project.
"""

from .price import PriceAlert, PriceSample, PriceState
from .signal import SignalId, SignalRecord, SignalState, parse_timestamp

__all__ = [
    "PriceAlert",
    "PriceSample",
    "PriceState",
    "SignalId",
    "SignalRecord",
    "SignalState",
    "parse_timestamp",
]
