"""
API Package
===========

External API clients for altFINS market data.

Components:
- altfins.py: AltfinsClient (screener prices, signals feed, signal keys)
"""

from .altfins import AltfinsClient

__all__ = [
    "AltfinsClient",
]
