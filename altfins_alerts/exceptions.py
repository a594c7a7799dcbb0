"""
Exceptions
==========

Errors raised while talking to the altFINS API.

Monitors treat every FetchError as a soft failure: the tick is logged and
skipped without touching monitor state.
"""


class AltfinsError(Exception):
    """Base class for altFINS client errors."""


class FetchError(AltfinsError):
    """Transport error, timeout or non-success response from the API."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class PayloadError(FetchError):
    """Response body could not be decoded into the expected shape."""
