"""
Error types raised by the transport and provider adapters.

Three kinds, uniform across providers:
- InvalidURL: the request could not be built; nothing was sent.
- RequestFailed: non-2xx status or a transport-level failure.
- DecodingError: the body did not match the expected JSON shape.
"""
from __future__ import annotations

from typing import Optional


class MarketDataError(RuntimeError):
    """Base class for all market data client errors."""


class InvalidURL(MarketDataError):
    """Query construction failed before any request was issued."""


class RequestFailed(MarketDataError):
    """Upstream returned a non-2xx status or the request never completed."""

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodingError(MarketDataError):
    """Response body did not match the expected shape (upstream schema drift)."""


class MissingQuoteError(DecodingError, LookupError):
    """A ticker, or the provider as a whole, lacks the quote currency the caller requires."""

    def __init__(self, ticker_id: Optional[str], currency: str) -> None:
        if ticker_id is None:
            super().__init__(f"No {currency} quotes available")
        else:
            super().__init__(f"Ticker {ticker_id!r} has no {currency} quote")
        self.ticker_id = ticker_id
        self.currency = currency


# Errors after which a provider chain moves on to the next provider.
FALLBACK_ERRORS = (RequestFailed, DecodingError)
