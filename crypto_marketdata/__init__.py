"""
Cryptocurrency market data client.

CoinGecko is the primary source, CoinPaprika the fallback for the global
summary and the markets list. Construct one HttpTransport and pass it to the
providers (or use providers.defaults to build chains from config.yaml).
"""

from __future__ import annotations

from ._version import __version__
from .errors import DecodingError, InvalidURL, MarketDataError, MissingQuoteError, RequestFailed
from .providers import (
    CoinGeckoProvider,
    CoinPaprikaProvider,
    GlobalMarketSummary,
    GlobalSummaryChain,
    HistoricalPoint,
    MarketCoin,
    MarketListChain,
    MarketOrder,
    MarketQuery,
)
from .transport import HttpTransport

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "HttpTransport",
    "CoinGeckoProvider",
    "CoinPaprikaProvider",
    "GlobalSummaryChain",
    "MarketListChain",
    "GlobalMarketSummary",
    "HistoricalPoint",
    "MarketCoin",
    "MarketOrder",
    "MarketQuery",
    "MarketDataError",
    "InvalidURL",
    "RequestFailed",
    "DecodingError",
    "MissingQuoteError",
]
