"""
Provider adapters for cryptocurrency market data.

CoinGecko is the primary source; CoinPaprika is the fallback for the global
summary and the markets list. Each adapter normalizes its provider's JSON onto
the shared types in base.py; chains own the fallback policy.
"""

from __future__ import annotations

from .base import (
    GlobalMarketSummary,
    GlobalSummaryProvider,
    HistoricalPoint,
    MarketCoin,
    MarketListProvider,
    MarketOrder,
    MarketQuery,
    PriceQuote,
    ProviderHealth,
    ProviderStatus,
)
from .chain import GlobalSummaryChain, MarketListChain
from .coingecko import CoinGeckoProvider
from .coinpaprika import CoinPaprikaProvider
from .registry import ProviderRegistry

__all__ = [
    "PriceQuote",
    "HistoricalPoint",
    "GlobalMarketSummary",
    "MarketCoin",
    "MarketOrder",
    "MarketQuery",
    "GlobalSummaryProvider",
    "MarketListProvider",
    "ProviderHealth",
    "ProviderStatus",
    "GlobalSummaryChain",
    "MarketListChain",
    "CoinGeckoProvider",
    "CoinPaprikaProvider",
    "ProviderRegistry",
]
