"""CoinGecko (primary) provider."""
from __future__ import annotations

from .provider import COINGECKO_BASE_URL, CoinGeckoProvider

__all__ = ["COINGECKO_BASE_URL", "CoinGeckoProvider"]
