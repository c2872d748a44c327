"""CoinPaprika (fallback) provider."""
from __future__ import annotations

from .provider import COINPAPRIKA_BASE_URL, CoinPaprikaProvider

__all__ = ["COINPAPRIKA_BASE_URL", "CoinPaprikaProvider"]
