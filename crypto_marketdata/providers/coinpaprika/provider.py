"""
CoinPaprika market data provider (fallback).

Uses the public CoinPaprika API (no authentication required):
  GET {base}/global
  GET {base}/tickers?limit={limit}&offset={offset}
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ... import config
from ...errors import InvalidURL, MissingQuoteError
from ...transport import HttpTransport
from ..base import GlobalMarketSummary, MarketCoin, MarketQuery
from .schemas import PaprikaGlobal, parse_tickers, to_global_summary, to_market_coin

logger = logging.getLogger(__name__)

COINPAPRIKA_BASE_URL = "https://api.coinpaprika.com/v1"


class CoinPaprikaProvider:
    """Global summary and tickers list from CoinPaprika. USD quotes only."""

    def __init__(self, transport: HttpTransport, base_url: Optional[str] = None) -> None:
        self._transport = transport
        self._base_url = (base_url or COINPAPRIKA_BASE_URL).rstrip("/")

    @classmethod
    def from_config(cls, transport: HttpTransport) -> CoinPaprikaProvider:
        return cls(transport, base_url=config.endpoint("coinpaprika"))

    @property
    def provider_name(self) -> str:
        return "coinpaprika"

    def fetch_global_data(self) -> GlobalMarketSummary:
        """Global summary; ETH dominance and 24h change are zero-filled."""
        url = self._transport.build_url(self._base_url, "global")
        return to_global_summary(PaprikaGlobal.from_json(self._transport.fetch_json(url)))

    def fetch_markets(self, limit: int, offset: int) -> List[MarketCoin]:
        if limit < 1 or offset < 0:
            raise InvalidURL(f"limit must be >= 1 and offset >= 0, got {limit}, {offset}")
        url = self._transport.build_url(
            self._base_url,
            "tickers",
            params={"limit": str(limit), "offset": str(offset)},
        )
        return [to_market_coin(t) for t in parse_tickers(self._transport.fetch_json(url))]

    # Protocol methods used by the provider chains

    def get_global_summary(self) -> GlobalMarketSummary:
        return self.fetch_global_data()

    def get_markets(self, query: MarketQuery) -> List[MarketCoin]:
        if query.vs_currency.lower() != "usd":
            logger.debug("coinpaprika: no %s quotes, only USD", query.vs_currency)
            raise MissingQuoteError(None, query.vs_currency.upper())
        return self.fetch_markets(limit=query.per_page, offset=query.offset)
