"""
CoinGecko market data provider (primary).

Uses the public CoinGecko API (no authentication required):
  GET {base}/simple/price?ids={ids}&vs_currencies=usd
  GET {base}/coins/{id}/market_chart?vs_currency=usd&days={days}
  GET {base}/global
  GET {base}/coins/markets?vs_currency=..&order=..&per_page=..&page=..&sparkline=..
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ... import config
from ...errors import InvalidURL
from ...transport import HttpTransport, check_segment
from ..base import (
    GlobalMarketSummary,
    HistoricalPoint,
    MarketCoin,
    MarketOrder,
    MarketQuery,
    PriceQuote,
)
from .schemas import (
    GlobalResponse,
    MarketChartResponse,
    SimplePriceResponse,
    parse_markets,
    to_global_summary,
    to_historical_points,
    to_market_coin,
    to_price_quote,
)

logger = logging.getLogger(__name__)

COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"


class CoinGeckoProvider:
    """Prices, market charts, global summary and markets list from CoinGecko."""

    def __init__(self, transport: HttpTransport, base_url: Optional[str] = None) -> None:
        self._transport = transport
        self._base_url = (base_url or COINGECKO_BASE_URL).rstrip("/")

    @classmethod
    def from_config(cls, transport: HttpTransport) -> CoinGeckoProvider:
        return cls(transport, base_url=config.endpoint("coingecko"))

    @property
    def provider_name(self) -> str:
        return "coingecko"

    def get_current_prices(self, coin_ids: Iterable[str]) -> PriceQuote:
        """USD price per coin id. Ids unknown upstream are simply absent from the result."""
        ids = list(coin_ids)
        if not ids:
            raise InvalidURL("At least one coin id is required")
        for coin_id in ids:
            check_segment(coin_id)
        url = self._transport.build_url(
            self._base_url,
            "simple",
            "price",
            params={"ids": ",".join(ids), "vs_currencies": "usd"},
        )
        prices = to_price_quote(SimplePriceResponse.from_json(self._transport.fetch_json(url)))
        logger.debug("coingecko prices: %d requested, %d returned", len(ids), len(prices))
        return prices

    def get_historical_prices(self, coin_id: str, days: int) -> List[HistoricalPoint]:
        """
        (timestamp, USD price) samples over the last `days` days, in upstream order.

        `days` is checked before any request is made: anything but a positive int
        raises InvalidURL, since no valid market_chart URL can be built from it.
        """
        if isinstance(days, bool) or not isinstance(days, int) or days < 1:
            raise InvalidURL(f"days must be a positive integer, got {days!r}")
        url = self._transport.build_url(
            self._base_url,
            "coins",
            coin_id,
            "market_chart",
            params={"vs_currency": "usd", "days": str(days)},
        )
        chart = MarketChartResponse.from_json(self._transport.fetch_json(url))
        points = to_historical_points(chart)
        dropped = len(chart.prices) - len(points)
        if dropped:
            logger.debug("coingecko market_chart %s: dropped %d malformed entries", coin_id, dropped)
        return points

    def fetch_global_data(self) -> GlobalMarketSummary:
        url = self._transport.build_url(self._base_url, "global")
        return to_global_summary(GlobalResponse.from_json(self._transport.fetch_json(url)))

    def fetch_markets(
        self,
        vs_currency: str = "usd",
        order: MarketOrder = MarketOrder.MARKET_CAP_DESC,
        per_page: int = 100,
        page: int = 1,
        sparkline: bool = False,
    ) -> List[MarketCoin]:
        if per_page < 1 or page < 1:
            raise InvalidURL(f"per_page and page must be >= 1, got {per_page}, {page}")
        url = self._transport.build_url(
            self._base_url,
            "coins",
            "markets",
            params={
                "vs_currency": vs_currency,
                "order": MarketOrder(order).value,
                "per_page": str(per_page),
                "page": str(page),
                "sparkline": "true" if sparkline else "false",
                "price_change_percentage": "1h,24h",
            },
        )
        return [to_market_coin(row) for row in parse_markets(self._transport.fetch_json(url))]

    # Protocol methods used by the provider chains

    def get_global_summary(self) -> GlobalMarketSummary:
        return self.fetch_global_data()

    def get_markets(self, query: MarketQuery) -> List[MarketCoin]:
        return self.fetch_markets(
            vs_currency=query.vs_currency,
            order=query.order,
            per_page=query.per_page,
            page=query.page,
            sparkline=query.sparkline,
        )
