"""
CoinGecko response shapes and their translation onto the shared domain types.

Each schema type parses one endpoint's JSON (raising DecodingError on a shape
mismatch) and a to_* function maps it to base.py types.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ...errors import DecodingError
from ..base import GlobalMarketSummary, HistoricalPoint, MarketCoin, PriceQuote
from ..decoding import (
    float_map,
    nullable_float,
    optional_float,
    optional_str,
    require_list,
    require_mapping,
    require_str,
    to_float,
)


@dataclass(frozen=True)
class SimplePriceResponse:
    """GET simple/price -> {"bitcoin": {"usd": 64000.0}, ...}"""

    usd: Dict[str, float]

    @classmethod
    def from_json(cls, payload: Any) -> SimplePriceResponse:
        body = require_mapping(payload, "simple/price")
        usd: Dict[str, float] = {}
        for coin_id, entry in body.items():
            what = f"simple/price[{coin_id}]"
            usd[coin_id] = to_float(require_mapping(entry, what).get("usd"), f"{what}.usd")
        return cls(usd=usd)


@dataclass(frozen=True)
class MarketChartResponse:
    """GET coins/{id}/market_chart -> {"prices": [[ms, price], ...], ...}"""

    prices: Tuple[Tuple[float, ...], ...]

    @classmethod
    def from_json(cls, payload: Any) -> MarketChartResponse:
        body = require_mapping(payload, "market_chart")
        rows = require_list(body.get("prices"), "market_chart.prices")
        parsed = []
        for i, row in enumerate(rows):
            entry = require_list(row, f"market_chart.prices[{i}]")
            parsed.append(tuple(to_float(x, f"market_chart.prices[{i}]") for x in entry))
        return cls(prices=tuple(parsed))


@dataclass(frozen=True)
class GlobalData:
    total_market_cap: Dict[str, float]
    total_volume: Dict[str, float]
    market_cap_percentage: Dict[str, float]
    market_cap_change_percentage_24h_usd: float


@dataclass(frozen=True)
class GlobalResponse:
    """GET global -> {"data": {...}}"""

    data: GlobalData

    @classmethod
    def from_json(cls, payload: Any) -> GlobalResponse:
        body = require_mapping(payload, "global")
        data = require_mapping(body.get("data"), "global.data")
        return cls(
            data=GlobalData(
                total_market_cap=float_map(data.get("total_market_cap"), "global.data.total_market_cap"),
                total_volume=float_map(data.get("total_volume"), "global.data.total_volume"),
                market_cap_percentage=float_map(
                    data.get("market_cap_percentage"), "global.data.market_cap_percentage"
                ),
                market_cap_change_percentage_24h_usd=nullable_float(
                    data, "market_cap_change_percentage_24h_usd", "global.data"
                ),
            )
        )


@dataclass(frozen=True)
class MarketRow:
    """One element of GET coins/markets."""

    id: str
    symbol: str
    name: str
    current_price: float
    price_change_percentage_24h: float
    price_change_percentage_1h_in_currency: Optional[float]
    total_volume: float
    market_cap: float
    sparkline_in_7d: Optional[Tuple[float, ...]]
    image: Optional[str]

    @classmethod
    def from_json(cls, payload: Any, index: int = 0) -> MarketRow:
        what = f"coins/markets[{index}]"
        row = require_mapping(payload, what)

        sparkline = None
        raw_spark = row.get("sparkline_in_7d")
        if raw_spark is not None:
            spark = require_mapping(raw_spark, f"{what}.sparkline_in_7d")
            prices = require_list(spark.get("price"), f"{what}.sparkline_in_7d.price")
            sparkline = tuple(to_float(p, f"{what}.sparkline_in_7d.price") for p in prices)

        return cls(
            id=require_str(row, "id", what),
            symbol=require_str(row, "symbol", what),
            name=require_str(row, "name", what),
            current_price=nullable_float(row, "current_price", what),
            price_change_percentage_24h=nullable_float(row, "price_change_percentage_24h", what),
            price_change_percentage_1h_in_currency=optional_float(
                row, "price_change_percentage_1h_in_currency", what
            ),
            total_volume=nullable_float(row, "total_volume", what),
            market_cap=nullable_float(row, "market_cap", what),
            sparkline_in_7d=sparkline,
            image=optional_str(row, "image", what),
        )


def parse_markets(payload: Any) -> List[MarketRow]:
    rows = require_list(payload, "coins/markets")
    return [MarketRow.from_json(item, i) for i, item in enumerate(rows)]


# ---------------------------------------------------------------------------
# Translation onto domain types
# ---------------------------------------------------------------------------


def to_price_quote(resp: SimplePriceResponse) -> PriceQuote:
    return dict(resp.usd)


def to_historical_points(resp: MarketChartResponse) -> List[HistoricalPoint]:
    """Entries that are not exactly [ms, price] are dropped; order is kept."""
    points = []
    for entry in resp.prices:
        if len(entry) != 2:
            continue
        try:
            points.append(HistoricalPoint.from_epoch_ms(entry[0], entry[1]))
        except (OverflowError, OSError, ValueError) as exc:
            raise DecodingError(f"market_chart: timestamp {entry[0]!r} out of range") from exc
    return points


def to_global_summary(resp: GlobalResponse) -> GlobalMarketSummary:
    d = resp.data
    return GlobalMarketSummary(
        total_market_cap=dict(d.total_market_cap),
        total_volume=dict(d.total_volume),
        market_cap_percentage=dict(d.market_cap_percentage),
        market_cap_change_percentage_24h_usd=d.market_cap_change_percentage_24h_usd,
    )


def to_market_coin(row: MarketRow) -> MarketCoin:
    return MarketCoin(
        id=row.id,
        symbol=row.symbol,
        name=row.name,
        price=row.current_price,
        daily_change=row.price_change_percentage_24h,
        hourly_change=row.price_change_percentage_1h_in_currency or 0.0,
        volume=row.total_volume,
        market_cap=row.market_cap,
        is_favorite=False,
        sparkline=row.sparkline_in_7d,
        image_url=row.image,
        final_image_url=row.image,
    )
