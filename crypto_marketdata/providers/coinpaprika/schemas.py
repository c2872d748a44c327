"""
CoinPaprika response shapes and their translation onto the shared domain types.

CoinPaprika reports less than CoinGecko: no ETH dominance, no 24h market cap
change, no sparklines, no images. Those fields are zero-filled or left None.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ...errors import MissingQuoteError
from ..base import GlobalMarketSummary, MarketCoin
from ..decoding import nullable_float, optional_float, require_list, require_mapping, require_str

USD = "USD"


@dataclass(frozen=True)
class PaprikaGlobal:
    """GET v1/global (flat object)."""

    market_cap_usd: float
    volume_24h_usd: float
    bitcoin_dominance_percentage: float

    @classmethod
    def from_json(cls, payload: Any) -> PaprikaGlobal:
        body = require_mapping(payload, "paprika global")
        return cls(
            market_cap_usd=nullable_float(body, "market_cap_usd", "paprika global"),
            volume_24h_usd=nullable_float(body, "volume_24h_usd", "paprika global"),
            bitcoin_dominance_percentage=nullable_float(
                body, "bitcoin_dominance_percentage", "paprika global"
            ),
        )


@dataclass(frozen=True)
class PaprikaQuote:
    price: float
    volume_24h: float
    market_cap: float
    percent_change_24h: float
    percent_change_1h: Optional[float]

    @classmethod
    def from_json(cls, payload: Any, what: str) -> PaprikaQuote:
        q = require_mapping(payload, what)
        return cls(
            price=nullable_float(q, "price", what),
            volume_24h=nullable_float(q, "volume_24h", what),
            market_cap=nullable_float(q, "market_cap", what),
            percent_change_24h=nullable_float(q, "percent_change_24h", what),
            percent_change_1h=optional_float(q, "percent_change_1h", what),
        )


@dataclass(frozen=True)
class PaprikaTicker:
    """One element of GET v1/tickers."""

    id: str
    name: str
    symbol: str
    quotes: Dict[str, PaprikaQuote]

    @classmethod
    def from_json(cls, payload: Any, index: int = 0) -> PaprikaTicker:
        what = f"tickers[{index}]"
        t = require_mapping(payload, what)
        raw_quotes = require_mapping(t.get("quotes"), f"{what}.quotes")
        return cls(
            id=require_str(t, "id", what),
            name=require_str(t, "name", what),
            symbol=require_str(t, "symbol", what),
            quotes={
                code: PaprikaQuote.from_json(q, f"{what}.quotes.{code}") for code, q in raw_quotes.items()
            },
        )

    def quote(self, currency: str) -> PaprikaQuote:
        """The quote for `currency`; MissingQuoteError if the ticker has none."""
        try:
            return self.quotes[currency]
        except KeyError:
            raise MissingQuoteError(self.id, currency) from None


def parse_tickers(payload: Any) -> List[PaprikaTicker]:
    rows = require_list(payload, "tickers")
    return [PaprikaTicker.from_json(item, i) for i, item in enumerate(rows)]


# ---------------------------------------------------------------------------
# Translation onto domain types
# ---------------------------------------------------------------------------


def to_global_summary(pg: PaprikaGlobal) -> GlobalMarketSummary:
    return GlobalMarketSummary(
        total_market_cap={"usd": pg.market_cap_usd},
        total_volume={"usd": pg.volume_24h_usd},
        market_cap_percentage={"btc": pg.bitcoin_dominance_percentage, "eth": 0.0},
        market_cap_change_percentage_24h_usd=0.0,
    )


def to_market_coin(ticker: PaprikaTicker) -> MarketCoin:
    q = ticker.quote(USD)
    return MarketCoin(
        id=ticker.id,
        symbol=ticker.symbol,
        name=ticker.name,
        price=q.price,
        daily_change=q.percent_change_24h,
        hourly_change=q.percent_change_1h if q.percent_change_1h is not None else 0.0,
        volume=q.volume_24h,
        market_cap=q.market_cap,
        is_favorite=False,
        sparkline=None,
        image_url=None,
        final_image_url=None,
    )
