"""
Provider interfaces and shared domain types.

Providers implement one or both of two protocols:
- GlobalSummaryProvider: total market cap / volume / dominance snapshot
- MarketListProvider: one page of per-coin market rows

Data is returned via frozen dataclasses for immutability and structural equality.
Each call produces a fresh snapshot; nothing is cached.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

# Coin id -> USD price.
PriceQuote = Dict[str, float]


class ProviderStatus(enum.Enum):
    """Health status of a data provider."""

    OK = "OK"
    DEGRADED = "DEGRADED"
    DOWN = "DOWN"


class MarketOrder(str, enum.Enum):
    """Sort orders accepted by the markets endpoint."""

    MARKET_CAP_DESC = "market_cap_desc"


@dataclass(frozen=True)
class HistoricalPoint:
    """One (timestamp, price) sample of a market chart."""

    timestamp: datetime
    price: float

    @classmethod
    def from_epoch_ms(cls, ms: float, price: float) -> HistoricalPoint:
        return cls(timestamp=datetime.fromtimestamp(ms / 1000, tz=timezone.utc), price=price)


@dataclass(frozen=True)
class GlobalMarketSummary:
    """Market-wide totals keyed by currency code, dominance keyed by coin symbol."""

    total_market_cap: Dict[str, float]
    total_volume: Dict[str, float]
    market_cap_percentage: Dict[str, float]
    market_cap_change_percentage_24h_usd: float

    @property
    def btc_dominance(self) -> float:
        return self.market_cap_percentage.get("btc", 0.0)


@dataclass(frozen=True)
class MarketCoin:
    """One row of the markets list, provider-neutral."""

    id: str
    symbol: str
    name: str
    price: float
    daily_change: float
    hourly_change: float
    volume: float
    market_cap: float
    is_favorite: bool = False
    sparkline: Optional[Tuple[float, ...]] = None
    image_url: Optional[str] = None
    final_image_url: Optional[str] = None


@dataclass(frozen=True)
class MarketQuery:
    """Provider-neutral request for one page of the markets list."""

    vs_currency: str = "usd"
    per_page: int = 100
    page: int = 1
    sparkline: bool = False
    order: MarketOrder = MarketOrder.MARKET_CAP_DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass
class ProviderHealth:
    """Mutable health state for a single provider instance."""

    provider_name: str
    status: ProviderStatus = ProviderStatus.OK
    last_ok_at: Optional[str] = None
    fail_count: int = 0
    last_error: Optional[str] = None
    recent_errors: List[str] = field(default_factory=list, repr=False)

    def record_success(self) -> None:
        self.status = ProviderStatus.OK
        self.fail_count = 0
        self.last_ok_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
        self.last_error = None

    def record_failure(self, error: str) -> None:
        self.fail_count += 1
        self.last_error = error[:500]
        self.recent_errors = (self.recent_errors + [self.last_error])[-5:]
        if self.fail_count >= 5:
            self.status = ProviderStatus.DOWN
        elif self.fail_count >= 2:
            self.status = ProviderStatus.DEGRADED


@runtime_checkable
class GlobalSummaryProvider(Protocol):
    """Protocol for providers of the global market summary."""

    @property
    def provider_name(self) -> str: ...

    def get_global_summary(self) -> GlobalMarketSummary:
        """Fetch the current market-wide summary."""
        ...


@runtime_checkable
class MarketListProvider(Protocol):
    """Protocol for providers of the paged markets list."""

    @property
    def provider_name(self) -> str: ...

    def get_markets(self, query: MarketQuery) -> List[MarketCoin]:
        """Fetch one page of market rows."""
        ...
