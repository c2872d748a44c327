"""
DataFrame views of domain values, for the CLI tables and the dashboard.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Iterable

import pandas as pd

from .providers.base import HistoricalPoint, MarketCoin

MARKET_COLUMNS = [
    "id",
    "symbol",
    "name",
    "price",
    "hourly_change",
    "daily_change",
    "volume",
    "market_cap",
]


def history_to_frame(points: Iterable[HistoricalPoint]) -> pd.DataFrame:
    """Price series indexed by UTC timestamp (ts_utc), upstream order kept."""
    rows = [(p.timestamp, p.price) for p in points]
    df = pd.DataFrame(rows, columns=["ts_utc", "price_usd"])
    df["ts_utc"] = pd.to_datetime(df["ts_utc"], utc=True)
    return df.set_index("ts_utc")


def markets_to_frame(coins: Iterable[MarketCoin]) -> pd.DataFrame:
    """One row per coin with the numeric market columns; sparkline and image fields omitted."""
    records = [{k: v for k, v in asdict(c).items() if k in MARKET_COLUMNS} for c in coins]
    return pd.DataFrame(records, columns=MARKET_COLUMNS)
