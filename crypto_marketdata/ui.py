"""
Global market summary view: plain-text rendering and a Streamlit panel.

The view reads three slots (loading flag, error message, data) and renders, in
that priority: a loading indicator, the error with a retry affordance, the
formatted summary, or a "data unavailable" placeholder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .errors import MarketDataError
from .providers.base import GlobalMarketSummary
from .providers.chain import GlobalSummaryChain

logger = logging.getLogger(__name__)

TITLE = "Global Market Summary"
UNAVAILABLE = "Global data unavailable"


@dataclass(frozen=True)
class GlobalSummaryState:
    """Loading flag, error message and data slot for the summary view."""

    is_loading: bool = False
    error: Optional[str] = None
    data: Optional[GlobalMarketSummary] = None


def load_global_state(chain: GlobalSummaryChain) -> GlobalSummaryState:
    """Fetch through the chain; a MarketDataError becomes the state's error message."""
    try:
        return GlobalSummaryState(data=chain.get_global_summary())
    except MarketDataError as exc:
        logger.warning("Global summary unavailable: %s", exc)
        return GlobalSummaryState(error=f"Could not load global market data ({type(exc).__name__}).")


def format_usd(value: float) -> str:
    """1234567.891 -> '$1,234,567.89'; negatives as '-$1.00'."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_pct(value: float) -> str:
    return f"{value:.2f}%"


def summary_lines(data: GlobalMarketSummary) -> List[str]:
    """The four display lines; missing USD / BTC keys show as zero."""
    cap = data.total_market_cap.get("usd", 0.0)
    volume = data.total_volume.get("usd", 0.0)
    dominance = data.market_cap_percentage.get("btc", 0.0)
    change = data.market_cap_change_percentage_24h_usd
    return [
        f"Total Market Cap: {format_usd(cap)}",
        f"Total Volume:    {format_usd(volume)}",
        f"BTC Dominance:   {format_pct(dominance)}",
        f"24h Change:      {format_pct(change)}",
    ]


def render_global_summary(state: GlobalSummaryState) -> str:
    """Render the summary view as text."""
    lines = [TITLE, ""]
    if state.is_loading:
        lines.append("Loading...")
    elif state.error is not None:
        lines.append(state.error)
        lines.append("Retry to fetch again.")
    elif state.data is not None:
        lines.extend(summary_lines(state.data))
    else:
        lines.append(UNAVAILABLE)
    return "\n".join(lines)


def st_global_summary(state: GlobalSummaryState, on_retry: Optional[Callable[[], None]] = None) -> None:
    """Render the summary view in Streamlit. on_retry is wired to the Retry button."""
    import streamlit as st

    st.title(TITLE)
    if state.is_loading:
        st.info("Loading...")
    elif state.error is not None:
        st.warning(state.error)
        st.button("Retry", on_click=on_retry, key="global_summary_retry")
    elif state.data is not None:
        for line in summary_lines(state.data):
            st.text(line)
    else:
        st.caption(UNAVAILABLE)
