#!/usr/bin/env python3
"""Streamlit dashboard: global market summary and top markets. Run via `crypto-marketdata dashboard`."""
from __future__ import annotations

import streamlit as st

from crypto_marketdata import config
from crypto_marketdata.errors import MarketDataError
from crypto_marketdata.frames import markets_to_frame
from crypto_marketdata.providers.base import MarketQuery
from crypto_marketdata.providers.defaults import (
    create_default_registry,
    create_global_chain,
    create_markets_chain,
)
from crypto_marketdata.transport import HttpTransport
from crypto_marketdata.ui import load_global_state, st_global_summary


@st.cache_resource
def _registry():
    return create_default_registry(HttpTransport.from_config())


def _refresh_global() -> None:
    st.session_state["global_state"] = load_global_state(create_global_chain(_registry()))


def main() -> None:
    st.set_page_config(page_title="Crypto Market Data", layout="wide")

    if "global_state" not in st.session_state:
        _refresh_global()
    st_global_summary(st.session_state["global_state"], on_retry=_refresh_global)

    st.header("Top markets")
    per_page = st.slider("Coins", min_value=10, max_value=250, value=config.markets_per_page(), step=10)
    try:
        coins = create_markets_chain(_registry()).get_markets(MarketQuery(per_page=per_page))
    except MarketDataError as exc:
        st.warning(f"Markets unavailable: {exc}")
        return
    st.dataframe(markets_to_frame(coins), hide_index=True)


main()
