"""
Default provider registry configuration.

Registers built-in providers and builds chains from config.yaml settings.
To add a new provider, register it here and add it to the priority lists.

The chain builders create a registry (and an HttpTransport) when none is given;
nothing closes that transport. Long-lived callers should own the registry:

    with create_default_registry() as registry:
        summary = create_global_chain(registry).get_global_summary()
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .. import config
from ..transport import HttpTransport
from .chain import GlobalSummaryChain, MarketListChain
from .coingecko import CoinGeckoProvider
from .coinpaprika import CoinPaprikaProvider
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)


def create_default_registry(transport: Optional[HttpTransport] = None) -> ProviderRegistry:
    """Create a registry with all built-in providers sharing one transport; closing it closes the transport."""
    registry = ProviderRegistry(transport or HttpTransport.from_config())
    registry.register("coingecko", CoinGeckoProvider.from_config)
    registry.register("coinpaprika", CoinPaprikaProvider.from_config)
    return registry


def create_global_chain(
    registry: Optional[ProviderRegistry] = None,
    priority: Optional[List[str]] = None,
) -> GlobalSummaryChain:
    """Build the global summary chain (CoinGecko -> CoinPaprika by default)."""
    reg = registry or create_default_registry()
    order = priority or config.global_priority()
    return GlobalSummaryChain(reg.build(order))


def create_markets_chain(
    registry: Optional[ProviderRegistry] = None,
    priority: Optional[List[str]] = None,
) -> MarketListChain:
    """Build the markets list chain (CoinGecko -> CoinPaprika by default)."""
    reg = registry or create_default_registry()
    order = priority or config.markets_priority()
    return MarketListChain(reg.build(order))
