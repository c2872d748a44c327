"""
Provider chains: ordered fallback between single-provider adapters.

A chain tries providers in priority order. RequestFailed and DecodingError move
on to the next provider; any other error (InvalidURL included) propagates at
once. When every provider fails, the last provider's error is re-raised as is.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Sequence, TypeVar

from ..errors import FALLBACK_ERRORS
from .base import (
    GlobalMarketSummary,
    GlobalSummaryProvider,
    MarketCoin,
    MarketListProvider,
    MarketQuery,
    ProviderHealth,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _ProviderChain:
    def __init__(self, providers: Sequence, kind: str) -> None:
        if not providers:
            raise ValueError(f"A {kind} chain needs at least one provider")
        self._providers = list(providers)
        self._kind = kind
        self._health: Dict[str, ProviderHealth] = {
            p.provider_name: ProviderHealth(provider_name=p.provider_name) for p in self._providers
        }

    @property
    def provider_names(self) -> List[str]:
        return [p.provider_name for p in self._providers]

    def _run(self, call: Callable[[Any], T], what: str) -> T:
        errors: List[str] = []
        for i, provider in enumerate(self._providers):
            name = provider.provider_name
            health = self._health[name]
            try:
                result = call(provider)
            except FALLBACK_ERRORS as exc:
                msg = f"{name}: {type(exc).__name__}: {exc}"
                errors.append(msg)
                health.record_failure(str(exc))
                if i + 1 == len(self._providers):
                    logger.warning("All %s providers failed for %s: %s", self._kind, what, "; ".join(errors))
                    raise
                logger.warning("%s failed for %s, falling back: %s", name, what, exc)
                continue
            health.record_success()
            if i > 0:
                logger.info("%s served by fallback provider %s", what, name)
            return result
        raise AssertionError("unreachable")

    def get_health(self) -> Dict[str, ProviderHealth]:
        """Return health status for all providers in the chain."""
        return dict(self._health)


class GlobalSummaryChain(_ProviderChain):
    """Global market summary: primary provider first, then fallbacks."""

    def __init__(self, providers: Sequence[GlobalSummaryProvider]) -> None:
        super().__init__(providers, kind="global")

    def get_global_summary(self) -> GlobalMarketSummary:
        return self._run(lambda p: p.get_global_summary(), "global summary")


class MarketListChain(_ProviderChain):
    """Paged markets list: primary provider first, then fallbacks."""

    def __init__(self, providers: Sequence[MarketListProvider]) -> None:
        super().__init__(providers, kind="markets")

    def get_markets(self, query: MarketQuery) -> List[MarketCoin]:
        return self._run(
            lambda p: p.get_markets(query),
            f"markets page {query.page} (per_page={query.per_page})",
        )
