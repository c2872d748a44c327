"""
Provider registry: central catalog of available providers.

Providers register a factory taking the shared HttpTransport. A priority list
(from config.yaml) determines which providers a chain tries, and in what order.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..transport import HttpTransport

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[HttpTransport], Any]


class ProviderRegistry:
    """
    Registry mapping provider names to factories, instantiated once per transport.

    Usage:
        registry = ProviderRegistry(transport)
        registry.register("coingecko", CoinGeckoProvider.from_config)
        registry.register("coinpaprika", CoinPaprikaProvider.from_config)

        providers = registry.build(["coingecko", "coinpaprika"])
    """

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport
        self._factories: Dict[str, ProviderFactory] = {}
        self._instances: Dict[str, Any] = {}

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    def close(self) -> None:
        """Close the shared transport; providers built from this registry stop working."""
        self._transport.close()

    def __enter__(self) -> ProviderRegistry:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def register(self, name: str, factory: ProviderFactory) -> None:
        """Register a provider factory by name."""
        self._factories[name] = factory
        self._instances.pop(name, None)
        logger.debug("Registered provider: %s", name)

    def get(self, name: str) -> Any:
        """Get or instantiate a provider by name."""
        if name not in self._instances:
            factory = self._factories.get(name)
            if factory is None:
                raise KeyError(f"Unknown provider '{name}'. Available: {list(self._factories)}")
            self._instances[name] = factory(self._transport)
        return self._instances[name]

    @property
    def names(self) -> List[str]:
        return list(self._factories)

    def build(self, priority: Optional[List[str]] = None) -> List[Any]:
        """Build an ordered list of providers from a priority list; unknown names are skipped."""
        names = priority or list(self._factories)
        unknown = [n for n in names if n not in self._factories]
        if unknown:
            logger.warning("Ignoring unknown providers in priority list: %s", unknown)
        return [self.get(n) for n in names if n in self._factories]
