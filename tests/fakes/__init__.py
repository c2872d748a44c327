"""Fake providers and HTTP plumbing for provider and chain tests (no live network)."""

from .http import ManualClock, RoutingSession, make_response, make_transport, path_of, query_of
from .providers import (
    FAKE_SUMMARY,
    FakeMarketProvider,
    FakeMarketProviderAlwaysFail,
    FakeMarketProviderFailNThenSucceed,
    fake_coin,
)

__all__ = [
    "FAKE_SUMMARY",
    "FakeMarketProvider",
    "FakeMarketProviderAlwaysFail",
    "FakeMarketProviderFailNThenSucceed",
    "ManualClock",
    "RoutingSession",
    "fake_coin",
    "make_response",
    "make_transport",
    "path_of",
    "query_of",
]
