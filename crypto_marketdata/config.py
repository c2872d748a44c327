"""
Load config from config.yaml with optional env overrides.
Single source of truth for provider base URLs, HTTP policy, and provider priority.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List, Optional

import yaml

# Defaults if no YAML or env
_DEFAULTS = {
    "http": {
        "timeout_s": 30.0,
        "wait_for_connectivity": True,
        "connectivity_poll_s": 1.0,
        "user_agent": "crypto-marketdata",
    },
    "endpoints": {
        "coingecko": "https://api.coingecko.com/api/v3",
        "coinpaprika": "https://api.coinpaprika.com/v1",
    },
    "providers": {
        "global_priority": ["coingecko", "coinpaprika"],
        "markets_priority": ["coingecko", "coinpaprika"],
    },
    "markets": {"per_page": 100, "vs_currency": "usd"},
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _config_yaml_path() -> Path:
    """config.yaml lives at repo root (parent of package dir) unless MARKETDATA_CONFIG points elsewhere."""
    override = os.environ.get("MARKETDATA_CONFIG")
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml(path: Optional[Path] = None) -> dict:
    config_path = path or _config_yaml_path()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    timeout = os.environ.get("MARKETDATA_HTTP_TIMEOUT_S")
    if timeout:
        overrides.setdefault("http", {})["timeout_s"] = float(timeout)
    wait = os.environ.get("MARKETDATA_WAIT_FOR_CONNECTIVITY")
    if wait:
        overrides.setdefault("http", {})["wait_for_connectivity"] = wait.strip().lower() in _TRUE_STRINGS
    gecko = os.environ.get("MARKETDATA_COINGECKO_URL")
    if gecko:
        overrides.setdefault("endpoints", {})["coingecko"] = gecko
    paprika = os.environ.get("MARKETDATA_COINPAPRIKA_URL")
    if paprika:
        overrides.setdefault("endpoints", {})["coinpaprika"] = paprika
    return overrides


def get_config() -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(_DEFAULTS, _load_yaml())
    merged = _deep_merge(merged, _env_overrides())
    return merged


# Convenience accessors
def http_timeout_s() -> float:
    return float(get_config()["http"]["timeout_s"])


def wait_for_connectivity() -> bool:
    return bool(get_config()["http"]["wait_for_connectivity"])


def connectivity_poll_s() -> float:
    return float(get_config()["http"]["connectivity_poll_s"])


def user_agent() -> str:
    return str(get_config()["http"]["user_agent"])


def endpoint(provider_name: str) -> str:
    endpoints: dict[str, Any] = get_config()["endpoints"]
    if provider_name not in endpoints:
        raise KeyError(f"No endpoint configured for provider '{provider_name}'")
    return str(endpoints[provider_name]).rstrip("/")


def global_priority() -> List[str]:
    return list(get_config()["providers"]["global_priority"])


def markets_priority() -> List[str]:
    return list(get_config()["providers"]["markets_priority"])


def markets_per_page() -> int:
    return int(get_config()["markets"]["per_page"])


def markets_vs_currency() -> str:
    return str(get_config()["markets"]["vs_currency"])
