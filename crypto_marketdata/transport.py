"""
HTTP transport shared by every provider adapter.

One GET per call, bounded by a total timeout. While the network is unreachable
the call waits and tries again until that budget is spent (wait-for-connectivity);
any other failure is reported immediately. Status codes outside 2xx raise
RequestFailed before the body is looked at.
"""
from __future__ import annotations

import logging
import re
import time
from typing import Any, Callable, Mapping, Optional

import requests

from . import config
from .errors import DecodingError, InvalidURL, RequestFailed

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0

# Path segments (coin ids etc.) are interpolated raw, so only unreserved characters are allowed.
_SEGMENT_RE = re.compile(r"[A-Za-z0-9._~-]+")


class HttpTransport:
    """
    Thin wrapper around a requests.Session.

    Construct one and pass it to each provider; its configuration is read-only
    after construction so it can be shared between callers.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        wait_for_connectivity: bool = True,
        connectivity_poll_s: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive, got {timeout_s}")
        self._session = session if session is not None else _default_session()
        self.timeout_s = float(timeout_s)
        self.wait_for_connectivity = wait_for_connectivity
        self.connectivity_poll_s = float(connectivity_poll_s)
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_config(cls, session: Optional[requests.Session] = None) -> HttpTransport:
        """Build a transport from config.yaml / MARKETDATA_* settings."""
        return cls(
            session,
            timeout_s=config.http_timeout_s(),
            wait_for_connectivity=config.wait_for_connectivity(),
            connectivity_poll_s=config.connectivity_poll_s(),
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @staticmethod
    def build_url(
        base_url: str,
        *segments: Any,
        params: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Join base_url and path segments, append params as a query string.

        Raises InvalidURL when a segment is empty or has characters outside the
        unreserved set, or when the result has no scheme or host.
        """
        parts = [base_url.rstrip("/")] + [check_segment(seg) for seg in segments]
        url = "/".join(parts)

        prepared = requests.PreparedRequest()
        try:
            prepared.prepare_url(url, dict(params) if params else None)
        except requests.RequestException as exc:
            raise InvalidURL(f"Cannot build URL from {url!r}: {exc}") from exc
        return prepared.url

    def get(self, url: str) -> requests.Response:
        """GET url and return the response; raises RequestFailed on non-2xx or transport failure."""
        deadline = self._clock() + self.timeout_s
        attempt = 0
        last_err: Optional[Exception] = None

        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise RequestFailed(
                    f"No connectivity within {self.timeout_s:g}s for {url}: {last_err}",
                    url=url,
                ) from last_err
            attempt += 1
            try:
                logger.debug("GET %s (attempt %d, %.1fs left)", url, attempt, remaining)
                resp = self._session.get(url, timeout=remaining)
                break
            except requests.Timeout as exc:
                raise RequestFailed(f"Request timed out: {url}", url=url) from exc
            except (requests.exceptions.SSLError, requests.exceptions.ProxyError) as exc:
                raise RequestFailed(f"TLS or proxy failure for {url}: {exc}", url=url) from exc
            except requests.ConnectionError as exc:
                if not self.wait_for_connectivity:
                    raise RequestFailed(f"Connection failed: {url}: {exc}", url=url) from exc
                last_err = exc
                logger.debug("No connectivity for %s, waiting: %s", url, exc)
                self._sleep(min(self.connectivity_poll_s, max(deadline - self._clock(), 0.0)))
            except requests.RequestException as exc:
                raise RequestFailed(f"Request failed: {url}: {exc}", url=url) from exc

        if not 200 <= resp.status_code <= 299:
            raise RequestFailed(
                f"HTTP {resp.status_code} from {url}",
                url=url,
                status_code=resp.status_code,
            )
        return resp

    def fetch_json(self, url: str) -> Any:
        """GET url and decode the body as JSON."""
        resp = self.get(url)
        try:
            return resp.json()
        except ValueError as exc:
            raise DecodingError(f"Malformed JSON from {url}: {exc}") from exc


def _default_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json", "User-Agent": config.user_agent()})
    return session


def check_segment(value: Any) -> str:
    """Return value as text if it is safe to interpolate into a URL path or id list, else raise InvalidURL."""
    text = str(value)
    if not _SEGMENT_RE.fullmatch(text):
        raise InvalidURL(f"Invalid URL component {text!r}")
    return text
