"""Alpha Vantage GLOBAL_QUOTE client with an in-memory upstream cache.

The raw payload is cached for ``upstream_cache_seconds`` so repeated proxy
calls inside that window do not spend the free tier's request quota. A payload
is cached only when it carries a quote object, carries no in-band notice and
passes the caller's validator; anything else is returned once and forgotten.
"""

import asyncio
import time
from typing import Any, Callable

from captracker.config import QuoteSettings
from captracker.logging import get_logger
from captracker.sources.http import build_url, fetch_json

logger = get_logger(__name__)

# Alpha Vantage reports problems in-band with a 200 status
THROTTLE_KEYS = ("Information", "Note", "Error Message")


class AlphaVantageClient:
    """Fetches and caches the GLOBAL_QUOTE payload for one symbol.

    Args:
        settings: Upstream quote settings (symbol, API key, cache TTL, timeout).
    """

    def __init__(self, settings: QuoteSettings) -> None:
        self._settings = settings
        self._cache: dict[str, Any] | None = None
        self._cache_time: float = 0.0
        self._ttl = settings.upstream_cache_seconds
        self._lock = asyncio.Lock()

    @property
    def symbol(self) -> str:
        return self._settings.symbol

    def _is_cache_valid(self) -> bool:
        return self._cache is not None and (time.time() - self._cache_time < self._ttl)

    def invalidate(self) -> None:
        """Drop the cached payload so the next call goes upstream."""
        self._cache = None
        self._cache_time = 0.0

    async def fetch_global_quote(
        self, validate: Callable[[Any], object] | None = None
    ) -> dict[str, Any]:
        """Return the GLOBAL_QUOTE payload, from cache when still fresh.

        Args:
            validate: Called on a freshly fetched payload before it is cached.
                Whatever it raises propagates and the payload is not stored.

        Raises:
            NetworkFailure: when the upstream request fails.
        """
        async with self._lock:
            if self._is_cache_valid():
                logger.debug("quote_cache_hit", symbol=self.symbol)
                return self._cache  # type: ignore[return-value]

            payload = await asyncio.to_thread(self._fetch)
            if validate is not None:
                validate(payload)

            if _is_cacheable(payload):
                self._cache = payload
                self._cache_time = time.time()
                logger.info(
                    "quote_fetched",
                    symbol=self.symbol,
                    cache_ttl=self._ttl,
                )
            return payload

    def _fetch(self) -> Any:
        """Synchronous call to the upstream API. Runs in a thread."""
        url = build_url(
            self._settings.base_url,
            {
                "function": "GLOBAL_QUOTE",
                "symbol": self._settings.symbol,
                "apikey": self._settings.api_key.get_secret_value(),
            },
        )
        return fetch_json(url, timeout=self._settings.timeout_seconds)


def _is_cacheable(payload: Any) -> bool:
    if not isinstance(payload, dict) or not payload.get("Global Quote"):
        return False
    return not any(key in payload for key in THROTTLE_KEYS)
