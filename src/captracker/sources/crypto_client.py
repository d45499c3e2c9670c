"""CoinGecko global market aggregate client.

Reads ``/api/v3/global`` and keeps only the three figures the page shows:
total market cap in USD, BTC dominance and the number of active assets.
"""

import asyncio
from typing import Any

from captracker.config import CryptoSettings
from captracker.exceptions import ParseFailure, UpstreamShapeMismatch
from captracker.logging import get_logger
from captracker.models import CryptoAggregate
from captracker.sources.http import build_url, fetch_json

logger = get_logger(__name__)


def parse_global(payload: Any) -> CryptoAggregate:
    """Build a CryptoAggregate from a CoinGecko /global payload."""
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise UpstreamShapeMismatch("CoinGecko response missing 'data'")

    try:
        total = float(data["total_market_cap"]["usd"])
        btc = float(data["market_cap_percentage"]["btc"])
        active = int(data["active_cryptocurrencies"])
    except (KeyError, TypeError) as e:
        raise UpstreamShapeMismatch(f"CoinGecko response missing field: {e}") from e
    except ValueError as e:
        raise ParseFailure(f"CoinGecko field is not a number: {e}") from e

    return CryptoAggregate(
        total_market_cap_usd=total,
        btc_dominance_percent=btc,
        active_cryptocurrencies=active,
    )


class CoinGeckoClient:
    """Fetches the global crypto market aggregate.

    Args:
        settings: Endpoint URL, optional demo API key, request timeout.
    """

    def __init__(self, settings: CryptoSettings) -> None:
        self._settings = settings

    async def fetch_global(self) -> CryptoAggregate:
        payload = await asyncio.to_thread(self._fetch)
        aggregate = parse_global(payload)
        logger.debug(
            "crypto_aggregate_fetched",
            total_usd=aggregate.total_market_cap_usd,
            btc_dominance=aggregate.btc_dominance_percent,
        )
        return aggregate

    def _fetch(self) -> Any:
        """Synchronous call to CoinGecko. Runs in a thread."""
        params = None
        if self._settings.api_key:
            params = {"x_cg_demo_api_key": self._settings.api_key}
        url = build_url(self._settings.global_url, params)
        return fetch_json(url, timeout=self._settings.timeout_seconds)
