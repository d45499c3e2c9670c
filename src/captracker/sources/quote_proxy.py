"""Quote Proxy: reshapes the upstream GLOBAL_QUOTE payload into a QuoteSnapshot.

Market cap is estimated as ``price * share_count / 1e12`` (trillions USD),
formatted to exactly two decimals, and always computed from the same
upstream price that the snapshot returns.
"""

import math
from typing import Any

from captracker.exceptions import ParseFailure, UpstreamShapeMismatch, UpstreamThrottled
from captracker.logging import get_logger
from captracker.models import QuoteSnapshot
from captracker.sources.quote_client import THROTTLE_KEYS, AlphaVantageClient

logger = get_logger(__name__)

PRICE_KEY = "05. price"
PREVIOUS_CLOSE_KEY = "08. previous close"
CHANGE_KEY = "09. change"
CHANGE_PERCENT_KEY = "10. change percent"


def compute_market_cap(price: float, share_count: float) -> str:
    """Market cap in trillions USD as a fixed 2-decimal string."""
    return f"{price * share_count / 1e12:.2f}"


def parse_number(quote: dict[str, Any], key: str) -> float:
    """Parse a numeric-string field; a trailing % is stripped first.

    NaN and infinities are rejected so they never reach the JSON response.
    """
    raw = quote.get(key)
    if raw is None:
        raise ParseFailure(f"missing field {key!r}")
    try:
        value = float(str(raw).strip().rstrip("%"))
    except ValueError as e:
        raise ParseFailure(f"field {key!r} is not a number: {raw!r}") from e
    if not math.isfinite(value):
        raise ParseFailure(f"field {key!r} is not finite: {raw!r}")
    return value


def parse_global_quote(payload: Any, share_count: float) -> QuoteSnapshot:
    """Validate an upstream payload and build a QuoteSnapshot.

    Raises:
        UpstreamThrottled: payload carries a rate-limit or bad-key notice.
        UpstreamShapeMismatch: the "Global Quote" object is absent or empty.
        ParseFailure: a required numeric field is missing or malformed.
    """
    if not isinstance(payload, dict):
        raise UpstreamShapeMismatch("upstream payload is not an object")

    for key in THROTTLE_KEYS:
        if key in payload:
            raise UpstreamThrottled(f"API rate limit or invalid key: {payload[key]}")

    quote = payload.get("Global Quote")
    if not quote or not isinstance(quote, dict):
        raise UpstreamShapeMismatch("Invalid API response: missing 'Global Quote'")

    price = parse_number(quote, PRICE_KEY)
    if not math.isfinite(price * share_count):
        raise ParseFailure(f"market cap overflows for price {price!r}")
    change = parse_number(quote, CHANGE_KEY)
    change_percent = parse_number(quote, CHANGE_PERCENT_KEY)

    previous_close = None
    if PREVIOUS_CLOSE_KEY in quote:
        previous_close = parse_number(quote, PREVIOUS_CLOSE_KEY)

    return QuoteSnapshot(
        price=price,
        previous_close=previous_close,
        change=change,
        change_percent=change_percent,
        market_cap=compute_market_cap(price, share_count),
    )


class QuoteProxy:
    """Produces fresh QuoteSnapshots from the upstream client.

    Errors propagate to the caller; the HTTP route and the view poller decide
    how to surface them.
    """

    def __init__(self, client: AlphaVantageClient, share_count: float = 24.4e9) -> None:
        self._client = client
        self._share_count = share_count

    @property
    def share_count(self) -> float:
        return self._share_count

    def _parse(self, payload: Any) -> QuoteSnapshot:
        return parse_global_quote(payload, self._share_count)

    async def get_snapshot(self) -> QuoteSnapshot:
        # Validating before the client caches keeps bad payloads out of the cache
        payload = await self._client.fetch_global_quote(validate=self._parse)
        snapshot = self._parse(payload)
        logger.debug(
            "quote_snapshot_built",
            symbol=self._client.symbol,
            price=snapshot.price,
            market_cap=snapshot.market_cap,
        )
        return snapshot
