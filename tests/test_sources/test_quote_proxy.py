"""Tests for the Quote Proxy payload parsing and snapshot production.

No test makes a real API call: the client is either mocked or has its
blocking fetch patched.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from captracker.config import QuoteSettings
from captracker.exceptions import ParseFailure, UpstreamShapeMismatch, UpstreamThrottled
from captracker.sources.quote_client import AlphaVantageClient
from captracker.sources.quote_proxy import (
    QuoteProxy,
    compute_market_cap,
    parse_global_quote,
    parse_number,
)

SHARES = 24.4e9


def _payload(**overrides: str) -> dict:
    quote = {
        "05. price": "135.5800",
        "08. previous close": "131.3100",
        "09. change": "4.2700",
        "10. change percent": "3.25%",
    }
    quote.update(overrides)
    return {"Global Quote": quote}


# ---------------------------------------------------------------------------
# Market cap
# ---------------------------------------------------------------------------


class TestComputeMarketCap:
    @pytest.mark.parametrize("price", [100.0, 135.58, 172.35, 0.5, 1234.567])
    def test_matches_rounded_estimate(self, price: float) -> None:
        expected = f"{round(price * 24.4e9 / 1e12, 2):.2f}"
        assert compute_market_cap(price, SHARES) == expected

    def test_always_two_decimals(self) -> None:
        assert compute_market_cap(100.0, SHARES) == "2.44"
        assert compute_market_cap(0.0, SHARES) == "0.00"

    def test_uses_configured_share_count(self) -> None:
        assert compute_market_cap(100.0, 10e9) == "1.00"


# ---------------------------------------------------------------------------
# Field parsing
# ---------------------------------------------------------------------------


class TestParseNumber:
    def test_strips_percent_suffix(self) -> None:
        assert parse_number({"p": "3.25%"}, "p") == 3.25

    def test_negative_percent(self) -> None:
        assert parse_number({"p": "-1.10%"}, "p") == -1.10

    def test_plain_number(self) -> None:
        assert parse_number({"p": "135.5800"}, "p") == 135.58

    def test_missing_key_raises(self) -> None:
        with pytest.raises(ParseFailure):
            parse_number({}, "p")

    def test_garbage_raises(self) -> None:
        with pytest.raises(ParseFailure):
            parse_number({"p": "n/a"}, "p")

    @pytest.mark.parametrize("raw", ["NaN", "inf", "-Infinity", "1e400"])
    def test_non_finite_raises(self, raw: str) -> None:
        with pytest.raises(ParseFailure):
            parse_number({"p": raw}, "p")


class TestParseGlobalQuote:
    def test_builds_snapshot(self) -> None:
        snap = parse_global_quote(_payload(), SHARES)
        assert snap.price == 135.58
        assert snap.previous_close == 131.31
        assert snap.change == 4.27
        assert snap.change_percent == 3.25
        assert snap.market_cap == "3.31"

    def test_negative_change_percent(self) -> None:
        snap = parse_global_quote(_payload(**{"10. change percent": "-1.10%"}), SHARES)
        assert snap.change_percent == -1.10
        assert snap.direction == "down"

    def test_previous_close_optional(self) -> None:
        payload = _payload()
        del payload["Global Quote"]["08. previous close"]
        snap = parse_global_quote(payload, SHARES)
        assert snap.previous_close is None
        assert "previousClose" not in snap.to_dict()

    def test_timestamp_is_iso_utc(self) -> None:
        snap = parse_global_quote(_payload(), SHARES)
        assert snap.timestamp.endswith("Z")
        assert "T" in snap.timestamp

    @pytest.mark.parametrize("key", ["Information", "Note", "Error Message"])
    def test_throttle_notice_raises(self, key: str) -> None:
        payload = _payload()
        payload[key] = "Thank you for using Alpha Vantage!"
        with pytest.raises(UpstreamThrottled):
            parse_global_quote(payload, SHARES)

    def test_missing_global_quote_raises(self) -> None:
        with pytest.raises(UpstreamShapeMismatch):
            parse_global_quote({"Meta Data": {}}, SHARES)

    def test_empty_global_quote_raises(self) -> None:
        with pytest.raises(UpstreamShapeMismatch):
            parse_global_quote({"Global Quote": {}}, SHARES)

    def test_non_object_payload_raises(self) -> None:
        with pytest.raises(UpstreamShapeMismatch):
            parse_global_quote(["not", "a", "dict"], SHARES)

    def test_bad_price_raises_parse_failure(self) -> None:
        with pytest.raises(ParseFailure):
            parse_global_quote(_payload(**{"05. price": ""}), SHARES)

    def test_market_cap_overflow_raises_parse_failure(self) -> None:
        with pytest.raises(ParseFailure):
            parse_global_quote(_payload(**{"05. price": "1e300"}), SHARES)

    def test_to_dict_uses_camel_case(self) -> None:
        data = parse_global_quote(_payload(), SHARES).to_dict()
        assert set(data) == {
            "price", "previousClose", "change", "changePercent", "marketCap", "timestamp",
        }
        assert data["marketCap"] == "3.31"


# ---------------------------------------------------------------------------
# QuoteProxy
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.symbol = "NVDA"
    client.fetch_global_quote = AsyncMock(return_value=_payload())
    return client


class TestQuoteProxy:
    @pytest.mark.asyncio
    async def test_get_snapshot(self, mock_client: MagicMock) -> None:
        proxy = QuoteProxy(mock_client, share_count=SHARES)
        snap = await proxy.get_snapshot()
        assert snap.market_cap == "3.31"
        mock_client.fetch_global_quote.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_each_call_produces_fresh_snapshot(self, mock_client: MagicMock) -> None:
        proxy = QuoteProxy(mock_client, share_count=SHARES)
        first = await proxy.get_snapshot()
        second = await proxy.get_snapshot()
        assert first is not second

    @pytest.mark.asyncio
    async def test_throttled_propagates(self, mock_client: MagicMock) -> None:
        mock_client.fetch_global_quote = AsyncMock(return_value={"Information": "rate limited"})
        proxy = QuoteProxy(mock_client, share_count=SHARES)
        with pytest.raises(UpstreamThrottled):
            await proxy.get_snapshot()

    @pytest.mark.asyncio
    async def test_payload_validated_before_client_caches(self, mock_client: MagicMock) -> None:
        proxy = QuoteProxy(mock_client, share_count=SHARES)
        await proxy.get_snapshot()
        validate = mock_client.fetch_global_quote.call_args.kwargs["validate"]
        with pytest.raises(ParseFailure):
            validate(_payload(**{"05. price": ""}))


class TestQuoteProxyCaching:
    """Real client, blocking fetch patched: bad payloads never poison the cache."""

    @pytest.fixture
    def client(self) -> AlphaVantageClient:
        return AlphaVantageClient(
            QuoteSettings(api_key="k", upstream_cache_seconds=3600)  # type: ignore[arg-type]
        )

    @pytest.mark.asyncio
    async def test_malformed_quote_refetched(self, client: AlphaVantageClient) -> None:
        proxy = QuoteProxy(client, share_count=SHARES)
        with patch.object(client, "_fetch", return_value=_payload(**{"05. price": ""})) as mock_fetch:
            for _ in range(2):
                with pytest.raises(ParseFailure):
                    await proxy.get_snapshot()
        assert mock_fetch.call_count == 2
        assert client._cache is None

    @pytest.mark.asyncio
    async def test_throttle_notice_with_quote_refetched(self, client: AlphaVantageClient) -> None:
        payload = _payload()
        payload["Information"] = "rate limit"
        proxy = QuoteProxy(client, share_count=SHARES)
        with patch.object(client, "_fetch", return_value=payload) as mock_fetch:
            for _ in range(2):
                with pytest.raises(UpstreamThrottled):
                    await proxy.get_snapshot()
        assert mock_fetch.call_count == 2
        assert client._cache is None

    @pytest.mark.asyncio
    async def test_recovers_after_bad_payload(self, client: AlphaVantageClient) -> None:
        proxy = QuoteProxy(client, share_count=SHARES)
        with patch.object(
            client, "_fetch", side_effect=[_payload(**{"05. price": "NaN"}), _payload()]
        ) as mock_fetch:
            with pytest.raises(ParseFailure):
                await proxy.get_snapshot()
            snap = await proxy.get_snapshot()
            await proxy.get_snapshot()
        assert snap.market_cap == "3.31"
        assert mock_fetch.call_count == 2
