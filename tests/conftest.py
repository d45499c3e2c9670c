"""Shared test fixtures for the market cap tracker."""

import copy

import pytest

from captracker.config import AppSettings, CacheSettings, CryptoSettings, QuoteSettings, ViewSettings


# ---------------------------------------------------------------------------
# Sample upstream payloads
# ---------------------------------------------------------------------------

GLOBAL_QUOTE_PAYLOAD = {
    "Global Quote": {
        "01. symbol": "NVDA",
        "02. open": "134.1000",
        "03. high": "136.2000",
        "04. low": "133.5000",
        "05. price": "135.5800",
        "06. volume": "187000000",
        "07. latest trading day": "2025-01-10",
        "08. previous close": "131.3100",
        "09. change": "4.2700",
        "10. change percent": "3.25%",
    }
}

RATE_LIMIT_PAYLOAD = {
    "Information": (
        "We have detected your API key as demo and our standard API rate limit "
        "is 25 requests per day."
    )
}

COINGECKO_GLOBAL_PAYLOAD = {
    "data": {
        "active_cryptocurrencies": 17234,
        "markets": 1205,
        "total_market_cap": {"usd": 3.5e12, "eur": 3.2e12},
        "market_cap_percentage": {"btc": 56.42, "eth": 12.1},
        "updated_at": 1736500000,
    }
}


@pytest.fixture
def global_quote_payload() -> dict:
    return copy.deepcopy(GLOBAL_QUOTE_PAYLOAD)


@pytest.fixture
def rate_limit_payload() -> dict:
    return copy.deepcopy(RATE_LIMIT_PAYLOAD)


@pytest.fixture
def coingecko_payload() -> dict:
    return copy.deepcopy(COINGECKO_GLOBAL_PAYLOAD)


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (dummy API key, short intervals)."""
    return AppSettings(
        log_level="DEBUG",
        quote=QuoteSettings(api_key="test-api-key"),  # type: ignore[arg-type]
        cache=CacheSettings(),
        crypto=CryptoSettings(),
        view=ViewSettings(poll_interval=60.0, update_interval=0.01),
    )
