"""Tests for settings defaults and environment loading."""

import os
from unittest.mock import patch

from captracker.config import AppSettings, CacheSettings, QuoteSettings, ViewSettings


class TestDefaults:
    def test_quote_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = QuoteSettings()
        assert settings.symbol == "NVDA"
        assert settings.share_count == 24.4e9
        assert settings.upstream_cache_seconds == 3600
        assert settings.api_key.get_secret_value() == ""

    def test_cache_header(self) -> None:
        assert CacheSettings().header_value() == (
            "public, s-maxage=3600, stale-while-revalidate=7200"
        )

    def test_view_polls_hourly(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert ViewSettings().poll_interval == 3600.0


class TestEnvironment:
    def test_api_key_from_alpha_vantage_variable(self) -> None:
        with patch.dict(os.environ, {"ALPHA_VANTAGE_API_KEY": "av-123"}, clear=True):
            settings = QuoteSettings()
        assert settings.api_key.get_secret_value() == "av-123"

    def test_api_key_is_secret(self) -> None:
        settings = QuoteSettings(api_key="av-123")  # type: ignore[arg-type]
        assert "av-123" not in repr(settings)

    def test_share_count_override(self) -> None:
        with patch.dict(os.environ, {"QUOTE_SHARE_COUNT": "24.3e9"}, clear=True):
            assert QuoteSettings().share_count == 24.3e9

    def test_cache_durations_override(self) -> None:
        env = {"CACHE_S_MAXAGE": "300", "CACHE_STALE_WHILE_REVALIDATE": "600"}
        with patch.dict(os.environ, env, clear=True):
            assert CacheSettings().header_value() == (
                "public, s-maxage=300, stale-while-revalidate=600"
            )

    def test_measurement_id(self) -> None:
        with patch.dict(os.environ, {"ANALYTICS_MEASUREMENT_ID": "G-ABC"}, clear=True):
            assert AppSettings(_env_file=None).analytics.measurement_id == "G-ABC"
