"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Every group reads .env itself so secrets there reach nested settings too
_DOTENV = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class QuoteSettings(BaseSettings):
    """Upstream stock-quote API (Alpha Vantage GLOBAL_QUOTE) settings."""

    model_config = SettingsConfigDict(env_prefix="QUOTE_", **_DOTENV, populate_by_name=True)

    api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias="ALPHA_VANTAGE_API_KEY",
    )
    symbol: str = "NVDA"
    base_url: str = "https://www.alphavantage.co/query"
    # Fixed estimate of shares outstanding; drifts as buybacks/issuance change the real count
    share_count: float = 24.4e9
    upstream_cache_seconds: int = 3600
    timeout_seconds: float = 10.0


class CacheSettings(BaseSettings):
    """Cache-Control directive emitted by the Quote Proxy.

    Deployments have used both 300/600 and 3600/7200; 3600/7200 is the default.
    """

    model_config = SettingsConfigDict(env_prefix="CACHE_", **_DOTENV)

    s_maxage: int = 3600
    stale_while_revalidate: int = 7200

    def header_value(self) -> str:
        return (
            f"public, s-maxage={self.s_maxage}, "
            f"stale-while-revalidate={self.stale_while_revalidate}"
        )


class CryptoSettings(BaseSettings):
    """CoinGecko global market aggregate settings."""

    model_config = SettingsConfigDict(env_prefix="COINGECKO_", **_DOTENV)

    global_url: str = "https://api.coingecko.com/api/v3/global"
    api_key: str | None = None  # optional demo key for higher rate limits
    timeout_seconds: float = 10.0


class ViewSettings(BaseSettings):
    """Comparison view polling and push configuration."""

    model_config = SettingsConfigDict(env_prefix="VIEW_", **_DOTENV)

    poll_interval: float = 3600.0  # seconds between polls of each source
    update_interval: float = 1.0  # seconds between WebSocket change checks


class AnalyticsSettings(BaseSettings):
    """Event recording configuration."""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_", **_DOTENV)

    enabled: bool = True
    measurement_id: str | None = None  # gtag ID embedded in the page when set


class DashboardSettings(BaseSettings):
    """Web server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_", **_DOTENV)

    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"
    quote: QuoteSettings = Field(default_factory=QuoteSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    crypto: CryptoSettings = Field(default_factory=CryptoSettings)
    view: ViewSettings = Field(default_factory=ViewSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
