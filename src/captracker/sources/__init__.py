"""Data sources -- the NVIDIA Quote Proxy and the CoinGecko global aggregate."""

from captracker.sources.crypto_client import CoinGeckoClient
from captracker.sources.quote_client import AlphaVantageClient
from captracker.sources.quote_proxy import QuoteProxy

__all__ = ["AlphaVantageClient", "CoinGeckoClient", "QuoteProxy"]
