"""Entry point for the market cap tracker.

Wires the components together and serves the FastAPI app with uvicorn.
The comparison view's pollers and the WebSocket push loop run on the same
event loop, started and stopped by FastAPI's lifespan context manager.

Component wiring order (in build_components):
1. AlphaVantageClient (upstream quote API with in-memory cache)
2. QuoteProxy (GLOBAL_QUOTE -> QuoteSnapshot)
3. CoinGeckoClient (global crypto aggregate)
4. EventRecorder (logging sink, or no-op when analytics is disabled)
5. ComparisonView (one poller per source)
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from captracker.analytics import EventRecorder, LoggingEventRecorder, NullEventRecorder
from captracker.config import AppSettings
from captracker.dashboard.app import create_dashboard_app
from captracker.logging import get_logger, setup_logging
from captracker.sources.crypto_client import CoinGeckoClient
from captracker.sources.quote_client import AlphaVantageClient
from captracker.sources.quote_proxy import QuoteProxy
from captracker.view.view import ComparisonView


def build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all tracker components from settings.

    Returns:
        Dict mapping component names to instances. Nothing is started yet.
    """
    logger = get_logger("captracker.main")

    if not settings.quote.api_key.get_secret_value():
        logger.warning(
            "no_quote_api_key_configured",
            note="Set ALPHA_VANTAGE_API_KEY; the NVIDIA source will report errors without it.",
        )

    quote_client = AlphaVantageClient(settings.quote)
    quote_proxy = QuoteProxy(quote_client, share_count=settings.quote.share_count)
    crypto_client = CoinGeckoClient(settings.crypto)

    recorder: EventRecorder
    if settings.analytics.enabled:
        recorder = LoggingEventRecorder(settings.analytics.measurement_id)
    else:
        recorder = NullEventRecorder()

    view = ComparisonView(
        quote_proxy=quote_proxy,
        crypto_client=crypto_client,
        poll_interval=settings.view.poll_interval,
        recorder=recorder,
    )

    return {
        "quote_client": quote_client,
        "quote_proxy": quote_proxy,
        "crypto_client": crypto_client,
        "recorder": recorder,
        "view": view,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the view's pollers and the push loop; stop both on shutdown."""
    from captracker.dashboard.update_loop import comparison_update_loop

    logger = get_logger("captracker.main")
    settings: AppSettings = app.state.settings
    components = app.state.components

    app.state.quote_proxy = components["quote_proxy"]
    app.state.recorder = components["recorder"]
    app.state.view = components["view"]
    app.state.update_interval = settings.view.update_interval

    await components["view"].start()
    update_task = asyncio.create_task(comparison_update_loop(app))

    logger.info(
        "lifespan_started",
        symbol=settings.quote.symbol,
        poll_interval=settings.view.poll_interval,
    )

    yield

    update_task.cancel()
    try:
        await update_task
    except asyncio.CancelledError:
        pass

    await components["view"].stop()

    logger.info("market_cap_tracker_stopped")


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build a fully wired application (components attached, not started)."""
    settings = settings or AppSettings()
    app = create_dashboard_app(lifespan=lifespan)
    app.state.settings = settings
    app.state.components = build_components(settings)
    return app


async def run() -> None:
    """Run the tracker web server."""
    settings = AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("captracker.main")

    app = create_app(settings)

    logger.info(
        "starting_server",
        host=settings.dashboard.host,
        port=settings.dashboard.port,
    )

    config = uvicorn.Config(
        app,
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
