"""Comparison view -- combines the two pollers' latest values at render time."""

from __future__ import annotations

import asyncio

from captracker.analytics import EventRecorder, NullEventRecorder
from captracker.exceptions import DerivationError
from captracker.logging import get_logger
from captracker.models import CryptoAggregate, QuoteSnapshot, ViewModel, ViewState
from captracker.sources.crypto_client import CoinGeckoClient
from captracker.sources.quote_proxy import QuoteProxy
from captracker.view.comparison import derive_comparison
from captracker.view.poller import SourcePoller

logger = get_logger(__name__)

NVIDIA_ERROR = "NVIDIA API Error"
CRYPTO_ERROR = "Crypto API Error"
DERIVATION_ERROR = "Comparison unavailable"


class ComparisonView:
    """Owns one poller per source and renders Loading, Error or Ready.

    Error wins over Loading: if either source's latest poll failed, the
    comparison is withheld even when the other source is fine. Once both
    sources have data the view stays Ready across polls until one fails.

    Lifecycle:
        view = ComparisonView(quote_proxy, crypto_client)
        await view.start()
        model = view.render_state()
        await view.stop()
    """

    def __init__(
        self,
        quote_proxy: QuoteProxy,
        crypto_client: CoinGeckoClient,
        poll_interval: float = 3600.0,
        recorder: EventRecorder | None = None,
    ) -> None:
        self._recorder = recorder or NullEventRecorder()
        self.nvidia: SourcePoller[QuoteSnapshot] = SourcePoller(
            "nvidia", quote_proxy.get_snapshot, poll_interval, self._recorder
        )
        self.crypto: SourcePoller[CryptoAggregate] = SourcePoller(
            "crypto", crypto_client.fetch_global, poll_interval, self._recorder
        )
        self._version = 0
        self._changed = asyncio.Event()
        self.nvidia.add_listener(self._on_source_change)
        self.crypto.add_listener(self._on_source_change)

    @property
    def recorder(self) -> EventRecorder:
        return self._recorder

    @property
    def version(self) -> int:
        """Bumped on every poll outcome. Used for push change detection."""
        return self._version

    async def start(self) -> None:
        await self.nvidia.start()
        await self.crypto.start()

    async def stop(self) -> None:
        await asyncio.gather(self.nvidia.stop(), self.crypto.stop())

    async def __aenter__(self) -> ComparisonView:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def wait_for_change(self, timeout: float | None = None) -> bool:
        """Wait until a poll completes. Returns False on timeout."""
        try:
            await asyncio.wait_for(self._changed.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        self._changed.clear()
        return True

    def _on_source_change(self) -> None:
        self._version += 1
        self._changed.set()

    def render_state(self) -> ViewModel:
        """Build the model for the current render."""
        errors: list[str] = []
        if self.nvidia.error is not None:
            errors.append(NVIDIA_ERROR)
        if self.crypto.error is not None:
            errors.append(CRYPTO_ERROR)
        if errors:
            return ViewModel(state=ViewState.ERROR, errors=tuple(errors))

        nvidia = self.nvidia.data
        crypto = self.crypto.data
        if nvidia is None or crypto is None:
            return ViewModel(state=ViewState.LOADING)

        try:
            comparison = derive_comparison(nvidia, crypto)
        except DerivationError as e:
            logger.warning("comparison_derivation_failed", error=str(e))
            return ViewModel(state=ViewState.ERROR, errors=(DERIVATION_ERROR,))

        return ViewModel(
            state=ViewState.READY,
            nvidia=nvidia,
            crypto=crypto,
            comparison=comparison,
        )
