"""Cancellable periodic poller for one data source.

Each poller owns a background task that fetches immediately on start and
then once per interval. It keeps the latest snapshot and the latest error:
a success replaces the snapshot and clears the error, a failure records
the error but keeps the previous snapshot around.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from captracker.analytics import EventRecorder, NullEventRecorder, track_data_load
from captracker.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SourcePoller(Generic[T]):
    """Polls ``fetch`` every ``interval`` seconds until stopped.

    Args:
        name: Source name used in logs and analytics ("nvidia", "crypto").
        fetch: Coroutine function producing a fresh immutable snapshot.
        interval: Seconds between polls.
        recorder: Analytics sink; one data_load event per poll outcome.
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[], Awaitable[T]],
        interval: float = 3600.0,
        recorder: EventRecorder | None = None,
    ) -> None:
        self.name = name
        self._fetch = fetch
        self._interval = interval
        self._recorder = recorder or NullEventRecorder()
        self._data: T | None = None
        self._error: Exception | None = None
        self._updated_at: float | None = None
        self._listeners: list[Callable[[], None]] = []
        self._running = False
        self._stopped = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]

    @property
    def data(self) -> T | None:
        """Latest successful snapshot, or None before the first success."""
        return self._data

    @property
    def error(self) -> Exception | None:
        """Error from the most recent poll, or None if it succeeded."""
        return self._error

    @property
    def updated_at(self) -> float | None:
        return self._updated_at

    @property
    def is_running(self) -> bool:
        return self._running

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Call ``callback`` after every poll that changes data or error."""
        self._listeners.append(callback)

    async def start(self) -> None:
        """Begin polling in the background."""
        if self._running:
            logger.warning("source_poller_already_running", source=self.name)
            return
        self._running = True
        self._stopped = False
        self._task = asyncio.create_task(self._poll_loop(), name=f"{self.name}-poller")
        logger.info("source_poller_started", source=self.name, interval=self._interval)

    async def stop(self) -> None:
        """Cancel the background task, including any fetch in flight.

        Safe to call multiple times. After stop() no late result touches state.
        """
        self._running = False
        self._stopped = True
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("source_poller_stopped", source=self.name)

    async def refresh(self) -> None:
        """Poll once now, outside the regular schedule."""
        await self._poll_once()

    async def _poll_loop(self) -> None:
        while self._running:
            await self._poll_once()
            if self._running:
                await asyncio.sleep(self._interval)

    async def _poll_once(self) -> None:
        try:
            result = await self._fetch()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if self._stopped:
                return
            self._error = e
            logger.warning(
                "source_poll_failed",
                source=self.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            track_data_load(self._recorder, self.name, False)
            self._notify()
            return

        if self._stopped:
            logger.debug("source_poll_discarded", source=self.name)
            return

        self._data = result
        self._error = None
        self._updated_at = time.time()
        logger.debug("source_poll_succeeded", source=self.name)
        track_data_load(self._recorder, self.name, True)
        self._notify()

    def _notify(self) -> None:
        for callback in self._listeners:
            try:
                callback()
            except Exception:
                logger.warning("source_listener_error", source=self.name, exc_info=True)
