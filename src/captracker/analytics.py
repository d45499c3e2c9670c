"""Analytics event recording.

Components receive an EventRecorder instead of reaching for a global hook.
The page relays browser-side interactions (link clicks, tooltip views,
donation-address copies, privacy-notice choices) to POST /actions/events,
which forwards them to the same recorder.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from captracker.logging import get_logger

logger = get_logger(__name__)

PAGE_VIEW = "page_view"
DATA_LOAD = "data_load"
CLICK = "click"
ERROR = "error"
INFO_TOOLTIP_VIEW = "info_tooltip_view"
DONATION_ADDRESS_COPY = "donation_address_copy"
PRIVACY_NOTICE_ACCEPT = "privacy_notice_accept"
PRIVACY_NOTICE_DISMISS = "privacy_notice_dismiss"

# Events the browser may relay; server-side events are not accepted from clients
CLIENT_EVENTS = frozenset({
    CLICK,
    INFO_TOOLTIP_VIEW,
    DONATION_ADDRESS_COPY,
    PRIVACY_NOTICE_ACCEPT,
    PRIVACY_NOTICE_DISMISS,
})


class EventRecorder(ABC):
    """Sink for named analytics events."""

    @abstractmethod
    def record(self, name: str, params: dict[str, Any] | None = None) -> None:
        """Record one event. Must never raise into the caller."""


class NullEventRecorder(EventRecorder):
    """Discards every event. Used headless and in tests."""

    def record(self, name: str, params: dict[str, Any] | None = None) -> None:
        return None


class LoggingEventRecorder(EventRecorder):
    """Writes each event as a structured log line."""

    def __init__(self, measurement_id: str | None = None) -> None:
        self._measurement_id = measurement_id

    def record(self, name: str, params: dict[str, Any] | None = None) -> None:
        logger.info(
            "analytics_event",
            name=name,
            measurement_id=self._measurement_id,
            params=params or {},
        )


def track_page_view(recorder: EventRecorder, title: str, location: str) -> None:
    recorder.record(PAGE_VIEW, {"page_title": title, "page_location": location})


def track_link_click(recorder: EventRecorder, link_name: str, url: str) -> None:
    recorder.record(CLICK, {
        "event_category": "engagement",
        "event_label": link_name,
        "link_url": url,
    })


def track_data_load(recorder: EventRecorder, data_type: str, success: bool) -> None:
    recorder.record(DATA_LOAD, {
        "event_category": "api",
        "event_label": data_type,
        "success": success,
    })


def track_error(recorder: EventRecorder, error_type: str, message: str) -> None:
    recorder.record(ERROR, {
        "event_category": "technical",
        "event_label": f"{error_type}: {message}",
    })
