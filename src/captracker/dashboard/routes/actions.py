"""POST endpoint relaying browser-side interactions to the event recorder."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from captracker.analytics import CLIENT_EVENTS
from captracker.logging import get_logger

log = get_logger(__name__)

router = APIRouter()


class ClientEvent(BaseModel):
    """One interaction reported by the page's script."""

    name: str
    params: dict[str, Any] = Field(default_factory=dict)


@router.post("/events")
async def record_event(event: ClientEvent, request: Request) -> JSONResponse:
    """Record a client interaction (link click, tooltip view, copy, privacy choice)."""
    if event.name not in CLIENT_EVENTS:
        log.warning("client_event_rejected", name=event.name)
        return JSONResponse(
            content={"error": f"Unknown event: {event.name}"},
            status_code=400,
        )

    recorder = request.app.state.recorder
    recorder.record(event.name, event.params)
    return JSONResponse(content={"status": "recorded"})
