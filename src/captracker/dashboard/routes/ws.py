"""WebSocket hub pushing comparison-panel fragments to open pages."""

from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from captracker.dashboard.update_loop import render_comparison_panel
from captracker.logging import get_logger

log = get_logger(__name__)

router = APIRouter()


class DashboardHub:
    """Tracks connected pages and fans each rendered panel out to all of them."""

    def __init__(self) -> None:
        self.connections: list[WebSocket] = []

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        self.connections.append(ws)
        log.info("page_ws_connected", total=len(self.connections))

    def disconnect(self, ws: WebSocket) -> None:
        if ws in self.connections:
            self.connections.remove(ws)
        log.info("page_ws_disconnected", total=len(self.connections))

    async def send(self, ws: WebSocket, html: str) -> None:
        """Send to one page; a failed send drops that connection."""
        try:
            await ws.send_text(html)
        except Exception:
            self.disconnect(ws)
            log.warning("page_ws_send_error", remaining=len(self.connections))

    async def broadcast(self, html: str) -> None:
        """Send an HTML fragment to every connected page."""
        for ws in self.connections.copy():
            await self.send(ws, html)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Push the current panel on connect, then every update the loop broadcasts.

    A page that loaded while a poll was in flight catches up immediately
    instead of waiting for the next change.
    """
    ws_hub: DashboardHub = websocket.app.state.hub
    await ws_hub.connect(websocket)

    view = websocket.app.state.view
    env = websocket.app.state.templates.env
    await ws_hub.send(websocket, render_comparison_panel(env, view.render_state()))

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        ws_hub.disconnect(websocket)
