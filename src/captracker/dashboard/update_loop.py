"""Push loop: re-render the comparison panel whenever a poll completes.

Renders the comparison partial and broadcasts it as an HTMX OOB-swap
fragment to every connected WebSocket client. Browsers keep showing the
last Ready figures until a new render replaces them.
"""

from __future__ import annotations

import asyncio

from fastapi import FastAPI
from jinja2 import Environment

from captracker.logging import get_logger
from captracker.models import ViewModel

log = get_logger(__name__)

PANEL_ID = "comparison-panel"


def render_comparison_panel(env: Environment, model: ViewModel) -> str:
    """Render the comparison partial wrapped in an OOB swap div."""
    html = env.get_template("partials/comparison.html").render(model=model)
    return f'<div id="{PANEL_ID}" hx-swap-oob="true">{html}</div>'


async def comparison_update_loop(app: FastAPI) -> None:
    """Broadcast the comparison panel after every view change.

    Runs until cancelled. Each iteration waits up to ``update_interval``
    seconds for the view to change, then renders and broadcasts if the view
    version moved and at least one client is connected.

    Args:
        app: The FastAPI application with state containing hub, templates,
             view and update_interval.
    """
    update_interval = getattr(app.state, "update_interval", 1.0)
    last_version = -1

    log.info("comparison_update_loop_started", interval=update_interval)

    while True:
        try:
            view = app.state.view
            await view.wait_for_change(timeout=update_interval)

            hub = app.state.hub
            if view.version == last_version or not hub.connections:
                continue
            last_version = view.version

            model = view.render_state()
            payload = render_comparison_panel(app.state.templates.env, model)
            await hub.broadcast(payload)
            log.debug(
                "comparison_broadcast",
                state=model.state.value,
                clients=len(hub.connections),
            )

        except asyncio.CancelledError:
            log.info("comparison_update_loop_cancelled")
            break
        except Exception:
            log.warning("comparison_update_loop_error", exc_info=True)
            await asyncio.sleep(1)
