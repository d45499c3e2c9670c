"""FastAPI application factory with Jinja2 templates and WebSocket hub."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from captracker.dashboard.routes import actions, api, pages, ws
from captracker.dashboard.routes.ws import DashboardHub

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _fixed(value: Any, digits: int = 2) -> str:
    """Format a number with a fixed number of decimals (e.g. 3.5 -> '3.50')."""
    if value is None:
        return "N/A"
    return f"{float(value):.{digits}f}"


def _signed(value: Any) -> str:
    """'+' prefix for non-negative numbers, '' otherwise (the minus is already there)."""
    if value is None:
        return ""
    return "+" if float(value) >= 0 else ""


def _sign(value: Any) -> str:
    """Explicit sign for amounts shown after a currency symbol (e.g. -$0.70T)."""
    if value is None:
        return ""
    return "+" if float(value) >= 0 else "-"


def _thousands(value: Any) -> str:
    """Group digits with commas (e.g. 17234 -> '17,234')."""
    if value is None:
        return "N/A"
    return f"{int(value):,}"


def create_dashboard_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to start and stop the comparison view's pollers.

    Returns:
        Configured FastAPI application with templates, WebSocket hub, and routes.
        Route handlers expect ``quote_proxy``, ``view``, ``recorder`` and
        ``settings`` on app.state; the lifespan (or a test) provides them.
    """
    app = FastAPI(
        title="Market Cap Tracker",
        lifespan=lifespan,
    )

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["fixed"] = _fixed
    templates.env.filters["sign"] = _sign
    templates.env.filters["signed"] = _signed
    templates.env.filters["thousands"] = _thousands
    app.state.templates = templates

    app.state.hub = DashboardHub()

    app.include_router(pages.router)
    app.include_router(api.router, prefix="/api")
    app.include_router(actions.router, prefix="/actions")
    app.include_router(ws.router)

    return app
