"""Page routes serving the comparison page."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from captracker import content
from captracker.analytics import track_page_view
from captracker.logging import get_logger

log = get_logger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def comparison_page(request: Request) -> HTMLResponse:
    """Main page. Renders the view's current state plus the static sections."""
    templates: Jinja2Templates = request.app.state.templates
    view = request.app.state.view
    settings = request.app.state.settings

    model = view.render_state()
    track_page_view(view.recorder, content.PAGE_TITLE, str(request.url))

    context = {
        "model": model,
        "content": content,
        "measurement_id": settings.analytics.measurement_id,
    }
    return templates.TemplateResponse(request, "index.html", context)


@router.get("/healthz")
async def healthz() -> JSONResponse:
    """Liveness probe."""
    return JSONResponse(content={"status": "ok"})
