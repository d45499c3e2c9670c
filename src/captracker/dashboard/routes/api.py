"""JSON API endpoints: the NVIDIA Quote Proxy and the comparison state."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from captracker.logging import get_logger

log = get_logger(__name__)

router = APIRouter()

GENERIC_QUOTE_ERROR = "Failed to fetch NVIDIA data"


@router.get("/nvidia")
async def get_nvidia_quote(request: Request) -> JSONResponse:
    """Quote Proxy: latest NVIDIA quote with a market-cap estimate.

    Any failure becomes a 500 with a generic body; the reason is only logged.
    """
    quote_proxy = request.app.state.quote_proxy
    settings = request.app.state.settings

    try:
        snapshot = await quote_proxy.get_snapshot()
    except Exception as e:
        log.error(
            "nvidia_quote_failed",
            error_type=type(e).__name__,
            error=str(e),
        )
        return JSONResponse(content={"error": GENERIC_QUOTE_ERROR}, status_code=500)

    return JSONResponse(
        content=snapshot.to_dict(),
        headers={"Cache-Control": settings.cache.header_value()},
    )


@router.get("/comparison")
async def get_comparison(request: Request) -> JSONResponse:
    """Current view state: loading, error (with detail lines) or ready figures."""
    view = request.app.state.view
    return JSONResponse(content=view.render_state().to_dict())
