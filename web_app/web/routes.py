"""Redirect and health routes."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from shortlinks import __version__
from shortlinks.common.timeouts import with_timeout
from shortlinks.errors import StoreUnavailable
from ..api.schemas import HealthResponse

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse, summary="Health check")
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    store = request.app.state.store
    config = request.app.state.config

    try:
        healthy = await with_timeout(store.health_check(), config.store_timeout_seconds)
    except StoreUnavailable:
        healthy = False

    health = HealthResponse(
        ok=healthy,
        version=__version__,
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
        timestamp=datetime.now(timezone.utc),
        store="healthy" if healthy else "unhealthy",
    )

    return JSONResponse(
        content=health.model_dump(mode="json"),
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        headers={"Cache-Control": "no-store"},
    )


@router.get("/{code}", include_in_schema=False)
async def redirect_to_target(request: Request, code: str):
    """Redirect to the link target, counting the click."""
    handler = request.app.state.redirect_handler
    config = request.app.state.config

    # InvalidCode and LinkNotFound render as 404 via the app's error handler
    record = await handler.resolve(code)

    return RedirectResponse(url=record.target_url, status_code=config.redirect_status_code)
