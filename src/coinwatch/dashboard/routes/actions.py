"""POST endpoints for favorites and theme (htmx actions)."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from coinwatch.exceptions import ValidationError

log = structlog.get_logger(__name__)

router = APIRouter()


def _safe_next(target: str) -> str:
    """Only allow same-site relative redirects."""
    if target.startswith("/") and not target.startswith("//"):
        return target
    return "/"


@router.post("/favorites/{coin_id}", response_class=HTMLResponse)
async def toggle_favorite(request: Request, coin_id: str) -> HTMLResponse:
    """Toggle a favorite and return the updated star button partial."""
    templates: Jinja2Templates = request.app.state.templates
    preferences = request.app.state.preferences

    try:
        is_favorite = await preferences.toggle_favorite(coin_id.strip())
    except ValidationError as e:
        log.warning("favorite_toggle_rejected", coin_id=coin_id, error=str(e))
        return HTMLResponse(content=str(e), status_code=400)

    return templates.TemplateResponse(request, "partials/favorite_button.html", {
        "coin_id": coin_id.strip(),
        "is_favorite": is_favorite,
    })


@router.post("/theme")
async def toggle_theme(request: Request, next: str = "/") -> RedirectResponse:
    """Flip dark mode and send the browser back where it came from."""
    preferences = request.app.state.preferences
    dark_mode = await preferences.toggle_dark_mode()
    log.info("theme_toggled_via_dashboard", dark_mode=dark_mode)
    return RedirectResponse(url=_safe_next(next), status_code=303)
