"""Page routes: dashboard, coin detail, and the htmx partials they poll."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from coinwatch.chart.ranges import RangeLabel
from coinwatch.dashboard.views import (
    coin_grid_context,
    default_range,
    error_status,
    market_panels_context,
)
from coinwatch.exceptions import FetchError
from coinwatch.market import browse

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def dashboard_index(
    request: Request,
    page: int = 1,
    q: str = "",
    sort: str = "rank",
    order: str = "asc",
    favorites: bool = False,
) -> HTMLResponse:
    """Main dashboard: global stats, top coins, search, and the paginated grid."""
    templates: Jinja2Templates = request.app.state.templates
    settings = request.app.state.settings
    monitor = request.app.state.coin_monitor

    context = {
        **market_panels_context(request.app),
        **coin_grid_context(request.app, page, sort, order, favorites),
        "search_term": q,
        "search_results": browse.search(monitor.get_coins(), q, settings.dashboard.search_limit),
        "dark_mode": request.app.state.preferences.dark_mode,
        "poll_interval": settings.monitor.poll_interval,
    }
    return templates.TemplateResponse(request, "index.html", context)


@router.get("/partials/coins", response_class=HTMLResponse)
async def coin_grid_partial(
    request: Request,
    page: int = 1,
    sort: str = "rank",
    order: str = "asc",
    favorites: bool = False,
) -> HTMLResponse:
    """Coin grid fragment; the grid re-requests itself on a timer while visible."""
    templates: Jinja2Templates = request.app.state.templates
    context = {
        **coin_grid_context(request.app, page, sort, order, favorites),
        "poll_interval": request.app.state.settings.monitor.poll_interval,
    }
    return templates.TemplateResponse(request, "partials/coin_grid.html", context)


@router.get("/partials/search", response_class=HTMLResponse)
async def search_partial(request: Request, q: str = "") -> HTMLResponse:
    """Search dropdown fragment (first matches by name)."""
    templates: Jinja2Templates = request.app.state.templates
    monitor = request.app.state.coin_monitor
    limit = request.app.state.settings.dashboard.search_limit
    return templates.TemplateResponse(request, "partials/search_results.html", {
        "search_results": browse.search(monitor.get_coins(), q, limit),
    })


@router.get("/crypto/{coin_id}", response_class=HTMLResponse)
async def coin_detail(request: Request, coin_id: str) -> HTMLResponse:
    """Coin detail page with range buttons; the chart loads from /api.

    coin_id arrives percent-decoded from the router. A failed detail fetch
    renders the page with an explicit error instead of raising.
    """
    templates: Jinja2Templates = request.app.state.templates
    client = request.app.state.market_client
    preferences = request.app.state.preferences

    coin_id = coin_id.strip()
    detail = None
    error = ""
    status_code = 200
    try:
        detail = await client.fetch_coin(coin_id)
    except FetchError as e:
        log.warning("coin_detail_fetch_failed", coin_id=coin_id, error=e.message)
        error = e.message
        status_code = error_status(e)

    return templates.TemplateResponse(request, "detail.html", {
        "coin_id": coin_id,
        "coin": detail,
        "error": error,
        "is_favorite": preferences.is_favorite(coin_id),
        "ranges": [label.value for label in RangeLabel],
        "default_range": default_range(request.app).value,
        "dark_mode": preferences.dark_mode,
    }, status_code=status_code)
