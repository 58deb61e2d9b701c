"""JSON API endpoints for the coin list, global stats, charts and preferences."""

from __future__ import annotations

from dataclasses import asdict
from decimal import Decimal
from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from coinwatch.chart.ranges import parse_range
from coinwatch.dashboard.views import default_range
from coinwatch.models import ChartStatus, ChartView

log = structlog.get_logger(__name__)

router = APIRouter()


def _decimal_to_str(obj: Any) -> Any:
    """Recursively convert Decimal values to strings for JSON serialization."""
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, dict):
        return {k: _decimal_to_str(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_decimal_to_str(v) for v in obj]
    return obj


def chart_view_to_dict(view: ChartView) -> dict[str, Any]:
    """Serialize a ChartView for the browser chart.

    Prices and domain bounds are emitted as JSON numbers because the chart
    library plots numbers; they were already rounded by the formatter.
    """
    return {
        "coin_id": view.coin_id,
        "range": view.range_label,
        "status": view.status.value,
        "message": view.message,
        "labels": [p.label for p in view.points],
        "prices": [float(p.price) for p in view.points],
        "domain": (
            {"low": float(view.domain.low), "high": float(view.domain.high)}
            if view.domain is not None
            else None
        ),
    }


@router.get("/coins")
async def get_coins(request: Request) -> JSONResponse:
    """Cached coin list in market-cap order, plus refresh status."""
    monitor = request.app.state.coin_monitor
    coins = [asdict(c) for c in monitor.get_coins()]
    return JSONResponse(content=_decimal_to_str({
        "coins": coins,
        "status": monitor.status(),
    }))


@router.get("/global")
async def get_global(request: Request) -> JSONResponse:
    """Global market stats, or null when they could not be loaded."""
    stats = request.app.state.coin_monitor.get_global_stats()
    return JSONResponse(content=_decimal_to_str(asdict(stats)) if stats is not None else None)


@router.get("/coins/{coin_id}/chart")
async def get_chart(request: Request, coin_id: str, range: str | None = None) -> JSONResponse:
    """Price-history chart data for one coin and range.

    400 for an unknown range label, 502 when the upstream fetch failed (the
    browser keeps the chart it already shows), 200 for ok and empty series.
    """
    try:
        label = parse_range(range, default=default_range(request.app))
    except ValueError:
        return JSONResponse(
            status_code=400,
            content={"status": "error", "message": f"Unknown range {range!r}"},
        )

    pipeline = request.app.state.chart_pipeline
    view = await pipeline.load(coin_id.strip(), label)

    status_code = 502 if view.status == ChartStatus.ERROR else 200
    return JSONResponse(status_code=status_code, content=chart_view_to_dict(view))


@router.get("/preferences")
async def get_preferences(request: Request) -> JSONResponse:
    preferences = request.app.state.preferences
    return JSONResponse(content={
        "favorites": preferences.favorites,
        "dark_mode": preferences.dark_mode,
    })
