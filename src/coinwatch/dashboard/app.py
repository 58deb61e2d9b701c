"""FastAPI dashboard application factory with Jinja2 templates and WebSocket hub."""

from __future__ import annotations

import time
from decimal import Decimal
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from coinwatch.dashboard.routes import actions, api, pages, ws
from coinwatch.dashboard.routes.ws import hub

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _usd(value: Any) -> str:
    """Format a USD amount with thousands separators ("$1,234.56").

    Sub-dollar prices keep more precision so small caps do not show as $0.00.
    """
    if value is None:
        return "N/A"
    amount = Decimal(str(value))
    if abs(amount) < 1 and amount != 0:
        return f"${amount:,.6f}".rstrip("0").rstrip(".")
    return f"${amount:,.2f}"


def _number(value: Any) -> str:
    """Thousands-separated number without currency ("19,675,962")."""
    if value is None:
        return "N/A"
    return f"{Decimal(str(value)):,.0f}"


def _percent(value: Any) -> str:
    if value is None:
        return "N/A"
    return f"{Decimal(str(value)):.2f}%"


def _sparkline_points(prices: list[float], width: int = 100, height: int = 30) -> str:
    """Scale a price series into an SVG polyline "points" attribute."""
    if len(prices) < 2:
        return ""
    low, high = min(prices), max(prices)
    spread = (high - low) or 1.0
    step = width / (len(prices) - 1)
    return " ".join(
        f"{i * step:.1f},{height - (p - low) / spread * height:.1f}"
        for i, p in enumerate(prices)
    )


def _time_ago(value: float | None) -> str:
    """Convert a unix timestamp (seconds) to a relative string (e.g. '2m ago')."""
    if value is None:
        return "never"
    diff_seconds = time.time() - value
    if diff_seconds < 60:
        return "just now"
    if diff_seconds < 3600:
        return f"{int(diff_seconds / 60)}m ago"
    if diff_seconds < 86400:
        return f"{int(diff_seconds / 3600)}h ago"
    return f"{int(diff_seconds / 86400)}d ago"


def create_dashboard_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI dashboard application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to start and stop the monitor and store.

    Returns:
        Configured FastAPI application with templates, WebSocket hub, and routes.
    """
    app = FastAPI(
        title="Coinwatch",
        lifespan=lifespan,
    )

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["usd"] = _usd
    templates.env.filters["number"] = _number
    templates.env.filters["percent"] = _percent
    templates.env.filters["sparkline_points"] = _sparkline_points
    templates.env.filters["time_ago"] = _time_ago
    app.state.templates = templates

    app.state.hub = hub

    app.include_router(pages.router)
    app.include_router(api.router, prefix="/api")
    app.include_router(actions.router, prefix="/actions")
    app.include_router(ws.router)

    return app
