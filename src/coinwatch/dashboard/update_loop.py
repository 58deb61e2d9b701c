"""Periodic WebSocket update loop for the shared dashboard panels.

Renders the global stats panel, the top-coins strip and the refresh status
with current monitor data and broadcasts them as htmx OOB-swap fragments.
The per-user coin grid is not pushed; it polls /partials/coins itself.
"""

from __future__ import annotations

import asyncio

import structlog
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from coinwatch.dashboard.views import market_panels_context

log = structlog.get_logger(__name__)

PANELS = (
    ("global-stats-panel", "partials/global_stats.html"),
    ("top-coins-panel", "partials/top_coins.html"),
    ("market-status-panel", "partials/market_status.html"),
)


def render_market_panels(app: FastAPI) -> str:
    """Render every shared panel wrapped in its OOB swap div."""
    templates: Jinja2Templates = app.state.templates
    context = market_panels_context(app)

    fragments = []
    for element_id, template_name in PANELS:
        html = templates.env.get_template(template_name).render(**context)
        fragments.append(f'<div id="{element_id}" hx-swap-oob="true">{html}</div>')
    return "\n".join(fragments)


async def dashboard_update_loop(app: FastAPI) -> None:
    """Broadcast refreshed panels every update_interval seconds until cancelled."""
    update_interval = app.state.settings.dashboard.update_interval

    log.info("dashboard_update_loop_started", interval=update_interval)

    while True:
        try:
            await asyncio.sleep(update_interval)

            hub = app.state.hub
            if not hub.has_clients:
                continue

            await hub.broadcast(render_market_panels(app))

        except asyncio.CancelledError:
            log.info("dashboard_update_loop_cancelled")
            break
        except Exception:
            log.warning("dashboard_update_loop_error", exc_info=True)
            await asyncio.sleep(1)
