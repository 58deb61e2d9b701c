"""Template context builders shared by page routes and the update loop."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI

from coinwatch.chart.ranges import RangeLabel, parse_range
from coinwatch.exceptions import FetchError, HttpStatusError, ValidationError
from coinwatch.market import browse

log = structlog.get_logger(__name__)


def error_status(error: FetchError) -> int:
    """404 for unknown or empty coin ids, 502 for every other upstream failure."""
    if isinstance(error, ValidationError):
        return 404
    if isinstance(error, HttpStatusError) and error.status == 404:
        return 404
    return 502


def default_range(app: FastAPI) -> RangeLabel:
    """Configured initial chart range; a bad setting falls back to 7D."""
    configured = app.state.settings.chart.default_range
    try:
        return parse_range(configured)
    except ValueError:
        log.warning("invalid_default_range", value=configured)
        return RangeLabel.SEVEN_DAYS


def market_panels_context(app: FastAPI) -> dict[str, Any]:
    """Global stats, top-N strip and refresh status."""
    monitor = app.state.coin_monitor
    settings = app.state.settings
    return {
        "global_stats": monitor.get_global_stats(),
        "top_coins": browse.top_by_market_cap(monitor.get_coins(), settings.dashboard.top_count),
        "monitor_status": monitor.status(),
    }


def coin_grid_context(
    app: FastAPI,
    page: int = 1,
    sort: str = "rank",
    order: str = "asc",
    favorites_only: bool = False,
) -> dict[str, Any]:
    """One page of the coin grid after favorites filter and sort.

    Unknown sort keys fall back to market-cap rank.
    """
    monitor = app.state.coin_monitor
    preferences = app.state.preferences
    settings = app.state.settings

    if sort not in browse.SORT_KEYS:
        sort = "rank"
    descending = order == "desc"

    coins = monitor.get_coins()
    if favorites_only:
        coins = browse.filter_favorites(coins, preferences.favorites)
    coins = browse.sort_coins(coins, sort, descending=descending)

    return {
        "page": browse.paginate(coins, page, settings.dashboard.coins_per_page),
        "sort": sort,
        "order": "desc" if descending else "asc",
        "favorites_only": favorites_only,
        "favorites": set(preferences.favorites),
        "sort_keys": list(browse.SORT_KEYS),
    }
