"""Entry point for the coinwatch dashboard.

Wires all components together and serves the FastAPI dashboard. The
coin-list monitor, the WebSocket update loop and uvicorn share a single
asyncio event loop; FastAPI's lifespan starts and stops the background
tasks so no timer outlives the server.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. CoinGeckoClient (market-data API)
4. CoinListMonitor (coin-list polling + global stats)
5. ChartPipeline (price-history charts)
6. PreferencesDatabase + PreferenceStore (favorites, theme)
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import uvicorn
from fastapi import FastAPI

from coinwatch.chart.pipeline import ChartPipeline
from coinwatch.config import AppSettings
from coinwatch.logging import get_logger, setup_logging
from coinwatch.market.coin_list import CoinListMonitor
from coinwatch.market.coingecko_client import CoinGeckoClient
from coinwatch.storage.database import PreferencesDatabase
from coinwatch.storage.preferences import PreferenceStore


def _chart_timezone(name: str | None) -> tzinfo | None:
    """Resolve the configured chart time zone; None means local time."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        get_logger("coinwatch.main").warning("unknown_chart_timezone", timezone=name)
        return None


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all components from settings.

    Does NOT open network sessions or the database -- that happens in the
    lifespan so tear-down is symmetric.
    """
    market_client = CoinGeckoClient(settings.coingecko)
    coin_monitor = CoinListMonitor(market_client, settings.coingecko, settings.monitor)
    chart_pipeline = ChartPipeline(market_client, tz=_chart_timezone(settings.chart.display_timezone))
    database = PreferencesDatabase(settings.storage.db_path)
    preferences = PreferenceStore(database)

    return {
        "market_client": market_client,
        "coin_monitor": coin_monitor,
        "chart_pipeline": chart_pipeline,
        "database": database,
        "preferences": preferences,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage component lifecycle within the FastAPI application.

    On startup: opens the preference store, starts the coin-list monitor
    and the dashboard update loop.

    On shutdown: cancels the update loop, stops the monitor, closes the
    HTTP session and the database.
    """
    from coinwatch.dashboard.update_loop import dashboard_update_loop

    logger = get_logger("coinwatch.main")
    components = app.state.components

    app.state.market_client = components["market_client"]
    app.state.coin_monitor = components["coin_monitor"]
    app.state.chart_pipeline = components["chart_pipeline"]
    app.state.preferences = components["preferences"]

    await components["database"].connect()
    await components["preferences"].load()

    await components["coin_monitor"].start()
    update_task = asyncio.create_task(dashboard_update_loop(app))

    logger.info("lifespan_started")

    yield

    update_task.cancel()
    try:
        await update_task
    except asyncio.CancelledError:
        pass

    await components["coin_monitor"].stop()
    await components["market_client"].close()
    await components["database"].close()

    logger.info("coinwatch_stopped")


async def run() -> None:
    """Run the dashboard server until interrupted."""
    settings = AppSettings()

    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("coinwatch.main")

    components = _build_components(settings)

    from coinwatch.dashboard.app import create_dashboard_app

    app = create_dashboard_app(lifespan=lifespan)
    app.state.settings = settings
    app.state.components = components

    logger.info(
        "starting_dashboard",
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        vs_currency=settings.coingecko.vs_currency,
        poll_interval=settings.monitor.poll_interval,
    )

    config = uvicorn.Config(
        app,
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
