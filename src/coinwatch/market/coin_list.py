"""Coin-list monitor -- keeps the dashboard's coin list fresh.

Polls /coins/markets at a fixed interval in a background task. A failed
refresh is logged and the previous list is kept, so the dashboard shows
stale-but-valid data rather than an empty grid. Global market stats are
fetched once at start, like the page load they replace.
"""

import asyncio
import time

from coinwatch.config import CoinGeckoSettings, MonitorSettings
from coinwatch.exceptions import FetchError
from coinwatch.logging import get_logger
from coinwatch.market.client import MarketDataClient
from coinwatch.models import CoinSummary, GlobalStats

logger = get_logger(__name__)


class CoinListMonitor:
    """Caches the top coins and global stats, refreshed by a cancellable task."""

    def __init__(
        self,
        client: MarketDataClient,
        coingecko: CoinGeckoSettings,
        settings: MonitorSettings,
    ) -> None:
        self._client = client
        self._vs_currency = coingecko.vs_currency
        self._per_page = coingecko.per_page
        self._poll_interval = settings.poll_interval
        self._coins: list[CoinSummary] = []
        self._global_stats: GlobalStats | None = None
        self._last_updated: float | None = None
        self._last_error: str | None = None
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Load the list and global stats once, then poll in the background."""
        if self._running:
            logger.warning("coin_list_monitor_already_running")
            return
        self._running = True
        await self.refresh_once()
        await self.refresh_global_stats()
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("coin_list_monitor_started", poll_interval=self._poll_interval)

    async def stop(self) -> None:
        """Cancel the poll task and wait for it to finish."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("coin_list_monitor_stopped")

    async def _poll_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._poll_interval)
            if not self._running:
                break
            try:
                await self.refresh_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.warning("coin_list_poll_error", exc_info=True)

    async def refresh_once(self) -> bool:
        """Fetch the coin list once.

        Returns True when the cached list was replaced. On FetchError the
        previous list is kept and the error recorded for status().
        """
        try:
            coins = await self._client.fetch_markets(self._vs_currency, self._per_page)
        except FetchError as e:
            self._last_error = e.message
            logger.warning(
                "coin_list_refresh_failed",
                error=e.message,
                kept=len(self._coins),
            )
            return False

        self._coins = coins
        self._last_updated = time.time()
        self._last_error = None
        logger.debug("coin_list_refreshed", count=len(coins))
        return True

    async def refresh_global_stats(self) -> bool:
        """Fetch global market stats once; keeps previous stats on failure."""
        try:
            self._global_stats = await self._client.fetch_global()
        except FetchError as e:
            logger.warning("global_stats_refresh_failed", error=e.message)
            return False
        return True

    def get_coins(self) -> list[CoinSummary]:
        """Return the cached coins in market-cap order."""
        return list(self._coins)

    def get_coin(self, coin_id: str) -> CoinSummary | None:
        """Return the cached summary for a coin id, if listed."""
        for coin in self._coins:
            if coin.id == coin_id:
                return coin
        return None

    def get_global_stats(self) -> GlobalStats | None:
        return self._global_stats

    def status(self) -> dict:
        """Refresh bookkeeping for the dashboard and /api/coins."""
        return {
            "running": self._running,
            "count": len(self._coins),
            "last_updated": self._last_updated,
            "last_error": self._last_error,
            "stale": self._last_error is not None and bool(self._coins),
        }
