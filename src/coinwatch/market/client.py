"""Abstract market-data client interface.

Defines the contract for market-data providers. The monitor, chart pipeline
and dashboard depend only on this interface, keeping CoinGecko-specific
details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod
from typing import Any

from coinwatch.models import CoinDetail, CoinSummary, GlobalStats


class MarketDataClient(ABC):
    """Abstract base class for market-data API clients.

    Every fetch method raises a coinwatch.exceptions.FetchError subclass on
    failure and never returns partial data.
    """

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP session."""
        ...

    @abstractmethod
    async def fetch_markets(self, vs_currency: str, per_page: int) -> list[CoinSummary]:
        """Fetch the first page of coins ordered by market cap, with 7d sparklines."""
        ...

    @abstractmethod
    async def fetch_global(self) -> GlobalStats:
        """Fetch market-wide totals (market cap, BTC dominance, volume)."""
        ...

    @abstractmethod
    async def fetch_coin(self, coin_id: str) -> CoinDetail:
        """Fetch detail and USD market data for a single coin."""
        ...

    @abstractmethod
    async def fetch_market_chart(
        self, coin_id: str, days: str, vs_currency: str = "usd"
    ) -> dict[str, Any]:
        """Fetch the raw market-chart payload for a coin.

        Returns the decoded JSON object; shape validation of the "prices"
        series is left to the history fetcher.
        """
        ...
