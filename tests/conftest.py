"""Shared test fixtures for the coinwatch dashboard.

HTTP is faked with FakeSession, a minimal stand-in for aiohttp.ClientSession
that routes GET requests by API path. No test touches the network.
"""

import json
from contextlib import asynccontextmanager
from typing import Any

import pytest

from coinwatch.config import (
    AppSettings,
    ChartSettings,
    CoinGeckoSettings,
    DashboardSettings,
    MonitorSettings,
    StorageSettings,
)

BASE_URL = "https://api.coingecko.com/api/v3"


class FakeResponse:
    """Just enough of aiohttp.ClientResponse for CoinGeckoClient."""

    def __init__(
        self,
        status: int = 200,
        payload: Any = None,
        body: str | None = None,
        reason: str = "OK",
    ) -> None:
        self.status = status
        self.reason = reason
        self._payload = payload
        self._body = body

    async def json(self, content_type: str | None = None) -> Any:
        if self._body is not None:
            return json.loads(self._body)
        return self._payload


class FakeSession:
    """Routes session.get(url) by the path after BASE_URL.

    Values in `routes` are FakeResponse instances, or exceptions to raise
    as if the transport failed.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes = routes or {}
        self.calls: list[tuple[str, dict | None, dict | None]] = []
        self.closed = False

    @asynccontextmanager
    async def _respond(self, response: FakeResponse):
        yield response

    def get(self, url: str, params: dict | None = None, headers: dict | None = None):
        self.calls.append((url, params, headers))
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        if path not in self.routes:
            return self._respond(FakeResponse(status=404, payload={"error": "not found"}, reason="Not Found"))
        outcome = self.routes[path]
        if isinstance(outcome, BaseException):
            raise outcome
        return self._respond(outcome)

    async def close(self) -> None:
        self.closed = True


def make_coin(
    coin_id: str,
    name: str,
    rank: int | None,
    price: float | None = 1.0,
    change: float | None = 0.0,
    market_cap: float | None = 1000.0,
) -> dict:
    """A /coins/markets row as CoinGecko returns it."""
    return {
        "id": coin_id,
        "symbol": coin_id[:3],
        "name": name,
        "image": f"https://assets.example/{coin_id}.png",
        "current_price": price,
        "market_cap": market_cap,
        "market_cap_rank": rank,
        "price_change_percentage_24h": change,
        "sparkline_in_7d": {"price": [1.0, 2.0, 1.5]},
    }


SAMPLE_MARKETS = [
    make_coin("bitcoin", "Bitcoin", 1, price=43000.12, change=2.5, market_cap=840_000_000_000),
    make_coin("ethereum", "Ethereum", 2, price=2300.5, change=-1.2, market_cap=276_000_000_000),
    make_coin("tether", "Tether", 3, price=1.0, change=0.01, market_cap=91_000_000_000),
]

SAMPLE_GLOBAL = {
    "data": {
        "total_market_cap": {"usd": 1_650_000_000_000},
        "market_cap_percentage": {"btc": 51.234},
        "total_volume": {"usd": 62_000_000_000},
    }
}

SAMPLE_DETAIL = {
    "id": "bitcoin",
    "symbol": "btc",
    "name": "Bitcoin",
    "description": {"en": "Bitcoin is the first <a href='#'>cryptocurrency</a>."},
    "market_data": {
        "current_price": {"usd": 43000.12},
        "market_cap": {"usd": 840000000000},
        "high_24h": {"usd": 43500},
        "low_24h": {"usd": 42000},
        "circulating_supply": 19600000.0,
        "total_supply": 21000000.0,
    },
}

SAMPLE_CHART = {
    "prices": [
        [1704114300000, 42000.123456],  # 2024-01-01T13:05:00Z
        [1704117900000, 42100.5],
        [1704121500000, 41950.00005],
    ]
}


@pytest.fixture
def coingecko_settings() -> CoinGeckoSettings:
    return CoinGeckoSettings(base_url=BASE_URL)


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:
    """AppSettings with test defaults (fast polling, temp database)."""
    return AppSettings(
        log_level="DEBUG",
        coingecko=CoinGeckoSettings(base_url=BASE_URL),
        monitor=MonitorSettings(poll_interval=0.01),
        dashboard=DashboardSettings(update_interval=1, coins_per_page=2),
        chart=ChartSettings(default_range="7D", display_timezone="UTC"),
        storage=StorageSettings(db_path=str(tmp_path / "prefs.db")),
    )


@pytest.fixture
def fake_session() -> FakeSession:
    """FakeSession preloaded with one response per endpoint."""
    return FakeSession({
        "/coins/markets": FakeResponse(payload=SAMPLE_MARKETS),
        "/global": FakeResponse(payload=SAMPLE_GLOBAL),
        "/coins/bitcoin": FakeResponse(payload=SAMPLE_DETAIL),
        "/coins/bitcoin/market_chart": FakeResponse(payload=SAMPLE_CHART),
    })
