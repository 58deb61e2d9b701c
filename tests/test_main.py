"""Tests for component wiring and the FastAPI lifespan."""

from decimal import Decimal
from unittest.mock import AsyncMock
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from coinwatch.chart.pipeline import ChartPipeline
from coinwatch.dashboard.app import create_dashboard_app
from coinwatch.main import _build_components, _chart_timezone, lifespan
from coinwatch.market.coin_list import CoinListMonitor
from coinwatch.market.coingecko_client import CoinGeckoClient
from coinwatch.models import CoinSummary, GlobalStats
from coinwatch.storage.preferences import PreferenceStore


class TestChartTimezone:
    def test_none_means_local(self) -> None:
        assert _chart_timezone(None) is None
        assert _chart_timezone("") is None

    def test_iana_name(self) -> None:
        assert _chart_timezone("UTC") == ZoneInfo("UTC")

    def test_unknown_name_falls_back_to_local(self) -> None:
        assert _chart_timezone("Mars/Olympus_Mons") is None


class TestBuildComponents:
    def test_wires_all_components(self, mock_settings) -> None:
        components = _build_components(mock_settings)

        assert isinstance(components["market_client"], CoinGeckoClient)
        assert isinstance(components["coin_monitor"], CoinListMonitor)
        assert isinstance(components["chart_pipeline"], ChartPipeline)
        assert isinstance(components["preferences"], PreferenceStore)


class TestLifespan:
    def test_starts_and_stops_background_work(self, mock_settings) -> None:
        client = AsyncMock()
        client.fetch_markets = AsyncMock(return_value=[
            CoinSummary(id="bitcoin", name="Bitcoin", symbol="btc", market_cap_rank=1),
        ])
        client.fetch_global = AsyncMock(return_value=GlobalStats(
            total_market_cap_usd=Decimal("1"), btc_dominance=Decimal("50"), total_volume_usd=Decimal("1"),
        ))

        components = _build_components(mock_settings)
        components["market_client"] = client
        components["coin_monitor"] = CoinListMonitor(client, mock_settings.coingecko, mock_settings.monitor)
        components["chart_pipeline"] = ChartPipeline(client)

        app = create_dashboard_app(lifespan=lifespan)
        app.state.settings = mock_settings
        app.state.components = components

        with TestClient(app) as test_client:
            assert components["coin_monitor"].running
            resp = test_client.get("/api/coins")
            assert resp.json()["coins"][0]["id"] == "bitcoin"
            test_client.post("/actions/favorites/bitcoin")
            assert components["preferences"].favorites == ["bitcoin"]

        assert not components["coin_monitor"].running
        client.close.assert_awaited_once()
