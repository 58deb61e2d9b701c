"""CoinGecko market-data client via aiohttp.

Wraps the four public endpoints the dashboard needs (markets, global, coin
detail, market chart). Transport, status and decoding failures are mapped
onto the FetchError taxonomy so callers never see aiohttp exceptions.
"""

import asyncio
import math
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import quote

import aiohttp

from coinwatch.config import CoinGeckoSettings
from coinwatch.exceptions import (
    FetchError,
    HttpStatusError,
    InvalidCoinIdError,
    NetworkError,
    ParseError,
)
from coinwatch.logging import get_logger
from coinwatch.market.client import MarketDataClient
from coinwatch.models import CoinDetail, CoinSummary, GlobalStats

logger = get_logger(__name__)


def _to_decimal(value: Any) -> Decimal | None:
    """Convert a JSON number to Decimal, mapping null and junk to None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _usd(market_data: dict, key: str) -> Decimal | None:
    """Read market_data[key]["usd"], tolerating missing sub-objects."""
    entry = market_data.get(key)
    if isinstance(entry, dict):
        return _to_decimal(entry.get("usd"))
    return None


def _finite_float(value: Any) -> float | None:
    """float(value) for finite JSON numbers, None for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _sub_object(parent: dict, key: str) -> dict:
    """Return parent[key] as a dict; null or absent means empty.

    Raises:
        ParseError: the field holds something other than an object.
    """
    value = parent.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ParseError(f"Expected {key!r} object, got {type(value).__name__}")
    return value


def _parse_coin_summary(item: Any) -> CoinSummary:
    if not isinstance(item, dict):
        raise ParseError(f"Expected coin object, got {type(item).__name__}")
    try:
        coin_id = item["id"]
        name = item["name"]
        symbol = item["symbol"]
    except KeyError as e:
        raise ParseError(f"Coin summary missing field {e.args[0]!r}") from e

    sparkline_obj = _sub_object(item, "sparkline_in_7d")
    sparkline_raw = sparkline_obj.get("price") or []
    if not isinstance(sparkline_raw, list):
        raise ParseError(f"Expected sparkline price list, got {type(sparkline_raw).__name__}")
    sparkline = [p for p in map(_finite_float, sparkline_raw) if p is not None]

    rank = item.get("market_cap_rank")
    return CoinSummary(
        id=str(coin_id),
        name=str(name),
        symbol=str(symbol),
        image=str(item.get("image") or ""),
        current_price=_to_decimal(item.get("current_price")),
        market_cap=_to_decimal(item.get("market_cap")),
        market_cap_rank=rank if isinstance(rank, int) and not isinstance(rank, bool) else None,
        price_change_percentage_24h=_to_decimal(item.get("price_change_percentage_24h")),
        sparkline=sparkline,
    )


def _parse_global(payload: Any) -> GlobalStats:
    try:
        data = payload["data"]
        total_market_cap = _to_decimal(data["total_market_cap"]["usd"])
        btc_dominance = _to_decimal(data["market_cap_percentage"]["btc"])
        total_volume = _to_decimal(data["total_volume"]["usd"])
    except (KeyError, TypeError) as e:
        raise ParseError(f"Global stats payload missing field: {e}") from e

    if total_market_cap is None or btc_dominance is None or total_volume is None:
        raise ParseError("Global stats payload has non-numeric totals")

    return GlobalStats(
        total_market_cap_usd=total_market_cap,
        btc_dominance=btc_dominance,
        total_volume_usd=total_volume,
    )


def _parse_coin_detail(coin_id: str, payload: Any) -> CoinDetail:
    if not isinstance(payload, dict):
        raise ParseError(f"Expected coin detail object, got {type(payload).__name__}")
    try:
        name = payload["name"]
        symbol = payload["symbol"]
    except KeyError as e:
        raise ParseError(f"Coin detail missing field {e.args[0]!r}") from e

    description = payload.get("description") or {}
    market_data = _sub_object(payload, "market_data")

    return CoinDetail(
        id=str(payload.get("id") or coin_id),
        name=str(name),
        symbol=str(symbol),
        description=str(description.get("en") or "") if isinstance(description, dict) else "",
        current_price=_usd(market_data, "current_price"),
        market_cap=_usd(market_data, "market_cap"),
        high_24h=_usd(market_data, "high_24h"),
        low_24h=_usd(market_data, "low_24h"),
        circulating_supply=_to_decimal(market_data.get("circulating_supply")),
        total_supply=_to_decimal(market_data.get("total_supply")),
    )


class CoinGeckoClient(MarketDataClient):
    """Concrete CoinGecko client using a lazily-created aiohttp session.

    Args:
        settings: CoinGecko connection settings.
        session: Optional pre-built session (tests inject a fake). An injected
                 session is not closed by close().
    """

    def __init__(
        self,
        settings: CoinGeckoSettings,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._settings = settings
        self._base_url = settings.base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._settings.request_timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": "coinwatch/1.0"}
        api_key = self._settings.api_key.get_secret_value()
        if api_key:
            headers["x-cg-demo-api-key"] = api_key
        return headers

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET {base_url}{path} and decode the JSON body.

        Raises:
            NetworkError: Connection failure or timeout.
            HttpStatusError: Non-2xx response.
            ParseError: Body is not valid JSON.
        """
        session = await self._get_session()
        url = f"{self._base_url}{path}"

        try:
            async with session.get(url, params=params, headers=self._headers()) as resp:
                if not 200 <= resp.status < 300:
                    raise HttpStatusError(resp.status, url, resp.reason or "")
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise ParseError(f"Malformed JSON from {url}: {e}") from e
        except FetchError:
            raise
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request to {url} timed out") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

    async def fetch_markets(self, vs_currency: str, per_page: int) -> list[CoinSummary]:
        payload = await self._get_json(
            "/coins/markets",
            params={
                "vs_currency": vs_currency,
                "order": "market_cap_desc",
                "per_page": str(per_page),
                "page": "1",
                "sparkline": "true",
                "price_change_percentage": "24h",
            },
        )
        if not isinstance(payload, list):
            raise ParseError(f"Expected coin list, got {type(payload).__name__}")
        coins = [_parse_coin_summary(item) for item in payload]
        logger.debug("markets_fetched", count=len(coins), vs_currency=vs_currency)
        return coins

    async def fetch_global(self) -> GlobalStats:
        payload = await self._get_json("/global")
        return _parse_global(payload)

    async def fetch_coin(self, coin_id: str) -> CoinDetail:
        if not coin_id or not coin_id.strip():
            raise InvalidCoinIdError("Coin identifier must not be empty")
        payload = await self._get_json(
            f"/coins/{quote(coin_id, safe='')}",
            params={
                "localization": "false",
                "tickers": "false",
                "community_data": "false",
                "developer_data": "false",
            },
        )
        return _parse_coin_detail(coin_id, payload)

    async def fetch_market_chart(
        self, coin_id: str, days: str, vs_currency: str = "usd"
    ) -> dict[str, Any]:
        if not coin_id or not coin_id.strip():
            raise InvalidCoinIdError("Coin identifier must not be empty")
        payload = await self._get_json(
            f"/coins/{quote(coin_id, safe='')}/market_chart",
            params={"vs_currency": vs_currency, "days": days},
        )
        if not isinstance(payload, dict):
            raise ParseError(f"Expected market chart object, got {type(payload).__name__}")
        return payload
