"""Price-history fetcher for the market-chart endpoint.

One call, one request. The "prices" series is validated as a whole before
anything is returned: a malformed entry anywhere fails the fetch.
"""

import math
import sys
from typing import Any

from coinwatch.exceptions import InvalidCoinIdError, ParseError
from coinwatch.logging import get_logger
from coinwatch.market.client import MarketDataClient
from coinwatch.models import RawPricePoint

logger = get_logger(__name__)

# 3000-01-01T00:00:00Z; anything later cannot be a real market-chart sample
MAX_TIMESTAMP_MS = 32503680000000


def _is_number(value: Any) -> bool:
    """Finite JSON number; NaN and Infinity decode to float and are rejected."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return abs(value) <= sys.float_info.max
    return isinstance(value, float) and math.isfinite(value)


def _is_timestamp(value: Any) -> bool:
    return _is_number(value) and 0 <= value <= MAX_TIMESTAMP_MS


def parse_price_series(payload: dict[str, Any]) -> list[RawPricePoint]:
    """Convert a market-chart payload into RawPricePoints.

    Raises:
        ParseError: "prices" missing, not a list, or containing an entry that
            is not a [timestamp_ms, price] pair of finite numbers with the
            timestamp between the epoch and MAX_TIMESTAMP_MS.
    """
    if "prices" not in payload:
        raise ParseError("Market chart payload has no 'prices' series")

    prices = payload["prices"]
    if not isinstance(prices, list):
        raise ParseError(f"Expected 'prices' list, got {type(prices).__name__}")

    points: list[RawPricePoint] = []
    for index, entry in enumerate(prices):
        if (
            not isinstance(entry, (list, tuple))
            or len(entry) < 2
            or not _is_timestamp(entry[0])
            or not _is_number(entry[1])
        ):
            raise ParseError(f"Malformed price entry at index {index}: {entry!r}")
        points.append(RawPricePoint(timestamp_ms=int(entry[0]), price=float(entry[1])))
    return points


async def fetch_history(
    client: MarketDataClient,
    coin_id: str,
    day_token: str,
    vs_currency: str = "usd",
) -> list[RawPricePoint]:
    """Retrieve the raw (timestamp, price) series for a coin.

    Args:
        client: Market-data client used for the single request.
        coin_id: Already percent-decoded coin identifier (e.g. "bitcoin").
        day_token: Output of ranges.resolve() ("1", "7", ..., "max").
        vs_currency: Quote currency; the detail page always charts USD.

    Raises:
        InvalidCoinIdError: coin_id is empty (no request is made).
        FetchError: Network, HTTP status or parse failure.
    """
    if not coin_id or not coin_id.strip():
        raise InvalidCoinIdError("Coin identifier must not be empty")

    payload = await client.fetch_market_chart(coin_id, day_token, vs_currency=vs_currency)
    points = parse_price_series(payload)
    logger.debug("history_fetched", coin_id=coin_id, days=day_token, points=len(points))
    return points
