"""Shared data models for the coinwatch dashboard.

Monetary values shown to the user (prices, market caps, axis bounds) use Decimal.
RawPricePoint keeps the float the API sent; rounding happens once, in the formatter.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class ResolutionMode(str, Enum):
    """Label granularity for chart points."""

    FINE = "fine"  # intraday, HH:MM
    COARSE = "coarse"  # daily, calendar date


class ChartStatus(str, Enum):
    """Outcome of a chart load, as shown by the detail page."""

    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class RawPricePoint:
    """A single (timestamp, price) pair from the market-chart endpoint."""

    timestamp_ms: int
    price: float


@dataclass(frozen=True)
class FormattedPricePoint:
    """A chart-ready point: display label plus price rounded to 4 places."""

    label: str
    price: Decimal


@dataclass(frozen=True)
class AxisDomain:
    """Padded [low, high] bounds for the chart's vertical axis."""

    low: Decimal
    high: Decimal


@dataclass
class ChartView:
    """Result of one chart pipeline run for a coin and range."""

    coin_id: str
    range_label: str
    status: ChartStatus
    points: list[FormattedPricePoint] = field(default_factory=list)
    domain: AxisDomain | None = None
    message: str = ""


@dataclass
class CoinSummary:
    """One row of the /coins/markets listing."""

    id: str
    name: str
    symbol: str
    image: str = ""
    current_price: Decimal | None = None
    market_cap: Decimal | None = None
    market_cap_rank: int | None = None
    price_change_percentage_24h: Decimal | None = None
    sparkline: list[float] = field(default_factory=list)  # 7d prices, oldest first


@dataclass
class GlobalStats:
    """Market-wide totals from the /global endpoint."""

    total_market_cap_usd: Decimal
    btc_dominance: Decimal  # percent
    total_volume_usd: Decimal


@dataclass
class CoinDetail:
    """Single-coin detail from /coins/{id} (USD market data)."""

    id: str
    name: str
    symbol: str
    description: str = ""
    current_price: Decimal | None = None
    market_cap: Decimal | None = None
    high_24h: Decimal | None = None
    low_24h: Decimal | None = None
    circulating_supply: Decimal | None = None
    total_supply: Decimal | None = None
