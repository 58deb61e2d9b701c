"""Chart range labels and their market-chart day tokens.

The label set is closed: the detail page only offers these buttons, and
the API route validates the query string through parse_range().
"""

from enum import Enum
from types import MappingProxyType

from coinwatch.models import ResolutionMode


class RangeLabel(str, Enum):
    """User-facing chart range."""

    ONE_DAY = "1D"
    SEVEN_DAYS = "7D"
    THIRTY_DAYS = "30D"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    ALL = "ALL"


MAX_HISTORY = "max"

DAY_TOKENS = MappingProxyType({
    RangeLabel.ONE_DAY: "1",
    RangeLabel.SEVEN_DAYS: "7",
    RangeLabel.THIRTY_DAYS: "30",
    RangeLabel.SIX_MONTHS: "180",
    RangeLabel.ONE_YEAR: "365",
    RangeLabel.ALL: MAX_HISTORY,
})

_FINE_RANGES = frozenset({RangeLabel.ONE_DAY, RangeLabel.SEVEN_DAYS})


def resolve(label: RangeLabel | str) -> str:
    """Map a range label to the `days` parameter of the market-chart endpoint.

    Returns a positive integer day count as a string, or "max" for the
    entire history. Raises ValueError for labels outside the fixed set.
    """
    return DAY_TOKENS[RangeLabel(label)]


def resolution_for(label: RangeLabel | str) -> ResolutionMode:
    """Intraday labels for 1D/7D, calendar dates for everything longer."""
    return ResolutionMode.FINE if RangeLabel(label) in _FINE_RANGES else ResolutionMode.COARSE


def parse_range(value: str | None, default: RangeLabel | str = RangeLabel.SEVEN_DAYS) -> RangeLabel:
    """Parse a query-string range, falling back to `default` when absent.

    Matching is case-insensitive ("7d" == "7D"). Unknown labels raise ValueError.
    """
    if value is None or not value.strip():
        return RangeLabel(default)
    return RangeLabel(value.strip().upper())
