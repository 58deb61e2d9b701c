"""Vertical axis bounds for the price chart."""

from collections.abc import Sequence
from decimal import Decimal

from coinwatch.models import AxisDomain, FormattedPricePoint

RANGE_MARGIN = Decimal("0.10")
FLAT_MARGIN = Decimal("0.05")
ZERO_FLAT_MARGIN = Decimal("1")


def compute_domain(points: Sequence[FormattedPricePoint]) -> AxisDomain:
    """Compute a padded [low, high] axis domain for a price series.

    The margin is 10% of (max - min). A flat series (including a single
    point) has no range, so the margin becomes 5% of the price instead;
    a flat series at exactly zero gets a margin of 1 so the axis keeps a
    positive width.

    Examples:
        [100.0]      -> (95.0, 105.0)
        [10.0, 20.0] -> (9.0, 21.0)

    Raises:
        ValueError: `points` is empty. Callers should leave the domain unset.
    """
    if not points:
        raise ValueError("Cannot compute an axis domain for an empty series")

    prices = [point.price for point in points]
    low = min(prices)
    high = max(prices)
    spread = high - low

    if spread == 0:
        margin = abs(low) * FLAT_MARGIN
        if margin == 0:
            margin = ZERO_FLAT_MARGIN
    else:
        margin = spread * RANGE_MARGIN

    return AxisDomain(low=low - margin, high=high + margin)
