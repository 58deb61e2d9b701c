"""Relabel raw price points for display.

Despite the "bucketing" name in the UI code this is a 1:1 mapping: no point
is dropped or merged, and input order is kept.

Prices are rounded half-up on their shortest decimal representation
(Decimal(str(price))), so 1.23455 becomes 1.2346 even though the binary
float is slightly below the midpoint. Chart tooltips show this value as-is.
"""

from collections.abc import Sequence
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from coinwatch.models import FormattedPricePoint, RawPricePoint, ResolutionMode

PRICE_QUANTUM = Decimal("0.0001")

FINE_LABEL_FORMAT = "%H:%M"
COARSE_LABEL_FORMAT = "%Y-%m-%d"


def round_price(price: float) -> Decimal:
    """Round a price to 4 decimal places using ROUND_HALF_UP."""
    return Decimal(str(price)).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


def format_label(timestamp_ms: int, mode: ResolutionMode, tz: tzinfo | None = None) -> str:
    """Render a millisecond timestamp as HH:MM (FINE) or YYYY-MM-DD (COARSE).

    tz=None means the host's local time zone.
    """
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=tz)
    fmt = FINE_LABEL_FORMAT if mode == ResolutionMode.FINE else COARSE_LABEL_FORMAT
    return dt.strftime(fmt)


def format_points(
    points: Sequence[RawPricePoint],
    mode: ResolutionMode,
    tz: tzinfo | None = None,
) -> list[FormattedPricePoint]:
    """Convert raw points into labelled, rounded points.

    Args:
        points: Raw series in chronological order (may be empty).
        mode: FINE for 1D/7D ranges, COARSE otherwise.
        tz: Time zone for labels; None uses local time.

    Returns:
        A new list of the same length and order as `points`.
    """
    return [
        FormattedPricePoint(
            label=format_label(point.timestamp_ms, mode, tz),
            price=round_price(point.price),
        )
        for point in points
    ]
