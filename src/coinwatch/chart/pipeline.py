"""Chart pipeline: range -> history fetch -> formatting -> axis domain.

Every load starts from scratch; nothing is cached between calls. Requests
are not tagged with a generation, so when a user switches ranges quickly the
browser may draw whichever response lands last, even if it belongs to an
older range.
"""

from __future__ import annotations

from datetime import tzinfo

import structlog

from coinwatch.chart.domain import compute_domain
from coinwatch.chart.formatter import format_points
from coinwatch.chart.history import fetch_history
from coinwatch.chart.ranges import RangeLabel, resolution_for, resolve
from coinwatch.exceptions import FetchError
from coinwatch.logging import get_logger
from coinwatch.market.client import MarketDataClient
from coinwatch.models import ChartStatus, ChartView

logger = get_logger(__name__)

NO_DATA_MESSAGE = "No chart data available"


class ChartPipeline:
    """Builds ChartViews for the detail page.

    Fetch failures are logged and returned as an ERROR view; they never
    propagate to the route handler.

    Args:
        client: Market-data client used for the history request.
        tz: Time zone for point labels; None uses local time.
    """

    def __init__(self, client: MarketDataClient, tz: tzinfo | None = None) -> None:
        self._client = client
        self._tz = tz

    async def load(self, coin_id: str, label: RangeLabel | str) -> ChartView:
        """Run the full pipeline for one coin and range."""
        label = RangeLabel(label)
        day_token = resolve(label)

        with structlog.contextvars.bound_contextvars(coin_id=coin_id, range=label.value):
            try:
                raw = await fetch_history(self._client, coin_id, day_token)
            except FetchError as e:
                logger.warning("chart_fetch_failed", error=e.message, error_type=type(e).__name__)
                return ChartView(
                    coin_id=coin_id,
                    range_label=label.value,
                    status=ChartStatus.ERROR,
                    message=e.message,
                )

            points = format_points(raw, resolution_for(label), tz=self._tz)
            if not points:
                logger.info("chart_empty")
                return ChartView(
                    coin_id=coin_id,
                    range_label=label.value,
                    status=ChartStatus.EMPTY,
                    message=NO_DATA_MESSAGE,
                )

            domain = compute_domain(points)
            logger.debug("chart_loaded", points=len(points), low=str(domain.low), high=str(domain.high))
            return ChartView(
                coin_id=coin_id,
                range_label=label.value,
                status=ChartStatus.OK,
                points=points,
                domain=domain,
            )
