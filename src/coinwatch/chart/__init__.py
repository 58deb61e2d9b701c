"""Price-history chart layer -- range mapping, history fetch, formatting and axis domain."""

from coinwatch.chart.domain import compute_domain
from coinwatch.chart.formatter import format_points
from coinwatch.chart.history import fetch_history
from coinwatch.chart.pipeline import ChartPipeline
from coinwatch.chart.ranges import RangeLabel, parse_range, resolution_for, resolve

__all__ = [
    "ChartPipeline",
    "RangeLabel",
    "compute_domain",
    "fetch_history",
    "format_points",
    "parse_range",
    "resolution_for",
    "resolve",
]
