"""Tests for chart range labels and day-token mapping."""

import pytest

from coinwatch.chart.ranges import DAY_TOKENS, RangeLabel, parse_range, resolution_for, resolve
from coinwatch.models import ResolutionMode


class TestResolve:
    @pytest.mark.parametrize(
        "label,expected",
        [
            ("1D", "1"),
            ("7D", "7"),
            ("30D", "30"),
            ("6M", "180"),
            ("1Y", "365"),
            ("ALL", "max"),
        ],
    )
    def test_mapping_table(self, label: str, expected: str) -> None:
        assert resolve(RangeLabel(label)) == expected
        assert resolve(label) == expected

    def test_every_label_has_a_token(self) -> None:
        assert set(DAY_TOKENS) == set(RangeLabel)

    def test_unknown_label_raises(self) -> None:
        with pytest.raises(ValueError):
            resolve("2W")

    def test_mapping_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            DAY_TOKENS[RangeLabel.ONE_DAY] = "2"  # type: ignore[index]


class TestResolutionFor:
    @pytest.mark.parametrize("label", ["1D", "7D"])
    def test_short_ranges_are_fine(self, label: str) -> None:
        assert resolution_for(label) == ResolutionMode.FINE

    @pytest.mark.parametrize("label", ["30D", "6M", "1Y", "ALL"])
    def test_long_ranges_are_coarse(self, label: str) -> None:
        assert resolution_for(label) == ResolutionMode.COARSE


class TestParseRange:
    def test_missing_uses_default(self) -> None:
        assert parse_range(None) == RangeLabel.SEVEN_DAYS
        assert parse_range("  ", default="1Y") == RangeLabel.ONE_YEAR

    def test_case_insensitive(self) -> None:
        assert parse_range("30d") == RangeLabel.THIRTY_DAYS
        assert parse_range("all") == RangeLabel.ALL

    def test_unknown_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_range("90D")
