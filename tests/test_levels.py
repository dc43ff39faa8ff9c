"""Tests for support/resistance and pivot point levels."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from stockanalyzer.analysis.levels import (
    calculate_pivot_points,
    find_support_resistance,
    pivot_points_for_series,
)

from conftest import build_candles


class TestSupportResistance:

    def test_window_min_and_max_with_second_tier(self):
        closes = [105.0, 100.0, 110.0, 95.0, 102.0]

        support, resistance = find_support_resistance(closes)

        assert support == pytest.approx([95.0, 90.25])
        assert resistance == pytest.approx([110.0, 115.5])

    def test_only_recent_window_is_used(self):
        # The extreme values sit beyond the 20 most recent closes
        closes = [100.0] * 20 + [10.0, 500.0]

        support, resistance = find_support_resistance(closes)

        assert support[0] == 100.0
        assert resistance[0] == 100.0

    def test_single_tier(self):
        support, resistance = find_support_resistance([3.0, 1.0, 2.0], second_tier=False)

        assert support == [1.0]
        assert resistance == [3.0]

    def test_empty_series(self):
        assert find_support_resistance([]) == ([], [])

    @given(st.lists(st.floats(1, 10_000), min_size=1, max_size=60))
    def test_levels_bracket_recent_closes(self, closes):
        """*For any* series, every recent close lies between the first-tier levels."""
        support, resistance = find_support_resistance(closes)

        assert all(support[0] <= c <= resistance[0] for c in closes[:20])
        assert support[1] <= support[0]
        assert resistance[1] >= resistance[0]


class TestPivotPoints:

    def test_standard_formula(self):
        levels = calculate_pivot_points(high=110, low=90, close=100)

        assert levels["Pivot"] == pytest.approx(100)
        assert levels["R1"] == pytest.approx(110)
        assert levels["S1"] == pytest.approx(90)
        assert levels["R2"] == pytest.approx(120)
        assert levels["S2"] == pytest.approx(80)
        assert levels["R3"] == pytest.approx(130)
        assert levels["S3"] == pytest.approx(70)

    def test_levels_are_ordered(self):
        levels = calculate_pivot_points(high=52.3, low=48.1, close=51.0)

        ordered = [levels[k] for k in ("S3", "S2", "S1", "Pivot", "R1", "R2", "R3")]
        assert ordered == sorted(ordered)

    def test_series_uses_previous_candle(self):
        candles = build_candles([200.0, 100.0, 50.0])

        levels = pivot_points_for_series(candles)

        previous = candles[1]
        assert levels["Pivot"] == pytest.approx(
            (previous.high + previous.low + previous.close) / 3
        )

    def test_single_candle_and_empty_series(self):
        candles = build_candles([100.0])

        assert pivot_points_for_series(candles)["Pivot"] == pytest.approx(100.0)
        assert pivot_points_for_series([]) == {}
