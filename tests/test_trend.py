"""Tests for trend classification."""

from hypothesis import given, settings
from hypothesis import strategies as st

from stockanalyzer.analysis.trend import (
    classify_trend,
    confidence_from_strength,
    recommend_action,
)


class TestClassifyTrend:
    """Rules apply in order: moving averages, RSI extremes, MACD confirmation."""

    def test_full_bullish_alignment(self):
        result = classify_trend(price=110, sma50=105, sma200=100, rsi=55, macd_histogram=0.5)

        assert result.trend == "bullish"
        assert result.strength_score == 85
        assert result.confidence_level == "high"
        assert result.recommended_action == "buy"

    def test_full_bearish_alignment(self):
        result = classify_trend(price=90, sma50=95, sma200=100, rsi=45, macd_histogram=-0.5)

        assert result.trend == "bearish"
        assert result.strength_score == 15
        assert result.confidence_level == "high"
        assert result.recommended_action == "sell"

    def test_overbought_rsi_overrides_bullish_ordering(self):
        result = classify_trend(price=110, sma50=105, sma200=100, rsi=75, macd_histogram=0)

        assert result.trend == "bearish"
        assert result.strength_score == 60
        assert result.recommended_action == "hold"

    def test_oversold_rsi_forces_bullish(self):
        result = classify_trend(price=100, sma50=100, sma200=100, rsi=25, macd_histogram=0)

        assert result.trend == "bullish"
        assert result.strength_score == 60

    def test_macd_sets_undetermined_trend(self):
        up = classify_trend(price=100, sma50=100, sma200=100, rsi=50, macd_histogram=1)
        down = classify_trend(price=100, sma50=100, sma200=100, rsi=50, macd_histogram=-1)

        assert (up.trend, up.strength_score) == ("bullish", 50)
        assert (down.trend, down.strength_score) == ("bearish", 50)

    def test_macd_does_not_flip_opposite_label(self):
        # Oversold RSI made it bullish; a negative histogram leaves it alone
        result = classify_trend(price=100, sma50=100, sma200=100, rsi=20, macd_histogram=-1)

        assert result.trend == "bullish"
        assert result.strength_score == 60

    def test_flat_market_is_neutral(self):
        result = classify_trend(price=100, sma50=100, sma200=100, rsi=50, macd_histogram=0)

        assert result.trend == "neutral"
        assert result.strength_score == 50
        assert result.confidence_level == "low"
        assert result.recommended_action == "hold"

    @given(
        price=st.floats(1, 1000),
        sma50=st.floats(1, 1000),
        sma200=st.floats(1, 1000),
        rsi=st.floats(0, 100),
        histogram=st.floats(-50, 50),
    )
    @settings(max_examples=200)
    def test_strength_always_in_range(self, price, sma50, sma200, rsi, histogram):
        result = classify_trend(price, sma50, sma200, rsi, histogram)

        assert 0 <= result.strength_score <= 100
        assert result.trend in ("bullish", "bearish", "neutral")
        assert result.recommended_action in ("buy", "sell", "hold")


class TestConfidenceAndAction:

    def test_confidence_thresholds(self):
        assert confidence_from_strength(81) == "high"
        assert confidence_from_strength(19) == "high"
        assert confidence_from_strength(80) == "medium"
        assert confidence_from_strength(60) == "medium"
        assert confidence_from_strength(59) == "low"
        assert confidence_from_strength(50) == "low"

    def test_action_requires_label_and_strength(self):
        assert recommend_action("bullish", 71) == "buy"
        assert recommend_action("bullish", 70) == "hold"
        assert recommend_action("bearish", 29) == "sell"
        assert recommend_action("bearish", 30) == "hold"
        assert recommend_action("neutral", 90) == "hold"
