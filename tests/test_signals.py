"""Tests for trading signal generation."""

from hypothesis import given, settings
from hypothesis import strategies as st

from stockanalyzer.analysis.signals import generate_signals, majority_verdict
from stockanalyzer.models import Signal

NEUTRAL_INPUTS = dict(
    price=100.0,
    sma50=100.0,
    sma200=100.0,
    rsi=50.0,
    macd_histogram=0.0,
    stochastic_k=50.0,
    stochastic_d=50.0,
)


def _signals(**overrides):
    return generate_signals(**{**NEUTRAL_INPUTS, **overrides})


def _signal(verdict: str) -> Signal:
    return Signal(source="test", verdict=verdict, strength=0.5)


class TestGenerateSignals:

    def test_always_five_records_in_rule_order(self):
        result = _signals()

        assert [s.source for s in result.signals] == [
            "moving_average", "golden_cross", "rsi", "macd", "stochastic",
        ]
        assert all(s.verdict == "neutral" for s in result.signals)
        assert result.overall == "neutral"

    def test_strengths_are_fixed_per_rule(self):
        result = _signals(price=120, sma50=110, sma200=100, rsi=20, macd_histogram=1)

        strengths = {s.source: s.strength for s in result.signals}
        assert strengths == {
            "moving_average": 0.7,
            "golden_cross": 0.8,
            "rsi": 0.6,
            "macd": 0.65,
            "stochastic": 0.6,
        }

    def test_uptrend_ordering_buys(self):
        result = _signals(price=120, sma50=110, sma200=100)

        assert result.verdict_for("moving_average") == "buy"
        assert result.overall == "buy"

    def test_downtrend_ordering_sells(self):
        result = _signals(price=80, sma50=90, sma200=100)

        assert result.verdict_for("moving_average") == "sell"

    def test_golden_cross_within_two_percent(self):
        assert _signals(sma50=101.5, sma200=100).verdict_for("golden_cross") == "buy"
        assert _signals(sma50=98.5, sma200=100).verdict_for("golden_cross") == "sell"

    def test_no_cross_outside_band(self):
        assert _signals(sma50=103, sma200=100).verdict_for("golden_cross") == "neutral"
        assert _signals(sma50=100, sma200=100).verdict_for("golden_cross") == "neutral"

    def test_rsi_extremes(self):
        assert _signals(rsi=25).verdict_for("rsi") == "buy"
        assert _signals(rsi=75).verdict_for("rsi") == "sell"
        assert _signals(rsi=30).verdict_for("rsi") == "neutral"
        assert _signals(rsi=70).verdict_for("rsi") == "neutral"

    def test_macd_sign(self):
        assert _signals(macd_histogram=0.1).verdict_for("macd") == "buy"
        assert _signals(macd_histogram=-0.1).verdict_for("macd") == "sell"

    def test_stochastic_needs_crossover_at_extreme(self):
        assert _signals(stochastic_k=15, stochastic_d=10).verdict_for("stochastic") == "buy"
        assert _signals(stochastic_k=85, stochastic_d=90).verdict_for("stochastic") == "sell"
        # Oversold but %K still below %D
        assert _signals(stochastic_k=10, stochastic_d=15).verdict_for("stochastic") == "neutral"
        assert _signals(stochastic_k=90, stochastic_d=85).verdict_for("stochastic") == "neutral"

    def test_conflicting_signals_tie_to_neutral(self):
        result = _signals(rsi=25, macd_histogram=-1)

        assert result.verdict_for("rsi") == "buy"
        assert result.verdict_for("macd") == "sell"
        assert result.overall == "neutral"

    @given(
        price=st.floats(1, 500),
        sma50=st.floats(1, 500),
        sma200=st.floats(1, 500),
        rsi=st.floats(0, 100),
        histogram=st.floats(-10, 10),
        k=st.floats(0, 100),
        d=st.floats(0, 100),
    )
    @settings(max_examples=200)
    def test_overall_matches_majority(self, price, sma50, sma200, rsi, histogram, k, d):
        """*For any* inputs the overall verdict is the buy/sell majority."""
        result = generate_signals(price, sma50, sma200, rsi, histogram, k, d)

        assert len(result.signals) == 5
        buys = sum(1 for s in result.signals if s.verdict == "buy")
        sells = sum(1 for s in result.signals if s.verdict == "sell")
        expected = "buy" if buys > sells else "sell" if sells > buys else "neutral"
        assert result.overall == expected


class TestMajorityVerdict:

    def test_empty_is_neutral(self):
        assert majority_verdict([]) == "neutral"

    def test_neutral_signals_do_not_vote(self):
        signals = [_signal("buy"), _signal("neutral"), _signal("neutral")]
        assert majority_verdict(signals) == "buy"

    def test_sell_majority(self):
        signals = [_signal("sell"), _signal("sell"), _signal("buy")]
        assert majority_verdict(signals) == "sell"
