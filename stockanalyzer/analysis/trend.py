"""Trend classification from moving averages, RSI and MACD."""

from typing import NamedTuple

# Strength adjustments applied by each rule
MA_ORDER_WEIGHT = 20
RSI_EXTREME_WEIGHT = 10
MACD_CONFIRM_WEIGHT = 15

RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30


class TrendClassification(NamedTuple):
    trend: str
    strength_score: float
    confidence_level: str
    recommended_action: str


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def confidence_from_strength(strength_score: float) -> str:
    """Map a strength score to a confidence level.

    Args:
        strength_score: Score in [0, 100] where 50 is undecided.

    Returns:
        "high" when the score is more than 30 away from 50, "low" when it is
        less than 10 away, otherwise "medium".
    """
    distance = abs(strength_score - 50)
    if distance > 30:
        return "high"
    if distance < 10:
        return "low"
    return "medium"


def recommend_action(trend: str, strength_score: float) -> str:
    """Derive a buy/sell/hold recommendation from a classified trend."""
    if trend == "bullish" and strength_score > 70:
        return "buy"
    if trend == "bearish" and strength_score < 30:
        return "sell"
    return "hold"


def classify_trend(
    price: float,
    sma50: float,
    sma200: float,
    rsi: float,
    macd_histogram: float,
) -> TrendClassification:
    """Classify the trend of a symbol.

    Rules run in a fixed order starting from a neutral score of 50:

    1. Moving-average ordering: ``price > sma50 > sma200`` is bullish (+20),
       the inverse ordering is bearish (-20).
    2. RSI extremes override the label: above 70 is bearish (-10), below
       30 is bullish (+10).
    3. MACD histogram confirms: a positive histogram adds 15 to a bullish
       trend or turns a neutral one bullish; a negative histogram subtracts
       15 from a bearish trend or turns a neutral one bearish.

    The score is clamped to [0, 100] after every step.

    Args:
        price: Latest close.
        sma50: 50-period SMA.
        sma200: 200-period SMA.
        rsi: RSI value.
        macd_histogram: MACD histogram value.

    Returns:
        TrendClassification with label, score, confidence and action.
    """
    trend = "neutral"
    strength = 50.0

    if price > sma50 > sma200:
        trend = "bullish"
        strength = _clamp(strength + MA_ORDER_WEIGHT)
    elif price < sma50 < sma200:
        trend = "bearish"
        strength = _clamp(strength - MA_ORDER_WEIGHT)

    if rsi > RSI_OVERBOUGHT:
        trend = "bearish"
        strength = _clamp(strength - RSI_EXTREME_WEIGHT)
    elif rsi < RSI_OVERSOLD:
        trend = "bullish"
        strength = _clamp(strength + RSI_EXTREME_WEIGHT)

    if macd_histogram > 0:
        if trend == "bullish":
            strength = _clamp(strength + MACD_CONFIRM_WEIGHT)
        elif trend == "neutral":
            trend = "bullish"
    elif macd_histogram < 0:
        if trend == "bearish":
            strength = _clamp(strength - MACD_CONFIRM_WEIGHT)
        elif trend == "neutral":
            trend = "bearish"

    return TrendClassification(
        trend=trend,
        strength_score=strength,
        confidence_level=confidence_from_strength(strength),
        recommended_action=recommend_action(trend, strength),
    )
