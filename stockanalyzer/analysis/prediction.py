"""Naive forward price prediction from recent return statistics."""

import random
from datetime import date, timedelta
from typing import Optional

from stockanalyzer.errors import InsufficientDataError
from stockanalyzer.indicators import calculate_return_statistics
from stockanalyzer.models import PredictionPoint

MIN_PREDICTION_CANDLES = 30
RETURN_WINDOW = 30


def prediction_confidence(strength_score: float) -> str:
    """Confidence attached to every predicted point of a path."""
    if strength_score > 80:
        return "high"
    if strength_score < 40:
        return "low"
    return "medium"


def generate_predictions(
    closes: list[float],
    days: int,
    trend: str,
    strength_score: float,
    current_price: Optional[float] = None,
    start_date: Optional[date] = None,
    rng: Optional[random.Random] = None,
    symbol: str = "",
) -> list[PredictionPoint]:
    """Generate a day-by-day price path.

    Each day draws a change around the mean of recent daily returns, biased
    by the trend: bullish adds ``U(0, vol)``, bearish subtracts it and
    neutral adds ``(U(0, 1) - 0.5) * vol``. Changes compound onto the
    previous predicted price.

    Args:
        closes: Close prices, newest-first.
        days: Number of days to predict.
        trend: Trend label (bullish, bearish or neutral).
        strength_score: Trend strength in [0, 100].
        current_price: Starting price (defaults to ``closes[0]``).
        start_date: Day before the first prediction (defaults to today).
        rng: Random generator. Pass a seeded ``random.Random`` for a
            reproducible path.
        symbol: Symbol used in error messages.

    Returns:
        ``days`` PredictionPoints with prices rounded to 2 decimals.

    Raises:
        InsufficientDataError: If fewer than 30 closes are available.
    """
    if len(closes) < MIN_PREDICTION_CANDLES:
        raise InsufficientDataError(symbol or "series", MIN_PREDICTION_CANDLES, len(closes))

    rng = rng or random.Random()
    start_date = start_date or date.today()
    price = closes[0] if current_price is None else current_price

    avg_change, volatility = calculate_return_statistics(closes, RETURN_WINDOW)
    confidence = prediction_confidence(strength_score)

    predictions = []
    for i in range(1, days + 1):
        if trend == "bullish":
            change = avg_change + rng.random() * volatility
        elif trend == "bearish":
            change = avg_change - rng.random() * volatility
        else:
            change = avg_change + (rng.random() - 0.5) * volatility

        price = max(0.0, price * (1 + change))

        predictions.append(PredictionPoint(
            date=start_date + timedelta(days=i),
            price=round(price, 2),
            range_low=round(max(0.0, price * (1 - volatility)), 2),
            range_high=round(price * (1 + volatility), 2),
            confidence=confidence,
        ))

    return predictions
