"""Support and resistance level extraction."""

from stockanalyzer.models import Candle

DEFAULT_WINDOW = 20
SECOND_TIER_MARGIN = 0.05


def find_support_resistance(
    closes: list[float],
    window: int = DEFAULT_WINDOW,
    second_tier: bool = True,
) -> tuple[list[float], list[float]]:
    """Find support and resistance levels from the recent close range.

    The levels are the minimum and maximum of the most recent ``window``
    closes. No clustering or pivot detection is done, so the latest price
    can sit outside the band on a breakout day.

    Args:
        closes: Close prices, newest-first.
        window: Number of recent closes to consider (default 20).
        second_tier: Also return levels 5% beyond the first tier.

    Returns:
        Tuple of (support_levels, resistance_levels). Support levels are
        descending and resistance levels ascending. Empty lists for an
        empty series.
    """
    recent = closes[:window]
    if not recent:
        return [], []

    support = min(recent)
    resistance = max(recent)

    support_levels = [support]
    resistance_levels = [resistance]
    if second_tier:
        support_levels.append(support * (1 - SECOND_TIER_MARGIN))
        resistance_levels.append(resistance * (1 + SECOND_TIER_MARGIN))

    return support_levels, resistance_levels


def calculate_pivot_points(
    high: float,
    low: float,
    close: float,
) -> dict[str, float]:
    """Calculate Standard Pivot Points with support and resistance levels.

    Args:
        high: Previous candle's high
        low: Previous candle's low
        close: Previous candle's close

    Returns:
        Dictionary with Pivot, R1-R3, S1-S3 levels
    """
    pivot = (high + low + close) / 3

    return {
        "R3": high + 2 * (pivot - low),
        "R2": pivot + (high - low),
        "R1": (2 * pivot) - low,
        "Pivot": pivot,
        "S1": (2 * pivot) - high,
        "S2": pivot - (high - low),
        "S3": low - 2 * (high - pivot),
    }


def pivot_points_for_series(candles: list[Candle]) -> dict[str, float]:
    """Pivot points from the last completed candle of a newest-first series.

    The most recent candle may still be forming, so the pivot uses the one
    before it. A single-candle series uses that candle.
    """
    if not candles:
        return {}

    previous = candles[1] if len(candles) > 1 else candles[0]
    return calculate_pivot_points(previous.high, previous.low, previous.close)
