"""Technical indicator calculations for trend and signal analysis.

All functions take price lists ordered newest-first (index 0 is the most
recent close), the same order as a candle series. Functions that return a
rolling series also return it newest-first.

Short series and zero ranges never raise: each indicator falls back to a
documented neutral value instead (mean of the available data, RSI 50,
all-zero MACD, collapsed bands, stochastic 50).
"""

import math
from typing import NamedTuple


class MACDResult(NamedTuple):
    line: float
    signal: float
    histogram: float


class BollingerResult(NamedTuple):
    upper: float
    middle: float
    lower: float
    width: float
    standard_deviation: float


class StochasticResult(NamedTuple):
    k: float
    d: float


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


def calculate_sma(prices: list[float], period: int) -> float:
    """Calculate the Simple Moving Average of the latest closes.

    Args:
        prices: Close prices, newest-first.
        period: Number of recent closes to average.

    Returns:
        Mean of ``prices[:period]``. When fewer than ``period`` closes
        exist the mean of the whole series is returned; an empty series
        gives 0.0.
    """
    _check_period(period)
    if not prices:
        return 0.0

    window = prices[:period]
    return sum(window) / len(window)


def calculate_sma_series(prices: list[float], period: int) -> list[float]:
    """Calculate a rolling Simple Moving Average.

    Args:
        prices: Close prices, newest-first.
        period: Window length.

    Returns:
        One mean per full window, newest-first (element 0 covers
        ``prices[0:period]``). A series shorter than ``period`` yields a
        single value averaged over everything available.
    """
    _check_period(period)
    if not prices:
        return []
    if len(prices) < period:
        return [calculate_sma(prices, period)]

    return [
        sum(prices[i:i + period]) / period
        for i in range(len(prices) - period + 1)
    ]


def calculate_ema_series(prices: list[float], period: int) -> list[float]:
    """Calculate running Exponential Moving Average values.

    The EMA is seeded with the SMA of the oldest ``period`` closes and then
    walks forward in time with ``k = 2 / (period + 1)``.

    Args:
        prices: Close prices, newest-first.
        period: EMA period.

    Returns:
        EMA values from the seed onward, newest-first. A series shorter
        than ``period`` yields a single value averaged over everything
        available.
    """
    _check_period(period)
    if not prices:
        return []
    if len(prices) < period:
        return [calculate_sma(prices, period)]

    chronological = prices[::-1]
    multiplier = 2 / (period + 1)

    # First EMA is SMA
    ema = sum(chronological[:period]) / period
    values = [ema]

    for price in chronological[period:]:
        ema = price * multiplier + ema * (1 - multiplier)
        values.append(ema)

    values.reverse()
    return values


def calculate_ema(prices: list[float], period: int) -> float:
    """Calculate the latest Exponential Moving Average value.

    Args:
        prices: Close prices, newest-first.
        period: EMA period.

    Returns:
        EMA at the most recent close (0.0 for an empty series).
    """
    values = calculate_ema_series(prices, period)
    return values[0] if values else 0.0


def calculate_rsi(prices: list[float], period: int = 14) -> float:
    """Calculate the Relative Strength Index with Wilder smoothing.

    Average gain and loss are seeded from the first ``period`` price changes
    and then smoothed with ``(avg * (period - 1) + change) / period``.

    Args:
        prices: Close prices, newest-first.
        period: RSI period (default 14).

    Returns:
        RSI in [0, 100]. Returns 50 when fewer than ``period + 1`` closes
        are available and 100 when the average loss is zero.
    """
    _check_period(period)
    if len(prices) < period + 1:
        return 50.0

    chronological = prices[::-1]
    changes = [
        chronological[i] - chronological[i - 1]
        for i in range(1, len(chronological))
    ]

    avg_gain = sum(c for c in changes[:period] if c > 0) / period
    avg_loss = sum(-c for c in changes[:period] if c < 0) / period

    for change in changes[period:]:
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return _clamp(100 - (100 / (1 + rs)))


def calculate_macd(
    prices: list[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACDResult:
    """Calculate MACD (Moving Average Convergence Divergence).

    The signal line is the EMA of the historical MACD line values, one per
    close from the point where the slow EMA is first defined.

    Args:
        prices: Close prices, newest-first.
        fast: Fast EMA period (default 12).
        slow: Slow EMA period (default 26).
        signal: Signal line period (default 9).

    Returns:
        MACDResult(line, signal, histogram). All zeros when fewer than
        ``max(fast, slow) + signal`` closes are available.
    """
    for period in (fast, slow, signal):
        _check_period(period)
    if len(prices) < max(fast, slow) + signal:
        return MACDResult(0.0, 0.0, 0.0)

    fast_ema = calculate_ema_series(prices, fast)
    slow_ema = calculate_ema_series(prices, slow)

    # Both series are newest-first, so index j is the same close in each
    history_length = min(len(fast_ema), len(slow_ema))
    macd_history = [fast_ema[j] - slow_ema[j] for j in range(history_length)]

    line = macd_history[0]
    signal_line = calculate_ema(macd_history, signal)

    return MACDResult(line, signal_line, line - signal_line)


def calculate_bollinger_bands(
    prices: list[float],
    period: int = 20,
    multiplier: float = 2.0,
) -> BollingerResult:
    """Calculate Bollinger Bands over the latest window.

    Args:
        prices: Close prices, newest-first.
        period: SMA period (default 20).
        multiplier: Standard deviation multiplier (default 2.0).

    Returns:
        BollingerResult(upper, middle, lower, width, standard_deviation)
        using the population standard deviation. A series shorter than
        ``period`` collapses all bands to the latest close with zero width.
    """
    _check_period(period)
    if len(prices) < period:
        latest = prices[0] if prices else 0.0
        return BollingerResult(latest, latest, latest, 0.0, 0.0)

    window = prices[:period]
    middle = sum(window) / period

    variance = sum((x - middle) ** 2 for x in window) / period
    std = math.sqrt(variance)

    upper = middle + multiplier * std
    lower = middle - multiplier * std
    width = (upper - lower) / middle if middle else 0.0

    return BollingerResult(upper, middle, lower, max(0.0, width), std)


def _stochastic_k(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    start: int,
    k_period: int,
) -> float:
    highest_high = max(highs[start:start + k_period])
    lowest_low = min(lows[start:start + k_period])

    if highest_high == lowest_low:
        return 50.0  # Neutral when no range

    k = (closes[start] - lowest_low) / (highest_high - lowest_low) * 100
    return _clamp(k)


def calculate_stochastic(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    k_period: int = 14,
    d_period: int = 3,
) -> StochasticResult:
    """Calculate the Stochastic Oscillator (%K and %D).

    Args:
        highs: High prices, newest-first.
        lows: Low prices, newest-first.
        closes: Close prices, newest-first.
        k_period: %K lookback (default 14).
        d_period: %D smoothing period (default 3).

    Returns:
        StochasticResult(k, d), both clamped to [0, 100]. Returns (50, 50)
        when fewer than ``k_period`` candles exist. %D falls back to %K
        when there are fewer than ``d_period`` full %K windows.

    Raises:
        ValueError: If the three lists differ in length.
    """
    _check_period(k_period)
    _check_period(d_period)
    n = len(closes)
    if len(highs) != n or len(lows) != n:
        raise ValueError("highs, lows and closes must have the same length")
    if n < k_period:
        return StochasticResult(50.0, 50.0)

    k = _stochastic_k(highs, lows, closes, 0, k_period)

    windows = n - k_period + 1
    if windows < d_period:
        return StochasticResult(k, k)

    k_values = [
        _stochastic_k(highs, lows, closes, i, k_period)
        for i in range(d_period)
    ]
    d = sum(k_values) / d_period

    return StochasticResult(k, _clamp(d))


def calculate_atr(
    highs: list[float],
    lows: list[float],
    closes: list[float],
    period: int = 14,
) -> float:
    """Calculate the Average True Range with Wilder smoothing.

    Args:
        highs: High prices, newest-first.
        lows: Low prices, newest-first.
        closes: Close prices, newest-first.
        period: ATR period (default 14).

    Returns:
        Latest ATR value, or 0.0 when fewer than ``period + 1`` candles
        are available.

    Raises:
        ValueError: If the three lists differ in length.
    """
    _check_period(period)
    n = len(closes)
    if len(highs) != n or len(lows) != n:
        raise ValueError("highs, lows and closes must have the same length")
    if n < period + 1:
        return 0.0

    high, low, close = highs[::-1], lows[::-1], closes[::-1]

    true_ranges = [
        max(
            high[i] - low[i],
            abs(high[i] - close[i - 1]),
            abs(low[i] - close[i - 1]),
        )
        for i in range(1, n)
    ]

    # First ATR is SMA of first `period` true ranges
    atr = sum(true_ranges[:period]) / period
    for tr in true_ranges[period:]:
        atr = (atr * (period - 1) + tr) / period

    return atr


def calculate_return_statistics(
    prices: list[float],
    window: int = 30,
) -> tuple[float, float]:
    """Calculate mean and volatility of recent daily returns.

    Returns are ``(p[i-1] - p[i]) / p[i]`` over the most recent ``window``
    closes, i.e. each close relative to the one before it in time.

    Args:
        prices: Close prices, newest-first.
        window: Number of recent closes to use (default 30).

    Returns:
        Tuple of (average_change, volatility) where volatility is the
        population standard deviation. (0.0, 0.0) with fewer than two
        usable closes.
    """
    _check_period(window)
    recent = prices[:window]

    changes = [
        (recent[i - 1] - recent[i]) / recent[i]
        for i in range(1, len(recent))
        if recent[i] != 0
    ]
    if not changes:
        return 0.0, 0.0

    average = sum(changes) / len(changes)
    variance = sum((c - average) ** 2 for c in changes) / len(changes)

    return average, math.sqrt(variance)
