"""Rule-based trading signal generation."""

from stockanalyzer.models import Signal, SignalSet

# Golden/death cross fires when SMA50 is within this fraction of SMA200
CROSS_PROXIMITY = 0.02


def _moving_average_signal(price: float, sma50: float, sma200: float) -> Signal:
    if price > sma50 > sma200:
        return Signal(
            source="moving_average",
            verdict="buy",
            strength=0.7,
            description="Uptrend: price is above the 50 and 200 period SMAs",
        )
    if price < sma50 < sma200:
        return Signal(
            source="moving_average",
            verdict="sell",
            strength=0.7,
            description="Downtrend: price is below the 50 and 200 period SMAs",
        )
    return Signal(
        source="moving_average",
        verdict="neutral",
        strength=0.7,
        description="Price and SMAs are not in trend order",
    )


def _cross_signal(sma50: float, sma200: float) -> Signal:
    near = sma200 != 0 and abs(sma50 - sma200) / abs(sma200) < CROSS_PROXIMITY

    if near and sma50 > sma200:
        return Signal(
            source="golden_cross",
            verdict="buy",
            strength=0.8,
            description="Golden cross: the 50 period SMA crossed above the 200 period SMA",
        )
    if near and sma50 < sma200:
        return Signal(
            source="golden_cross",
            verdict="sell",
            strength=0.8,
            description="Death cross: the 50 period SMA crossed below the 200 period SMA",
        )
    return Signal(
        source="golden_cross",
        verdict="neutral",
        strength=0.8,
        description="No recent 50/200 SMA cross",
    )


def _rsi_signal(rsi: float) -> Signal:
    if rsi < 30:
        return Signal(
            source="rsi",
            verdict="buy",
            strength=0.6,
            description=f"Oversold: RSI {rsi:.1f} is below 30",
        )
    if rsi > 70:
        return Signal(
            source="rsi",
            verdict="sell",
            strength=0.6,
            description=f"Overbought: RSI {rsi:.1f} is above 70",
        )
    return Signal(
        source="rsi",
        verdict="neutral",
        strength=0.6,
        description=f"RSI {rsi:.1f} is between 30 and 70",
    )


def _macd_signal(histogram: float) -> Signal:
    if histogram > 0:
        return Signal(
            source="macd",
            verdict="buy",
            strength=0.65,
            description="MACD histogram is positive",
        )
    if histogram < 0:
        return Signal(
            source="macd",
            verdict="sell",
            strength=0.65,
            description="MACD histogram is negative",
        )
    return Signal(
        source="macd",
        verdict="neutral",
        strength=0.65,
        description="MACD histogram is flat",
    )


def _stochastic_signal(k: float, d: float) -> Signal:
    if k < 20 and d < 20 and k > d:
        return Signal(
            source="stochastic",
            verdict="buy",
            strength=0.6,
            description="Stochastic turning up from oversold territory",
        )
    if k > 80 and d > 80 and k < d:
        return Signal(
            source="stochastic",
            verdict="sell",
            strength=0.6,
            description="Stochastic turning down from overbought territory",
        )
    return Signal(
        source="stochastic",
        verdict="neutral",
        strength=0.6,
        description="No stochastic crossover at an extreme",
    )


def majority_verdict(signals: list[Signal]) -> str:
    """Return buy or sell by simple majority, neutral on a tie."""
    buys = sum(1 for s in signals if s.verdict == "buy")
    sells = sum(1 for s in signals if s.verdict == "sell")

    if buys > sells:
        return "buy"
    if sells > buys:
        return "sell"
    return "neutral"


def generate_signals(
    price: float,
    sma50: float,
    sma200: float,
    rsi: float,
    macd_histogram: float,
    stochastic_k: float,
    stochastic_d: float,
) -> SignalSet:
    """Evaluate every signal rule and aggregate the verdicts.

    Each rule runs independently and always contributes one record, in
    this order: moving_average, golden_cross, rsi, macd, stochastic. Rules
    that do not fire carry a neutral verdict. Strengths are informational
    and do not weight the overall vote.

    Args:
        price: Latest close.
        sma50: 50-period SMA.
        sma200: 200-period SMA.
        rsi: RSI value.
        macd_histogram: MACD histogram value.
        stochastic_k: Stochastic %K.
        stochastic_d: Stochastic %D.

    Returns:
        SignalSet with the five signals and the overall verdict.
    """
    signals = [
        _moving_average_signal(price, sma50, sma200),
        _cross_signal(sma50, sma200),
        _rsi_signal(rsi),
        _macd_signal(macd_histogram),
        _stochastic_signal(stochastic_k, stochastic_d),
    ]

    return SignalSet(signals=signals, overall=majority_verdict(signals))
