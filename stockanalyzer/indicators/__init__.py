"""Technical indicators module."""

from stockanalyzer.indicators.technical import (
    BollingerResult,
    MACDResult,
    StochasticResult,
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_ema_series,
    calculate_macd,
    calculate_return_statistics,
    calculate_rsi,
    calculate_sma,
    calculate_sma_series,
    calculate_stochastic,
)

__all__ = [
    "BollingerResult",
    "MACDResult",
    "StochasticResult",
    "calculate_atr",
    "calculate_bollinger_bands",
    "calculate_ema",
    "calculate_ema_series",
    "calculate_macd",
    "calculate_return_statistics",
    "calculate_rsi",
    "calculate_sma",
    "calculate_sma_series",
    "calculate_stochastic",
]
