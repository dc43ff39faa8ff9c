"""Indicator value models."""

from typing import Optional

from pydantic import BaseModel, Field


class MACDValue(BaseModel):
    """MACD line, signal line and histogram at the latest sample."""

    line: float = Field(..., description="Fast EMA minus slow EMA")
    signal: float = Field(..., description="EMA of the MACD line history")
    histogram: float = Field(..., description="Line minus signal")

    model_config = {"frozen": True}


class BollingerValue(BaseModel):
    """Bollinger Bands at the latest sample."""

    upper: float = Field(..., description="Upper band")
    middle: float = Field(..., description="Middle band (SMA)")
    lower: float = Field(..., description="Lower band")
    width: float = Field(..., ge=0, description="(upper - lower) / middle")
    standard_deviation: float = Field(..., ge=0, description="Population std dev of the window")

    model_config = {"frozen": True}


class StochasticValue(BaseModel):
    """Stochastic oscillator %K and %D."""

    k: float = Field(..., ge=0, le=100, description="%K")
    d: float = Field(..., ge=0, le=100, description="%D")

    model_config = {"frozen": True}


class IndicatorSet(BaseModel):
    """Indicator values computed for one candle series.

    Rolling series (``sma_series``, ``ema_series``) are newest-first.
    Fields left as None were not requested.
    """

    sma: Optional[dict[int, float]] = Field(default=None, description="Latest SMA by period")
    sma_series: Optional[dict[int, list[float]]] = Field(
        default=None, description="Rolling SMA values by period, newest-first"
    )
    ema: Optional[dict[int, float]] = Field(default=None, description="Latest EMA by period")
    ema_series: Optional[dict[int, list[float]]] = Field(
        default=None, description="Running EMA values by period, newest-first"
    )
    rsi: Optional[float] = Field(default=None, ge=0, le=100, description="RSI(14)")
    macd: Optional[MACDValue] = Field(default=None, description="MACD(12, 26, 9)")
    bollinger: Optional[BollingerValue] = Field(default=None, description="Bollinger Bands(20, 2)")
    stochastic: Optional[StochasticValue] = Field(default=None, description="Stochastic(14, 3)")
    atr: Optional[float] = Field(default=None, ge=0, description="ATR(14)")

    model_config = {"frozen": True}
