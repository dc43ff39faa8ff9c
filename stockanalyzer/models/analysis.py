"""Trend and technical analysis result models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from stockanalyzer.models.indicators import IndicatorSet

TrendLabel = Literal["bullish", "bearish", "neutral"]
ConfidenceLevel = Literal["low", "medium", "high"]
Action = Literal["buy", "sell", "hold"]
Verdict = Literal["buy", "sell", "neutral"]
Interval = Literal["daily", "weekly", "monthly"]


class VolumeAnalysis(BaseModel):
    """Volume summary over the analysis period."""

    average_volume: float = Field(..., ge=0, description="Mean volume over the period")
    recent_volume_change: float = Field(
        ..., description="Percent change of the 5-candle average vs the period average"
    )

    model_config = {"frozen": True}


class TrendAnalysis(BaseModel):
    """Result of a trend analysis for one symbol."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    period: int = Field(..., ge=10, le=365, description="Analysis lookback in candles")
    trend: TrendLabel = Field(..., description="Trend label")
    strength_score: float = Field(..., ge=0, le=100, description="Directional conviction")
    current_price: float = Field(..., ge=0, description="Latest close")
    price_change: float = Field(..., description="Latest close minus previous close")
    volatility: float = Field(..., ge=0, description="Std dev of the Bollinger window")
    confidence_level: ConfidenceLevel = Field(..., description="Confidence in the label")
    indicators: IndicatorSet = Field(..., description="Indicator values")
    support_levels: list[float] = Field(default_factory=list, description="Support levels")
    resistance_levels: list[float] = Field(default_factory=list, description="Resistance levels")
    volume_analysis: VolumeAnalysis = Field(..., description="Volume summary")
    recommended_action: Action = Field(..., description="Suggested action")

    model_config = {"frozen": True}


class Signal(BaseModel):
    """A single rule-based trading signal."""

    source: str = Field(..., min_length=1, description="Rule that produced the signal")
    verdict: Verdict = Field(..., description="buy, sell or neutral")
    strength: float = Field(..., ge=0, le=1, description="Informational weight")
    description: str = Field(default="", description="Human-readable reason")

    model_config = {"frozen": True}


class SignalSet(BaseModel):
    """Ordered signals plus the majority verdict."""

    signals: list[Signal] = Field(default_factory=list, description="Signals in rule order")
    overall: Verdict = Field(..., description="Majority of buy vs sell verdicts")

    model_config = {"frozen": True}

    def verdict_for(self, source: str) -> Verdict:
        """Return the verdict of the signal produced by ``source``."""
        for signal in self.signals:
            if signal.source == source:
                return signal.verdict
        raise KeyError(source)


class TechnicalAnalysis(BaseModel):
    """Result of a technical analysis for one symbol."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    name: str = Field(..., description="Company or instrument name")
    price: float = Field(..., ge=0, description="Quote price")
    change: float = Field(..., description="Quote change")
    percent_change: float = Field(..., description="Quote percent change")
    interval: Interval = Field(..., description="Candle interval")
    timestamp: datetime = Field(..., description="Analysis time (UTC)")
    trend: TrendLabel = Field(..., description="Trend label")
    strength_score: float = Field(..., ge=0, le=100, description="Directional conviction")
    confidence_level: ConfidenceLevel = Field(..., description="Confidence in the label")
    indicators: IndicatorSet = Field(..., description="Requested indicator values")
    signals: SignalSet = Field(..., description="Trading signals")
    support_levels: list[float] = Field(default_factory=list, description="Support levels")
    resistance_levels: list[float] = Field(default_factory=list, description="Resistance levels")
    pivot_points: dict[str, float] = Field(default_factory=dict, description="Classic pivot levels")

    model_config = {"frozen": True}
