"""Price prediction models."""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from stockanalyzer.models.analysis import ConfidenceLevel, TrendLabel
from stockanalyzer.models.indicators import MACDValue


class PredictionPoint(BaseModel):
    """One forecast day."""

    date: date_type = Field(..., description="Forecast date")
    price: float = Field(..., ge=0, description="Predicted close")
    range_low: float = Field(..., ge=0, description="Lower bound")
    range_high: float = Field(..., ge=0, description="Upper bound")
    confidence: ConfidenceLevel = Field(..., description="Confidence for this point")

    model_config = {"frozen": True}


class PredictionFactors(BaseModel):
    """Inputs that drove a prediction."""

    trend: TrendLabel = Field(..., description="Trend label used to bias the draw")
    rsi: float = Field(..., ge=0, le=100, description="RSI(14)")
    macd: MACDValue = Field(..., description="MACD(12, 26, 9)")
    volatility_risk: str = Field(..., description="high or medium")
    downtrend_risk: str = Field(..., description="high or low")

    model_config = {"frozen": True}


class EnrichedPricePoint(BaseModel):
    """A price point proposed by the enrichment model."""

    date: date_type = Field(..., description="Forecast date")
    price: float = Field(..., description="Predicted price")
    low: Optional[float] = Field(default=None, description="Lower bound")
    high: Optional[float] = Field(default=None, description="Upper bound")

    model_config = {"frozen": True}


class PredictionEnrichment(BaseModel):
    """Structured output of the LLM enrichment collaborator."""

    predicted_prices: list[EnrichedPricePoint] = Field(default_factory=list)
    confidence_score: Optional[float] = Field(default=None, ge=0, le=1)
    trend: Optional[str] = Field(default=None)
    market_conditions: Optional[str] = Field(default=None)
    method: Optional[str] = Field(default=None)

    model_config = {"frozen": True}


class PricePrediction(BaseModel):
    """Result of a price prediction for one symbol."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    name: str = Field(..., description="Company or instrument name")
    currency: str = Field(..., description="Quote currency")
    current_price: float = Field(..., ge=0, description="Price the forecast starts from")
    predictions: list[PredictionPoint] = Field(..., description="Day-by-day path")
    trend: TrendLabel = Field(..., description="Trend label")
    volatility: float = Field(..., ge=0, description="Std dev of recent daily returns")
    method: str = Field(..., description="Forecasting method")
    confidence_score: float = Field(..., ge=0, le=100, description="Trend strength score")
    factors: PredictionFactors = Field(..., description="Prediction inputs")
    enrichment: Optional[PredictionEnrichment] = Field(
        default=None, description="Optional LLM enrichment"
    )
    last_updated: datetime = Field(..., description="Generation time (UTC)")

    model_config = {"frozen": True}
