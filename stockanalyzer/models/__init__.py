"""Data models for StockAnalyzer."""

from stockanalyzer.models.candle import Candle
from stockanalyzer.models.quote import CompanyProfile, Quote, SearchResult, StockDetails
from stockanalyzer.models.indicators import (
    BollingerValue,
    IndicatorSet,
    MACDValue,
    StochasticValue,
)
from stockanalyzer.models.analysis import (
    Signal,
    SignalSet,
    TechnicalAnalysis,
    TrendAnalysis,
    VolumeAnalysis,
)
from stockanalyzer.models.prediction import (
    EnrichedPricePoint,
    PredictionEnrichment,
    PredictionFactors,
    PredictionPoint,
    PricePrediction,
)
from stockanalyzer.models.portfolio import (
    Holding,
    HoldingPerformance,
    PortfolioPerformance,
)

__all__ = [
    "BollingerValue",
    "Candle",
    "CompanyProfile",
    "EnrichedPricePoint",
    "Holding",
    "HoldingPerformance",
    "IndicatorSet",
    "MACDValue",
    "PortfolioPerformance",
    "PredictionEnrichment",
    "PredictionFactors",
    "PredictionPoint",
    "PricePrediction",
    "Quote",
    "SearchResult",
    "Signal",
    "SignalSet",
    "StochasticValue",
    "StockDetails",
    "TechnicalAnalysis",
    "TrendAnalysis",
    "VolumeAnalysis",
]
