"""Trend, signal, level and prediction analysis for StockAnalyzer."""

from stockanalyzer.analysis.trend import (
    TrendClassification,
    classify_trend,
    confidence_from_strength,
    recommend_action,
)
from stockanalyzer.analysis.signals import generate_signals, majority_verdict
from stockanalyzer.analysis.levels import (
    calculate_pivot_points,
    find_support_resistance,
    pivot_points_for_series,
)
from stockanalyzer.analysis.prediction import generate_predictions, prediction_confidence
from stockanalyzer.analysis.service import (
    AVAILABLE_INDICATORS,
    StockAnalysisService,
    compute_indicators,
    validate_symbol,
)

__all__ = [
    "AVAILABLE_INDICATORS",
    "StockAnalysisService",
    "TrendClassification",
    "calculate_pivot_points",
    "classify_trend",
    "compute_indicators",
    "confidence_from_strength",
    "find_support_resistance",
    "generate_predictions",
    "generate_signals",
    "majority_verdict",
    "pivot_points_for_series",
    "prediction_confidence",
    "recommend_action",
    "validate_symbol",
]
