"""Market data providers for StockAnalyzer."""

from stockanalyzer.providers.base import INTERVALS, RANGES, BaseMarketDataProvider
from stockanalyzer.providers.memory import InMemoryProvider
from stockanalyzer.providers.yahoo import YahooFinanceProvider

__all__ = [
    "BaseMarketDataProvider",
    "INTERVALS",
    "InMemoryProvider",
    "RANGES",
    "YahooFinanceProvider",
]
