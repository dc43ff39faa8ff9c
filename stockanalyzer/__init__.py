"""StockAnalyzer - Market data lookups and technical analysis CLI."""

__version__ = "0.1.0"
