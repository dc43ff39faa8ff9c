"""CLI commands for StockAnalyzer.

This package provides the command-line interface for StockAnalyzer,
including market data lookups, trend, technical and prediction analysis,
and portfolio valuation.
"""

from stockanalyzer.cli.main import cli, main

__all__ = ["cli", "main"]
