"""Shared fixtures for StockAnalyzer tests."""

from datetime import date, datetime, timedelta

import pytest
import pytz

from stockanalyzer.models import Candle
from stockanalyzer.providers import InMemoryProvider

FIXED_NOW = datetime(2024, 3, 15, 20, 0, tzinfo=pytz.UTC)


def build_candles(
    closes: list[float],
    end: date = date(2024, 3, 15),
    volume: int = 1_000_000,
) -> list[Candle]:
    """Build a newest-first daily candle series from newest-first closes."""
    return [
        Candle(
            date=end - timedelta(days=i),
            open=close,
            high=close * 1.01,
            low=close * 0.99,
            close=close,
            volume=volume,
        )
        for i, close in enumerate(closes)
    ]


def trending_closes(count: int, start: float = 100.0, step: float = 0.5) -> list[float]:
    """Closes rising by ``step`` per day, newest-first."""
    chronological = [start + i * step for i in range(count)]
    return chronological[::-1]


@pytest.fixture
def make_candles():
    """Factory for newest-first candle series."""
    return build_candles


@pytest.fixture
def clock():
    """Deterministic clock for service results."""
    return lambda: FIXED_NOW


@pytest.fixture
def provider():
    """In-memory provider with a rising and a falling symbol."""
    rising = [100 + i * 0.5 + (i % 3) * 0.2 for i in range(260)][::-1]
    falling = [300 - i * 0.7 + (i % 4) * 0.3 for i in range(260)][::-1]
    return InMemoryProvider(
        histories={
            "AAPL": build_candles(rising),
            "XYZ": build_candles(falling),
        },
        names={"AAPL": "Apple Inc.", "XYZ": "XYZ Corp"},
    )
