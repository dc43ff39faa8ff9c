"""Candle (OHLCV) data model."""

from datetime import date as date_type

from pydantic import BaseModel, Field


class Candle(BaseModel):
    """Represents a single OHLCV candle.

    A candle series is a ``list[Candle]`` ordered newest-first: index 0 is
    the most recent candle and dates are strictly descending.
    """

    date: date_type = Field(..., description="Candle date")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: int = Field(..., ge=0, description="Trading volume")

    model_config = {"frozen": True}
