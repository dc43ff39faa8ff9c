"""Portfolio holding and performance models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Holding(BaseModel):
    """A position supplied by the caller."""

    symbol: str = Field(..., min_length=1, max_length=10, description="Ticker symbol")
    quantity: float = Field(..., gt=0, description="Number of shares")
    purchase_price: Optional[float] = Field(
        default=None, gt=0, description="Cost per share (defaults to the current price)"
    )

    model_config = {"frozen": True}


class HoldingPerformance(BaseModel):
    """Valuation of one holding."""

    symbol: str = Field(..., description="Ticker symbol")
    name: str = Field(..., description="Company name")
    quantity: float = Field(..., gt=0, description="Number of shares")
    purchase_price: float = Field(..., ge=0, description="Cost per share")
    current_price: float = Field(..., ge=0, description="Current price")
    total_value: float = Field(..., ge=0, description="Quantity times current price")
    gain_loss: float = Field(..., description="Unrealised P&L")
    gain_loss_percent: float = Field(..., description="Unrealised P&L percentage")
    weight: float = Field(..., ge=0, le=100, description="Share of portfolio value (%)")

    model_config = {"frozen": True}


class PortfolioPerformance(BaseModel):
    """Valuation, allocation and risk summary of a portfolio."""

    total_value: float = Field(..., ge=0, description="Sum of holding values")
    total_change: float = Field(..., description="Total unrealised P&L")
    total_change_percent: float = Field(..., description="Total unrealised P&L percentage")
    holdings: list[HoldingPerformance] = Field(..., description="Per-holding valuation")
    sector_allocation: dict[str, float] = Field(
        default_factory=dict, description="Portfolio weight (%) by sector"
    )
    weighted_beta: Optional[float] = Field(
        default=None, description="Weight-averaged beta of holdings that report one"
    )
    currency: str = Field(..., description="Currency of the first holding")
    last_updated: datetime = Field(..., description="Valuation time (UTC)")

    model_config = {"frozen": True}
