"""Quote, search result, company profile and details models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """Represents a latest-price quote for a symbol."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    name: str = Field(..., description="Company or instrument name")
    price: float = Field(..., ge=0, description="Last traded price")
    change: float = Field(..., description="Price change from previous close")
    percent_change: float = Field(..., description="Percentage change from previous close")
    currency: str = Field(default="USD", description="Quote currency")
    timestamp: datetime = Field(..., description="Time of the last trade")

    model_config = {"frozen": True}


class SearchResult(BaseModel):
    """Represents a single symbol search hit."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    name: str = Field(default="", description="Instrument name")
    exchange: str = Field(default="", description="Listing exchange")
    type: str = Field(default="", description="Instrument type (EQUITY, ETF, ...)")

    model_config = {"frozen": True}


class CompanyProfile(BaseModel):
    """Company metadata used for portfolio diversification and risk."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    sector: Optional[str] = Field(default=None, description="Business sector")
    industry: Optional[str] = Field(default=None, description="Industry")
    beta: Optional[float] = Field(default=None, description="Beta against the market")

    model_config = {"frozen": True}


class StockDetails(BaseModel):
    """Analyst targets, margins and valuation figures for a company.

    Every figure is optional; providers leave out what they do not report.
    """

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    name: str = Field(default="", description="Company name")
    currency: Optional[str] = Field(default=None, description="Quote currency")
    exchange: Optional[str] = Field(default=None, description="Listing exchange")

    # Analyst coverage
    target_high_price: Optional[float] = Field(default=None, description="Highest analyst price target")
    target_low_price: Optional[float] = Field(default=None, description="Lowest analyst price target")
    target_mean_price: Optional[float] = Field(default=None, description="Mean analyst price target")
    recommendation_mean: Optional[float] = Field(default=None, description="Mean rating, 1 (strong buy) to 5 (sell)")
    recommendation_key: Optional[str] = Field(default=None, description="Consensus rating (buy, hold, ...)")
    number_of_analyst_opinions: Optional[int] = Field(default=None, ge=0, description="Analysts covering the stock")

    # Financials
    total_revenue: Optional[float] = Field(default=None, description="Trailing twelve month revenue")
    total_cash: Optional[float] = Field(default=None, description="Cash and equivalents")
    total_debt: Optional[float] = Field(default=None, description="Total debt")
    revenue_growth: Optional[float] = Field(default=None, description="Year-over-year revenue growth ratio")
    gross_margins: Optional[float] = Field(default=None, description="Gross margin ratio")
    operating_margins: Optional[float] = Field(default=None, description="Operating margin ratio")
    profit_margins: Optional[float] = Field(default=None, description="Net profit margin ratio")
    return_on_equity: Optional[float] = Field(default=None, description="Return on equity ratio")

    # Summary detail
    market_cap: Optional[float] = Field(default=None, description="Market capitalisation")
    previous_close: Optional[float] = Field(default=None, description="Previous session close")
    day_low: Optional[float] = Field(default=None, description="Session low")
    day_high: Optional[float] = Field(default=None, description="Session high")
    fifty_two_week_low: Optional[float] = Field(default=None, description="52-week low")
    fifty_two_week_high: Optional[float] = Field(default=None, description="52-week high")
    average_volume: Optional[float] = Field(default=None, description="Average daily volume")
    beta: Optional[float] = Field(default=None, description="Beta against the market")
    trailing_pe: Optional[float] = Field(default=None, description="Trailing price/earnings")
    forward_pe: Optional[float] = Field(default=None, description="Forward price/earnings")
    dividend_rate: Optional[float] = Field(default=None, description="Annual dividend per share")
    dividend_yield: Optional[float] = Field(default=None, description="Dividend yield")

    model_config = {"frozen": True}
