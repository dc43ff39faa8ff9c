"""Yahoo Finance market data provider.

yfinance is synchronous, so every call runs in a thread pool executor and
is awaited from the event loop.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable

import pandas as pd
import pytz
import yfinance as yf

from stockanalyzer.errors import NotFoundError, ProviderError, StockAnalyzerError
from stockanalyzer.models import Candle, CompanyProfile, Quote, SearchResult, StockDetails
from stockanalyzer.providers.base import BaseMarketDataProvider

logger = logging.getLogger(__name__)
_executor = ThreadPoolExecutor(max_workers=4)

# Interval names to yfinance interval codes
INTERVAL_MAP = {
    "daily": "1d",
    "weekly": "1wk",
    "monthly": "1mo",
}


def _number(value: Any) -> float | None:
    if value is None or pd.isna(value):
        return None
    return float(value)


def _first_number(info: dict, *keys: str, default: float | None = None) -> float | None:
    """First numeric value among ``keys``; zero counts as a value."""
    for key in keys:
        value = _number(info.get(key))
        if value is not None:
            return value
    return default


class YahooFinanceProvider(BaseMarketDataProvider):
    """Async wrapper around the yfinance API."""

    name = "Yahoo Finance"

    def __init__(self, max_search_results: int = 10):
        self._max_search_results = max_search_results

    async def _run(self, func: Callable, *args: Any) -> Any:
        """Run a blocking yfinance call in the executor.

        StockAnalyzer errors raised by the callable propagate unchanged; any
        other exception is wrapped in ProviderError.
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(_executor, func, *args)
        except StockAnalyzerError:
            raise
        except Exception as e:
            logger.warning("yfinance call %s%s failed: %s", func.__name__, args, e)
            raise ProviderError(self.name, str(e)) from e

    async def get_quote(self, symbol: str) -> Quote:
        return await self._run(self._get_quote_sync, symbol)

    def _get_quote_sync(self, symbol: str) -> Quote:
        info = yf.Ticker(symbol).info or {}

        price = _first_number(info, "regularMarketPrice", "currentPrice")
        if price is None:
            raise NotFoundError(self.name, symbol)

        market_time = info.get("regularMarketTime")
        if market_time:
            timestamp = datetime.fromtimestamp(int(market_time), tz=pytz.UTC)
        else:
            timestamp = datetime.now(pytz.UTC)

        return Quote(
            symbol=symbol.upper(),
            name=info.get("shortName") or info.get("longName") or symbol.upper(),
            price=price,
            change=_first_number(info, "regularMarketChange", default=0.0),
            percent_change=_first_number(info, "regularMarketChangePercent", default=0.0),
            currency=info.get("currency") or "USD",
            timestamp=timestamp,
        )

    async def get_history(
        self,
        symbol: str,
        interval: str = "daily",
        range: str = "1mo",
    ) -> list[Candle]:
        return await self._run(self._get_history_sync, symbol, interval, range)

    def _get_history_sync(self, symbol: str, interval: str, range: str) -> list[Candle]:
        df = yf.Ticker(symbol).history(
            period=range,
            interval=INTERVAL_MAP.get(interval, "1d"),
            auto_adjust=False,
        )
        if df is None or df.empty:
            raise NotFoundError(self.name, symbol)

        df = df.dropna(subset=["Open", "High", "Low", "Close"])

        # Keyed by date so a partial period row replaces an earlier duplicate
        by_date: dict = {}
        for ts, row in df.iterrows():
            candle_date = pd.Timestamp(ts).date()
            by_date[candle_date] = Candle(
                date=candle_date,
                open=float(row["Open"]),
                high=float(row["High"]),
                low=float(row["Low"]),
                close=float(row["Close"]),
                volume=int(row["Volume"]) if not pd.isna(row["Volume"]) else 0,
            )

        if not by_date:
            raise NotFoundError(self.name, symbol)

        return [by_date[d] for d in sorted(by_date, reverse=True)]

    async def search(self, query: str) -> list[SearchResult]:
        return await self._run(self._search_sync, query)

    def _search_sync(self, query: str) -> list[SearchResult]:
        quotes = yf.Search(query, max_results=self._max_search_results).quotes or []

        results = []
        for item in quotes:
            symbol = item.get("symbol")
            if not symbol:
                continue
            results.append(SearchResult(
                symbol=symbol,
                name=item.get("shortname") or item.get("longname") or "",
                exchange=item.get("exchDisp") or item.get("exchange") or "",
                type=item.get("quoteType") or "",
            ))
        return results

    async def get_profile(self, symbol: str) -> CompanyProfile:
        return await self._run(self._get_profile_sync, symbol)

    def _get_profile_sync(self, symbol: str) -> CompanyProfile:
        info = yf.Ticker(symbol).info or {}
        if not info:
            raise NotFoundError(self.name, symbol)

        return CompanyProfile(
            symbol=symbol.upper(),
            sector=info.get("sector"),
            industry=info.get("industry"),
            beta=_number(info.get("beta")),
        )

    async def get_details(self, symbol: str) -> StockDetails:
        return await self._run(self._get_details_sync, symbol)

    def _get_details_sync(self, symbol: str) -> StockDetails:
        info = yf.Ticker(symbol).info or {}
        if not info:
            raise NotFoundError(self.name, symbol)

        analysts = info.get("numberOfAnalystOpinions")

        return StockDetails(
            symbol=symbol.upper(),
            name=info.get("longName") or info.get("shortName") or symbol.upper(),
            currency=info.get("currency"),
            exchange=info.get("fullExchangeName") or info.get("exchange"),
            target_high_price=_number(info.get("targetHighPrice")),
            target_low_price=_number(info.get("targetLowPrice")),
            target_mean_price=_number(info.get("targetMeanPrice")),
            recommendation_mean=_number(info.get("recommendationMean")),
            recommendation_key=info.get("recommendationKey"),
            number_of_analyst_opinions=int(analysts) if _number(analysts) is not None else None,
            total_revenue=_number(info.get("totalRevenue")),
            total_cash=_number(info.get("totalCash")),
            total_debt=_number(info.get("totalDebt")),
            revenue_growth=_number(info.get("revenueGrowth")),
            gross_margins=_number(info.get("grossMargins")),
            operating_margins=_number(info.get("operatingMargins")),
            profit_margins=_number(info.get("profitMargins")),
            return_on_equity=_number(info.get("returnOnEquity")),
            market_cap=_number(info.get("marketCap")),
            previous_close=_number(info.get("previousClose")),
            day_low=_first_number(info, "dayLow", "regularMarketDayLow"),
            day_high=_first_number(info, "dayHigh", "regularMarketDayHigh"),
            fifty_two_week_low=_number(info.get("fiftyTwoWeekLow")),
            fifty_two_week_high=_number(info.get("fiftyTwoWeekHigh")),
            average_volume=_number(info.get("averageVolume")),
            beta=_number(info.get("beta")),
            trailing_pe=_number(info.get("trailingPE")),
            forward_pe=_number(info.get("forwardPE")),
            dividend_rate=_number(info.get("dividendRate")),
            dividend_yield=_number(info.get("dividendYield")),
        )
