"""Tests for market data providers.

The Yahoo provider is exercised against a mocked yfinance module.
"""

import asyncio
import math
from datetime import date, datetime
from unittest.mock import patch

import pandas as pd
import pytest
import pytz

from stockanalyzer.errors import NotFoundError, ProviderError
from stockanalyzer.models import CompanyProfile, StockDetails
from stockanalyzer.providers import InMemoryProvider, YahooFinanceProvider

from conftest import FIXED_NOW, build_candles


def _history_frame() -> pd.DataFrame:
    index = pd.to_datetime([
        "2024-03-12",
        "2024-03-13",
        "2024-03-14 09:30",
        "2024-03-14 16:00",
        "2024-03-15",
    ], format="ISO8601")
    return pd.DataFrame(
        {
            "Open": [10.0, 11.0, 12.0, 12.5, 13.0],
            "High": [10.5, 11.5, 12.5, 13.0, 13.5],
            "Low": [9.5, 10.5, 11.5, 12.0, 12.5],
            "Close": [math.nan, 11.2, 12.2, 12.8, 13.1],
            "Volume": [100, 200, 300, 400, math.nan],
        },
        index=index,
    )


@pytest.fixture
def mock_yf():
    with patch("stockanalyzer.providers.yahoo.yf") as mocked:
        yield mocked


class TestYahooQuote:

    def test_quote_from_info(self, mock_yf):
        mock_yf.Ticker.return_value.info = {
            "shortName": "Apple Inc.",
            "regularMarketPrice": 172.5,
            "regularMarketChange": -1.25,
            "regularMarketChangePercent": -0.72,
            "currency": "USD",
            "regularMarketTime": int(FIXED_NOW.timestamp()),
        }

        quote = asyncio.run(YahooFinanceProvider().get_quote("aapl"))

        mock_yf.Ticker.assert_called_with("aapl")
        assert quote.symbol == "AAPL"
        assert quote.name == "Apple Inc."
        assert quote.price == 172.5
        assert quote.change == -1.25
        assert quote.timestamp == FIXED_NOW

    def test_current_price_fallback(self, mock_yf):
        mock_yf.Ticker.return_value.info = {"currentPrice": 99.0, "currency": "EUR"}

        quote = asyncio.run(YahooFinanceProvider().get_quote("SAP.DE"))

        assert quote.price == 99.0
        assert quote.currency == "EUR"
        assert quote.name == "SAP.DE"

    def test_zero_price_is_not_treated_as_missing(self, mock_yf):
        mock_yf.Ticker.return_value.info = {
            "regularMarketPrice": 0.0,
            "currentPrice": 5.0,
            "regularMarketChange": -0.5,
            "regularMarketChangePercent": math.nan,
        }

        quote = asyncio.run(YahooFinanceProvider().get_quote("DELIST"))

        assert quote.price == 0.0
        assert quote.change == -0.5
        assert quote.percent_change == 0.0

    def test_missing_price_is_not_found(self, mock_yf):
        mock_yf.Ticker.return_value.info = {"shortName": "Ghost"}

        with pytest.raises(NotFoundError):
            asyncio.run(YahooFinanceProvider().get_quote("GHOST"))

    def test_library_errors_are_wrapped(self, mock_yf):
        mock_yf.Ticker.side_effect = RuntimeError("rate limited")

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(YahooFinanceProvider().get_quote("AAPL"))

        assert "rate limited" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestYahooHistory:

    def test_candles_are_cleaned_and_newest_first(self, mock_yf):
        mock_yf.Ticker.return_value.history.return_value = _history_frame()

        candles = asyncio.run(YahooFinanceProvider().get_history("AAPL", "weekly", "1y"))

        mock_yf.Ticker.return_value.history.assert_called_with(
            period="1y", interval="1wk", auto_adjust=False
        )
        assert [c.date for c in candles] == [
            date(2024, 3, 15), date(2024, 3, 14), date(2024, 3, 13),
        ]
        # The later row for a date wins
        assert candles[1].close == 12.8
        assert candles[0].volume == 0

    def test_empty_frame_is_not_found(self, mock_yf):
        mock_yf.Ticker.return_value.history.return_value = pd.DataFrame()

        with pytest.raises(NotFoundError):
            asyncio.run(YahooFinanceProvider().get_history("NOPE"))


class TestYahooSearchAndProfile:

    def test_search_maps_quotes(self, mock_yf):
        mock_yf.Search.return_value.quotes = [
            {"symbol": "AAPL", "shortname": "Apple Inc.", "exchDisp": "NASDAQ", "quoteType": "EQUITY"},
            {"longname": "Entry without a symbol"},
            {"symbol": "APLE", "longname": "Apple Hospitality REIT", "exchange": "NYQ"},
        ]

        results = asyncio.run(YahooFinanceProvider(max_search_results=5).search("apple"))

        mock_yf.Search.assert_called_with("apple", max_results=5)
        assert [r.symbol for r in results] == ["AAPL", "APLE"]
        assert results[0].exchange == "NASDAQ"
        assert results[1].name == "Apple Hospitality REIT"
        assert results[1].exchange == "NYQ"

    def test_profile(self, mock_yf):
        mock_yf.Ticker.return_value.info = {
            "sector": "Technology",
            "industry": "Consumer Electronics",
            "beta": 1.29,
        }

        profile = asyncio.run(YahooFinanceProvider().get_profile("aapl"))

        assert profile == CompanyProfile(
            symbol="AAPL", sector="Technology", industry="Consumer Electronics", beta=1.29
        )

    def test_empty_profile_is_not_found(self, mock_yf):
        mock_yf.Ticker.return_value.info = {}

        with pytest.raises(NotFoundError):
            asyncio.run(YahooFinanceProvider().get_profile("NOPE"))

    def test_details_from_info(self, mock_yf):
        mock_yf.Ticker.return_value.info = {
            "longName": "Apple Inc.",
            "currency": "USD",
            "fullExchangeName": "NasdaqGS",
            "targetHighPrice": 250.0,
            "targetLowPrice": 160.0,
            "targetMeanPrice": 210.5,
            "recommendationKey": "buy",
            "recommendationMean": 1.9,
            "numberOfAnalystOpinions": 38,
            "profitMargins": 0.25,
            "grossMargins": 0.45,
            "operatingMargins": 0.3,
            "marketCap": 2.7e12,
            "regularMarketDayLow": 170.1,
            "trailingPE": 28.4,
            "forwardPE": math.nan,
            "dividendYield": 0.0,
        }

        details = asyncio.run(YahooFinanceProvider().get_details("aapl"))

        assert details.symbol == "AAPL"
        assert details.name == "Apple Inc."
        assert details.exchange == "NasdaqGS"
        assert details.target_mean_price == 210.5
        assert details.recommendation_key == "buy"
        assert details.number_of_analyst_opinions == 38
        assert details.profit_margins == 0.25
        assert details.day_low == 170.1
        assert details.forward_pe is None
        assert details.dividend_yield == 0.0
        assert details.total_debt is None

    def test_empty_details_are_not_found(self, mock_yf):
        mock_yf.Ticker.return_value.info = {}

        with pytest.raises(NotFoundError):
            asyncio.run(YahooFinanceProvider().get_details("NOPE"))


class TestInMemoryProvider:

    def test_histories_are_stored_newest_first(self):
        candles = build_candles([3.0, 2.0, 1.0])
        provider = InMemoryProvider(histories={"abc": list(reversed(candles))})

        history = asyncio.run(provider.get_history("ABC"))

        assert [c.close for c in history] == [3.0, 2.0, 1.0]

    def test_returned_history_is_a_copy(self):
        provider = InMemoryProvider(histories={"ABC": build_candles([3.0, 2.0])})

        asyncio.run(provider.get_history("ABC")).clear()

        assert len(asyncio.run(provider.get_history("ABC"))) == 2

    def test_derived_quote(self):
        provider = InMemoryProvider(
            histories={"ABC": build_candles([110.0, 100.0])},
            names={"ABC": "ABC Corp"},
            currency="GBP",
        )

        quote = asyncio.run(provider.get_quote("abc"))

        assert quote.price == 110.0
        assert quote.change == pytest.approx(10.0)
        assert quote.percent_change == pytest.approx(10.0)
        assert quote.currency == "GBP"
        assert quote.name == "ABC Corp"
        assert quote.timestamp == datetime(2024, 3, 15, tzinfo=pytz.UTC)

    def test_unknown_symbol(self):
        provider = InMemoryProvider()

        with pytest.raises(NotFoundError):
            asyncio.run(provider.get_history("ABC"))
        with pytest.raises(NotFoundError):
            asyncio.run(provider.get_profile("ABC"))
        with pytest.raises(NotFoundError):
            asyncio.run(provider.get_details("ABC"))

    def test_details(self):
        registered = StockDetails(symbol="ABC", recommendation_key="hold")
        provider = InMemoryProvider(
            histories={"ABC": build_candles([3.0, 2.0]), "DEF": build_candles([1.0])},
            details={"abc": registered},
            names={"DEF": "Def Ltd"},
        )

        assert asyncio.run(provider.get_details("abc")) == registered
        fallback = asyncio.run(provider.get_details("DEF"))
        assert fallback.name == "Def Ltd"
        assert fallback.currency == "USD"

    def test_search_by_symbol_fragment(self, provider):
        results = asyncio.run(provider.search("xy"))

        assert [r.symbol for r in results] == ["XYZ"]
        assert results[0].type == "EQUITY"
