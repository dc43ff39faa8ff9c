"""In-memory market data provider for tests and offline runs."""

from datetime import datetime
from typing import Optional

import pytz

from stockanalyzer.errors import NotFoundError
from stockanalyzer.models import Candle, CompanyProfile, Quote, SearchResult, StockDetails
from stockanalyzer.providers.base import BaseMarketDataProvider


class InMemoryProvider(BaseMarketDataProvider):
    """Market data provider backed by fixed in-memory data.

    Histories are stored per symbol and returned for any interval and
    range. When no quote is registered for a symbol, one is derived from
    the two most recent candles of its history.
    """

    name = "memory"

    def __init__(
        self,
        histories: Optional[dict[str, list[Candle]]] = None,
        quotes: Optional[dict[str, Quote]] = None,
        profiles: Optional[dict[str, CompanyProfile]] = None,
        details: Optional[dict[str, StockDetails]] = None,
        names: Optional[dict[str, str]] = None,
        currency: str = "USD",
    ):
        """Initialize the provider.

        Args:
            histories: Candle series per symbol. Any order is accepted;
                series are stored newest-first.
            quotes: Explicit quotes per symbol.
            profiles: Company profiles per symbol.
            details: Company details per symbol.
            names: Display names per symbol.
            currency: Currency of derived quotes.
        """
        self._histories = {
            symbol.upper(): sorted(candles, key=lambda c: c.date, reverse=True)
            for symbol, candles in (histories or {}).items()
        }
        self._quotes = {s.upper(): q for s, q in (quotes or {}).items()}
        self._profiles = {s.upper(): p for s, p in (profiles or {}).items()}
        self._details = {s.upper(): d for s, d in (details or {}).items()}
        self._names = {s.upper(): n for s, n in (names or {}).items()}
        self._currency = currency

    def add_history(self, symbol: str, candles: list[Candle]) -> None:
        """Register or replace the candle series of a symbol."""
        self._histories[symbol.upper()] = sorted(candles, key=lambda c: c.date, reverse=True)

    async def get_quote(self, symbol: str) -> Quote:
        key = symbol.upper()
        if key in self._quotes:
            return self._quotes[key]

        candles = self._histories.get(key)
        if not candles:
            raise NotFoundError(self.name, symbol)

        latest = candles[0]
        previous = candles[1].close if len(candles) > 1 else latest.close
        change = latest.close - previous
        percent_change = (change / previous * 100) if previous > 0 else 0.0

        return Quote(
            symbol=key,
            name=self._names.get(key, key),
            price=latest.close,
            change=change,
            percent_change=percent_change,
            currency=self._currency,
            timestamp=datetime.combine(latest.date, datetime.min.time(), tzinfo=pytz.UTC),
        )

    async def get_history(
        self,
        symbol: str,
        interval: str = "daily",
        range: str = "1mo",
    ) -> list[Candle]:
        candles = self._histories.get(symbol.upper())
        if not candles:
            raise NotFoundError(self.name, symbol)
        return list(candles)

    async def search(self, query: str) -> list[SearchResult]:
        needle = query.lower()
        symbols = sorted(set(self._histories) | set(self._quotes))

        results = []
        for symbol in symbols:
            name = self._names.get(symbol, "")
            if symbol in self._quotes:
                name = name or self._quotes[symbol].name
            if needle in symbol.lower() or needle in name.lower():
                results.append(SearchResult(symbol=symbol, name=name, type="EQUITY"))
        return results

    async def get_profile(self, symbol: str) -> CompanyProfile:
        key = symbol.upper()
        if key in self._profiles:
            return self._profiles[key]
        if key in self._histories or key in self._quotes:
            return CompanyProfile(symbol=key)
        raise NotFoundError(self.name, symbol)

    async def get_details(self, symbol: str) -> StockDetails:
        key = symbol.upper()
        if key in self._details:
            return self._details[key]
        if key in self._histories or key in self._quotes:
            return StockDetails(symbol=key, name=self._names.get(key, key), currency=self._currency)
        raise NotFoundError(self.name, symbol)
