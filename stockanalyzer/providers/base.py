"""Base market data provider interface for StockAnalyzer."""

from abc import ABC, abstractmethod

from stockanalyzer.models import Candle, CompanyProfile, Quote, SearchResult, StockDetails

# Candle intervals accepted by get_history
INTERVALS = ("daily", "weekly", "monthly")

# History ranges accepted by get_history
RANGES = ("1d", "5d", "1mo", "3mo", "6mo", "1y", "2y", "5y", "10y", "max")


class BaseMarketDataProvider(ABC):
    """Abstract base class for market data providers.

    All providers (Yahoo Finance, in-memory, etc.) must inherit from this
    class and implement all abstract methods. Methods are coroutines so a
    provider can do network I/O without blocking the event loop.
    """

    name = "provider"

    @abstractmethod
    async def get_quote(self, symbol: str) -> Quote:
        """Get the latest quote for a symbol.

        Args:
            symbol: Ticker symbol.

        Returns:
            Quote with the latest price data.

        Raises:
            NotFoundError: If the symbol is unknown.
            ProviderError: If the upstream source fails.
        """
        pass

    @abstractmethod
    async def get_history(
        self,
        symbol: str,
        interval: str = "daily",
        range: str = "1mo",
    ) -> list[Candle]:
        """Get historical OHLCV data.

        Args:
            symbol: Ticker symbol.
            interval: Candle interval (daily, weekly, monthly).
            range: History range (1d, 5d, 1mo, ..., max).

        Returns:
            Candle series ordered newest-first.

        Raises:
            NotFoundError: If the symbol has no history.
            ProviderError: If the upstream source fails.
        """
        pass

    @abstractmethod
    async def search(self, query: str) -> list[SearchResult]:
        """Search for symbols matching a query.

        Args:
            query: Free-text query (company name or ticker fragment).

        Returns:
            Matching instruments, possibly empty.
        """
        pass

    @abstractmethod
    async def get_profile(self, symbol: str) -> CompanyProfile:
        """Get company metadata (sector, industry, beta).

        Args:
            symbol: Ticker symbol.

        Returns:
            CompanyProfile; unknown fields are None.

        Raises:
            NotFoundError: If the symbol is unknown.
            ProviderError: If the upstream source fails.
        """
        pass

    @abstractmethod
    async def get_details(self, symbol: str) -> StockDetails:
        """Get analyst targets, margins and valuation figures.

        Args:
            symbol: Ticker symbol.

        Returns:
            StockDetails; figures the source does not report are None.

        Raises:
            NotFoundError: If the symbol is unknown.
            ProviderError: If the upstream source fails.
        """
        pass
