"""Stock analysis orchestration.

StockAnalysisService fetches candles from a market data provider, runs the
indicator engine, trend classifier and signal generator over them, and
assembles the public result models. All maths is synchronous; the only
await points are provider calls and the optional LLM enrichment.
"""

import asyncio
import logging
import random
from datetime import datetime
from typing import Any, Callable, Optional, Union

import pytz
from pydantic import ValidationError

from stockanalyzer.analysis.levels import find_support_resistance, pivot_points_for_series
from stockanalyzer.analysis.prediction import MIN_PREDICTION_CANDLES, generate_predictions
from stockanalyzer.analysis.signals import generate_signals
from stockanalyzer.analysis.trend import classify_trend
from stockanalyzer.config import AppConfig
from stockanalyzer.errors import (
    EnrichmentUnavailable,
    InsufficientDataError,
    InvalidParameterError,
    ProviderError,
    StockAnalyzerError,
)
from stockanalyzer.indicators import (
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_ema_series,
    calculate_macd,
    calculate_return_statistics,
    calculate_rsi,
    calculate_sma,
    calculate_sma_series,
    calculate_stochastic,
)
from stockanalyzer.models import (
    BollingerValue,
    Candle,
    CompanyProfile,
    Holding,
    HoldingPerformance,
    IndicatorSet,
    MACDValue,
    PortfolioPerformance,
    PredictionEnrichment,
    PredictionFactors,
    PricePrediction,
    Quote,
    SearchResult,
    StochasticValue,
    StockDetails,
    TechnicalAnalysis,
    TrendAnalysis,
    VolumeAnalysis,
)
from stockanalyzer.providers.base import INTERVALS, RANGES, BaseMarketDataProvider

logger = logging.getLogger(__name__)

MIN_ANALYSIS_CANDLES = 20
MAX_SYMBOL_LENGTH = 10
MAX_QUERY_LENGTH = 50

SMA_PERIODS = (20, 50, 200)
EMA_PERIODS = (12, 26)

# Number of most recent values kept in rolling indicator series
SERIES_LENGTH = 30

# Candles averaged for the recent side of the volume comparison
RECENT_VOLUME_WINDOW = 5

# Bollinger standard deviation above which volatility risk is high
HIGH_VOLATILITY_THRESHOLD = 5.0

AVAILABLE_INDICATORS = ["sma", "ema", "rsi", "macd", "bollinger", "stochastic", "atr"]

# Indicators that carry a rolling series alongside the latest value
SERIES_FIELDS = {"sma": "sma_series", "ema": "ema_series"}

DEFAULT_METHOD = "Statistical drift model"


def validate_symbol(symbol: str) -> str:
    """Normalise a ticker symbol.

    Returns:
        The stripped, upper-cased symbol.

    Raises:
        InvalidParameterError: If the symbol is empty or longer than 10 characters.
    """
    cleaned = (symbol or "").strip().upper()
    if not cleaned:
        raise InvalidParameterError("symbol", "must not be empty")
    if len(cleaned) > MAX_SYMBOL_LENGTH:
        raise InvalidParameterError("symbol", f"must be at most {MAX_SYMBOL_LENGTH} characters")
    return cleaned


def _validate_interval(interval: str) -> str:
    if interval not in INTERVALS:
        raise InvalidParameterError("interval", f"must be one of {', '.join(INTERVALS)}")
    return interval


def _validate_range(name: str, value: str) -> str:
    if value not in RANGES:
        raise InvalidParameterError(name, f"must be one of {', '.join(RANGES)}")
    return value


def _validate_indicators(indicators: Optional[list[str]]) -> list[str]:
    if indicators is None:
        return list(AVAILABLE_INDICATORS)

    names = [name.strip().lower() for name in indicators if name.strip()]
    unknown = [name for name in names if name not in AVAILABLE_INDICATORS]
    if unknown:
        raise InvalidParameterError(
            "indicators",
            f"unknown indicator(s) {', '.join(unknown)}; "
            f"available: {', '.join(AVAILABLE_INDICATORS)}",
        )
    return names


def compute_indicators(candles: list[Candle]) -> IndicatorSet:
    """Compute every indicator for a newest-first candle series.

    Rolling series are truncated to the most recent SERIES_LENGTH values.
    """
    closes = [c.close for c in candles]
    highs = [c.high for c in candles]
    lows = [c.low for c in candles]

    macd = calculate_macd(closes)
    bollinger = calculate_bollinger_bands(closes)
    stochastic = calculate_stochastic(highs, lows, closes)

    return IndicatorSet(
        sma={p: calculate_sma(closes, p) for p in SMA_PERIODS},
        sma_series={p: calculate_sma_series(closes, p)[:SERIES_LENGTH] for p in SMA_PERIODS},
        ema={p: calculate_ema(closes, p) for p in EMA_PERIODS},
        ema_series={p: calculate_ema_series(closes, p)[:SERIES_LENGTH] for p in EMA_PERIODS},
        rsi=calculate_rsi(closes),
        macd=MACDValue(line=macd.line, signal=macd.signal, histogram=macd.histogram),
        bollinger=BollingerValue(
            upper=bollinger.upper,
            middle=bollinger.middle,
            lower=bollinger.lower,
            width=bollinger.width,
            standard_deviation=bollinger.standard_deviation,
        ),
        stochastic=StochasticValue(k=stochastic.k, d=stochastic.d),
        atr=calculate_atr(highs, lows, closes),
    )


def filter_indicators(indicators: IndicatorSet, names: list[str]) -> IndicatorSet:
    """Keep only the requested indicators (and their rolling series)."""
    fields: dict[str, Any] = {}
    for name in names:
        fields[name] = getattr(indicators, name)
        if name in SERIES_FIELDS:
            series_field = SERIES_FIELDS[name]
            fields[series_field] = getattr(indicators, series_field)
    return IndicatorSet(**fields)


def analyze_volume(candles: list[Candle], period: int) -> VolumeAnalysis:
    """Compare recent volume against the average over ``period`` candles."""
    volumes = [c.volume for c in candles[:period]]
    if not volumes:
        return VolumeAnalysis(average_volume=0.0, recent_volume_change=0.0)

    average = sum(volumes) / len(volumes)
    recent = volumes[:RECENT_VOLUME_WINDOW]
    recent_average = sum(recent) / len(recent)

    change = (recent_average / average - 1) * 100 if average > 0 else 0.0
    return VolumeAnalysis(average_volume=average, recent_volume_change=change)


def _classify(candles: list[Candle], indicators: IndicatorSet):
    return classify_trend(
        price=candles[0].close,
        sma50=indicators.sma[50],
        sma200=indicators.sma[200],
        rsi=indicators.rsi,
        macd_histogram=indicators.macd.histogram,
    )


class StockAnalysisService:
    """Trend, technical, prediction and portfolio analysis over a provider.

    The service holds no mutable analysis state; every call fetches and
    recomputes from scratch.
    """

    def __init__(
        self,
        provider: BaseMarketDataProvider,
        enrichment: Optional[Any] = None,
        config: Optional[AppConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the service.

        Args:
            provider: Market data provider.
            enrichment: Optional object with an async ``enrich`` method
                (e.g. PredictionEnrichmentAgent).
            config: Application config. Defaults are used if omitted.
            rng: Random generator for prediction paths. Seeded from
                ``analysis.prediction_seed`` when omitted.
            clock: Returns the current timezone-aware time.
        """
        self._provider = provider
        self._enrichment = enrichment
        self._config = config or AppConfig()
        self._rng = rng or random.Random(self._config.analysis.prediction_seed)
        self._clock = clock or (lambda: datetime.now(pytz.UTC))

    async def _fetch(self, aw, symbol: str):
        """Await a provider call under ``provider.timeout``.

        A timeout is raised as ProviderError. Enrichment is not awaited here.
        """
        timeout = self._config.provider.timeout
        try:
            return await asyncio.wait_for(aw, timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.error("Provider request for %s timed out after %gs", symbol, timeout)
            raise ProviderError(
                self._provider.name, f"request for {symbol} timed out after {timeout:g}s"
            ) from e
        except ProviderError as e:
            logger.error("Provider request for %s failed: %s", symbol, e)
            raise

    async def _fetch_quote_and_history(
        self,
        symbol: str,
        interval: str,
        history_range: str,
    ) -> tuple[Quote, list[Candle]]:
        quote, candles = await self._fetch(
            asyncio.gather(
                self._provider.get_quote(symbol),
                self._provider.get_history(symbol, interval, history_range),
            ),
            symbol,
        )
        return quote, candles

    async def get_quote(self, symbol: str) -> Quote:
        """Get the latest quote for a symbol."""
        symbol = validate_symbol(symbol)
        return await self._fetch(self._provider.get_quote(symbol), symbol)

    async def get_quotes(self, symbols: list[str]) -> list[Quote]:
        """Get quotes for several symbols concurrently.

        Args:
            symbols: Ticker symbols. Results keep this order.

        Returns:
            One Quote per symbol.

        Raises:
            InvalidParameterError: If the list is empty or a symbol is invalid.
            ProviderError: If any lookup fails.
        """
        if not symbols:
            raise InvalidParameterError("symbols", "at least one symbol is required")

        cleaned = [validate_symbol(s) for s in symbols]
        logger.info("Fetching quotes for %s", ", ".join(cleaned))

        quotes = await self._fetch(
            asyncio.gather(*(self._provider.get_quote(s) for s in cleaned)),
            ", ".join(cleaned),
        )
        return list(quotes)

    async def get_details(self, symbol: str) -> StockDetails:
        """Get analyst targets, margins and valuation figures for a symbol."""
        symbol = validate_symbol(symbol)
        return await self._fetch(self._provider.get_details(symbol), symbol)

    async def get_history(
        self,
        symbol: str,
        interval: str = "daily",
        range: str = "1mo",
    ) -> list[Candle]:
        """Get a newest-first candle series for a symbol."""
        symbol = validate_symbol(symbol)
        _validate_interval(interval)
        _validate_range("range", range)
        return await self._fetch(self._provider.get_history(symbol, interval, range), symbol)

    async def search(self, query: str) -> list[SearchResult]:
        """Search for symbols by name or ticker fragment."""
        query = (query or "").strip()
        if not query:
            raise InvalidParameterError("query", "must not be empty")
        if len(query) > MAX_QUERY_LENGTH:
            raise InvalidParameterError("query", f"must be at most {MAX_QUERY_LENGTH} characters")
        return await self._fetch(self._provider.search(query), query)

    async def analyze_trend(self, symbol: str, period: int = 60) -> TrendAnalysis:
        """Analyze the trend of a symbol from its daily history.

        Args:
            symbol: Ticker symbol.
            period: Lookback in candles for the volume analysis (10-365).

        Returns:
            TrendAnalysis with every indicator populated.

        Raises:
            InvalidParameterError: If the symbol is empty or period is out of range.
            InsufficientDataError: If fewer than 20 candles are available.
            ProviderError: If the provider fails.
        """
        symbol = validate_symbol(symbol)
        if not 10 <= period <= 365:
            raise InvalidParameterError("period", "must be between 10 and 365")

        logger.info("Analyzing trend for %s (period %d)", symbol, period)

        history_range = self._config.analysis.trend_history_range
        candles = await self._fetch(
            self._provider.get_history(symbol, "daily", history_range), symbol
        )
        if len(candles) < MIN_ANALYSIS_CANDLES:
            raise InsufficientDataError(symbol, MIN_ANALYSIS_CANDLES, len(candles))

        closes = [c.close for c in candles]
        indicators = compute_indicators(candles)
        classification = _classify(candles, indicators)
        support, resistance = find_support_resistance(closes)

        return TrendAnalysis(
            symbol=symbol,
            period=period,
            trend=classification.trend,
            strength_score=classification.strength_score,
            current_price=closes[0],
            price_change=closes[0] - closes[1],
            volatility=indicators.bollinger.standard_deviation,
            confidence_level=classification.confidence_level,
            indicators=indicators,
            support_levels=support,
            resistance_levels=resistance,
            volume_analysis=analyze_volume(candles, period),
            recommended_action=classification.recommended_action,
        )

    async def analyze_technical(
        self,
        symbol: str,
        interval: str = "daily",
        indicators: Optional[list[str]] = None,
    ) -> TechnicalAnalysis:
        """Run a technical analysis with trading signals.

        Args:
            symbol: Ticker symbol.
            interval: Candle interval (daily, weekly, monthly).
            indicators: Indicator names to include in the result. All of
                AVAILABLE_INDICATORS when omitted. Signals and trend always
                use the full set.

        Returns:
            TechnicalAnalysis.

        Raises:
            InvalidParameterError: For an empty symbol, unknown interval or
                unknown indicator name.
            InsufficientDataError: If fewer than 20 candles are available.
            ProviderError: If the provider fails.
        """
        symbol = validate_symbol(symbol)
        _validate_interval(interval)
        requested = _validate_indicators(indicators)

        logger.info("Analyzing technicals for %s (%s)", symbol, interval)

        history_range = self._config.analysis.technical_history_ranges.get(interval, "1y")
        quote, candles = await self._fetch_quote_and_history(symbol, interval, history_range)
        if len(candles) < MIN_ANALYSIS_CANDLES:
            raise InsufficientDataError(symbol, MIN_ANALYSIS_CANDLES, len(candles))

        closes = [c.close for c in candles]
        full = compute_indicators(candles)
        classification = _classify(candles, full)
        signals = generate_signals(
            price=closes[0],
            sma50=full.sma[50],
            sma200=full.sma[200],
            rsi=full.rsi,
            macd_histogram=full.macd.histogram,
            stochastic_k=full.stochastic.k,
            stochastic_d=full.stochastic.d,
        )
        support, resistance = find_support_resistance(closes)

        return TechnicalAnalysis(
            symbol=symbol,
            name=quote.name,
            price=quote.price,
            change=quote.change,
            percent_change=quote.percent_change,
            interval=interval,
            timestamp=self._clock(),
            trend=classification.trend,
            strength_score=classification.strength_score,
            confidence_level=classification.confidence_level,
            indicators=filter_indicators(full, requested),
            signals=signals,
            support_levels=support,
            resistance_levels=resistance,
            pivot_points=pivot_points_for_series(candles),
        )

    async def predict_price(
        self,
        symbol: str,
        days: int = 7,
        history_period: str = "1y",
    ) -> PricePrediction:
        """Forecast a day-by-day price path.

        The numeric path comes from the prediction engine. When an
        enrichment agent is configured it runs as a separate task with its
        own timeout; its failure leaves ``enrichment`` empty.

        Args:
            symbol: Ticker symbol.
            days: Number of days to predict (1-30).
            history_period: Daily history range used for statistics.

        Returns:
            PricePrediction.

        Raises:
            InvalidParameterError: For an empty symbol, days out of range or
                unknown history period.
            InsufficientDataError: If fewer than 30 candles are available.
            ProviderError: If the provider fails.
        """
        symbol = validate_symbol(symbol)
        if not 1 <= days <= 30:
            raise InvalidParameterError("days", "must be between 1 and 30")
        _validate_range("history_period", history_period)

        logger.info("Predicting %s for %d days", symbol, days)

        quote, candles = await self._fetch_quote_and_history(symbol, "daily", history_period)
        if len(candles) < MIN_PREDICTION_CANDLES:
            raise InsufficientDataError(symbol, MIN_PREDICTION_CANDLES, len(candles))

        enrichment_task = None
        if self._enrichment is not None:
            enrichment_task = asyncio.create_task(asyncio.wait_for(
                self._enrichment.enrich(
                    symbol=symbol,
                    name=quote.name,
                    currency=quote.currency,
                    current_price=quote.price,
                    candles=candles,
                    days=days,
                ),
                timeout=self._config.openai.enrichment_timeout,
            ))

        closes = [c.close for c in candles]
        indicators = compute_indicators(candles)
        classification = _classify(candles, indicators)
        _, return_volatility = calculate_return_statistics(closes)

        market_tz = pytz.timezone(self._config.analysis.market_timezone)
        start_date = self._clock().astimezone(market_tz).date()

        predictions = generate_predictions(
            closes,
            days,
            classification.trend,
            classification.strength_score,
            current_price=quote.price,
            start_date=start_date,
            rng=self._rng,
            symbol=symbol,
        )

        enrichment = None
        if enrichment_task is not None:
            enrichment = await self._await_enrichment(symbol, enrichment_task)

        bollinger_std = indicators.bollinger.standard_deviation

        return PricePrediction(
            symbol=symbol,
            name=quote.name,
            currency=quote.currency,
            current_price=quote.price,
            predictions=predictions,
            trend=classification.trend,
            volatility=return_volatility,
            method=(enrichment.method if enrichment and enrichment.method else DEFAULT_METHOD),
            confidence_score=max(0.0, min(100.0, classification.strength_score)),
            factors=PredictionFactors(
                trend=classification.trend,
                rsi=indicators.rsi,
                macd=indicators.macd,
                volatility_risk="high" if bollinger_std > HIGH_VOLATILITY_THRESHOLD else "medium",
                downtrend_risk="high" if classification.trend == "bearish" else "low",
            ),
            enrichment=enrichment,
            last_updated=self._clock(),
        )

    async def _await_enrichment(
        self,
        symbol: str,
        task: "asyncio.Task[PredictionEnrichment]",
    ) -> Optional[PredictionEnrichment]:
        try:
            return await task
        except asyncio.TimeoutError:
            logger.warning("Enrichment for %s timed out", symbol)
        except EnrichmentUnavailable as e:
            logger.warning("Enrichment for %s unavailable: %s", symbol, e)
        except Exception as e:
            # Enrichment is advisory; any collaborator failure drops it
            logger.warning("Enrichment for %s failed: %r", symbol, e)
        return None

    async def _profile_or_empty(self, symbol: str) -> CompanyProfile:
        try:
            return await self._fetch(self._provider.get_profile(symbol), symbol)
        except StockAnalyzerError as e:
            logger.warning("Company profile for %s unavailable: %s", symbol, e)
            return CompanyProfile(symbol=symbol)

    async def analyze_portfolio(
        self,
        holdings: list[Union[Holding, dict]],
    ) -> PortfolioPerformance:
        """Value a portfolio and summarise its sector allocation and beta.

        Quotes and company profiles for all holdings are fetched
        concurrently. Profile failures are logged and ignored.

        Args:
            holdings: Holdings as Holding models or plain dicts.

        Returns:
            PortfolioPerformance.

        Raises:
            InvalidParameterError: If the list is empty or a holding is invalid.
            ProviderError: If a quote lookup fails.
        """
        if not holdings:
            raise InvalidParameterError("holdings", "at least one holding is required")

        try:
            positions = [
                h if isinstance(h, Holding) else Holding.model_validate(h)
                for h in holdings
            ]
        except ValidationError as e:
            raise InvalidParameterError("holdings", str(e)) from e

        positions = [
            p.model_copy(update={"symbol": validate_symbol(p.symbol)})
            for p in positions
        ]
        symbols = [p.symbol for p in positions]

        logger.info("Analyzing portfolio of %d holdings", len(positions))

        quotes, profiles = await asyncio.gather(
            self._fetch(
                asyncio.gather(*(self._provider.get_quote(s) for s in symbols)),
                ", ".join(symbols),
            ),
            asyncio.gather(*(self._profile_or_empty(s) for s in symbols)),
        )

        values = [p.quantity * q.price for p, q in zip(positions, quotes)]
        total_value = sum(values)

        performances = []
        total_gain = 0.0
        for position, quote, value in zip(positions, quotes, values):
            purchase_price = position.purchase_price or quote.price
            gain = value - position.quantity * purchase_price
            total_gain += gain

            gain_percent = (quote.price / purchase_price - 1) * 100 if purchase_price > 0 else 0.0
            weight = value / total_value * 100 if total_value > 0 else 0.0

            performances.append(HoldingPerformance(
                symbol=position.symbol,
                name=quote.name,
                quantity=position.quantity,
                purchase_price=purchase_price,
                current_price=quote.price,
                total_value=value,
                gain_loss=gain,
                gain_loss_percent=gain_percent,
                weight=min(100.0, weight),
            ))

        cost_basis = total_value - total_gain
        total_change_percent = total_gain / cost_basis * 100 if cost_basis != 0 else 0.0

        sector_allocation: dict[str, float] = {}
        beta_sum = 0.0
        beta_weight = 0.0
        for performance, profile in zip(performances, profiles):
            if profile.sector:
                sector_allocation[profile.sector] = (
                    sector_allocation.get(profile.sector, 0.0) + performance.weight
                )
            if profile.beta is not None:
                beta_sum += profile.beta * performance.weight
                beta_weight += performance.weight

        return PortfolioPerformance(
            total_value=total_value,
            total_change=total_gain,
            total_change_percent=total_change_percent,
            holdings=performances,
            sector_allocation=sector_allocation,
            weighted_beta=beta_sum / beta_weight if beta_weight > 0 else None,
            currency=quotes[0].currency,
            last_updated=self._clock(),
        )
