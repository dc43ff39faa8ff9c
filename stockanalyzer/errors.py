"""Error types raised by StockAnalyzer operations."""


class StockAnalyzerError(Exception):
    """Base class for all StockAnalyzer errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidParameterError(StockAnalyzerError, ValueError):
    """The caller supplied an out-of-contract value."""

    status_code = 400

    def __init__(self, parameter: str, reason: str):
        super().__init__(f"Invalid parameter '{parameter}': {reason}")
        self.parameter = parameter


class InsufficientDataError(StockAnalyzerError):
    """The provider returned fewer candles than an operation needs."""

    status_code = 422

    def __init__(self, symbol: str, required: int, available: int):
        super().__init__(
            f"Insufficient data for {symbol}: need at least {required} candles, got {available}"
        )
        self.symbol = symbol
        self.required = required
        self.available = available


class ProviderError(StockAnalyzerError):
    """The market data provider failed or returned malformed data."""

    status_code = 502

    def __init__(self, provider: str, message: str):
        super().__init__(f"Error calling {provider}: {message}")
        self.provider = provider


class NotFoundError(ProviderError):
    """The provider has no data for the requested symbol."""

    status_code = 404

    def __init__(self, provider: str, symbol: str):
        super().__init__(provider, f"no data found for {symbol}")
        self.symbol = symbol


class EnrichmentUnavailable(StockAnalyzerError):
    """The LLM enrichment collaborator failed or returned unusable output."""

    status_code = 502
