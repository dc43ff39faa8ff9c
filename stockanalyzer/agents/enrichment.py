"""Prediction Enrichment Agent.

This agent sends recent price history to an LLM and asks for a structured
forecast. Its output is advisory: the numeric prediction never depends on
it, and any failure surfaces as EnrichmentUnavailable.
"""

import json
import logging
import re
from typing import Optional

from agents import Agent

from stockanalyzer.agents.base import create_agent, get_api_key, run_agent_async
from stockanalyzer.errors import EnrichmentUnavailable
from stockanalyzer.models import Candle, PredictionEnrichment

logger = logging.getLogger(__name__)

# Number of recent candles sent to the model
HISTORY_LIMIT = 120

ENRICHMENT_INSTRUCTIONS = """You are a quantitative analyst forecasting equity prices.
You receive recent daily price history for one stock as JSON.

Analyze the history with standard time-series methods (trend estimation,
exponential smoothing, volatility estimation) and forecast the closing price
for each requested day.

Respond with a single JSON object and nothing else:
{
  "predicted_prices": [
    {"date": "YYYY-MM-DD", "price": number, "low": number, "high": number}
  ],
  "confidence_score": number between 0.0 and 1.0,
  "trend": "bullish" | "bearish" | "neutral",
  "market_conditions": "short description of the market environment",
  "method": "short description of the forecasting method"
}
"""

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


def parse_enrichment_output(text: str) -> PredictionEnrichment:
    """Extract and validate the JSON object in an agent response.

    Accepts a fenced ```json block or a bare object anywhere in the text.

    Args:
        text: Raw agent output.

    Returns:
        Validated PredictionEnrichment.

    Raises:
        EnrichmentUnavailable: If no valid JSON object is found.
    """
    if not text:
        raise EnrichmentUnavailable("Empty enrichment response")

    match = _FENCED_JSON.search(text)
    if match:
        payload = match.group(1)
    else:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise EnrichmentUnavailable("No JSON object in enrichment response")
        payload = text[start:end + 1]

    try:
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise ValueError("top-level JSON value is not an object")
        return PredictionEnrichment.model_validate(data)
    except ValueError as e:
        raise EnrichmentUnavailable(f"Malformed enrichment response: {e}") from e


def build_enrichment_prompt(
    symbol: str,
    name: str,
    currency: str,
    current_price: float,
    candles: list[Candle],
    days: int,
) -> str:
    """Build the user message for a prediction request."""
    # Chronological order reads more naturally for the model
    history = [
        {"date": c.date.isoformat(), "close": c.close, "volume": c.volume}
        for c in reversed(candles[:HISTORY_LIMIT])
    ]
    data = {
        "symbol": symbol,
        "name": name,
        "currency": currency,
        "current_price": current_price,
        "prediction_days": days,
        "price_history": history,
    }
    return (
        f"Forecast the closing price of {symbol} for the next {days} days.\n\n"
        f"{json.dumps(data, indent=2)}"
    )


class PredictionEnrichmentAgent:
    """Agent that proposes an LLM forecast for a price prediction."""

    def __init__(self, model: Optional[str] = None):
        """Initialize the Prediction Enrichment Agent.

        Args:
            model: Optional model override.
        """
        self._agent = self._create_agent(model)

    def _create_agent(self, model: Optional[str]) -> Agent:
        """Create the underlying agent."""
        return create_agent(
            name="Prediction Enrichment Agent",
            instructions=ENRICHMENT_INSTRUCTIONS,
            model=model,
        )

    async def enrich(
        self,
        symbol: str,
        name: str,
        currency: str,
        current_price: float,
        candles: list[Candle],
        days: int,
    ) -> PredictionEnrichment:
        """Ask the model for a structured forecast.

        Args:
            symbol: Ticker symbol.
            name: Company name.
            currency: Quote currency.
            current_price: Latest price.
            candles: Candle series, newest-first.
            days: Number of days to forecast.

        Returns:
            Validated PredictionEnrichment.

        Raises:
            EnrichmentUnavailable: If no API key is set, the agent fails or
                its output is unusable.
        """
        if not get_api_key():
            raise EnrichmentUnavailable("OPENAI_API_KEY is not set")

        prompt = build_enrichment_prompt(symbol, name, currency, current_price, candles, days)

        try:
            output = await run_agent_async(self._agent, prompt)
        except Exception as e:
            raise EnrichmentUnavailable(f"Enrichment agent failed: {e}") from e

        return parse_enrichment_output(str(output))
