"""AI agents for StockAnalyzer.

This module provides the LLM enrichment agent used by price predictions.
"""

from stockanalyzer.agents.base import (
    create_agent,
    run_agent_async,
    get_model,
    get_api_key,
)
from stockanalyzer.agents.enrichment import (
    PredictionEnrichmentAgent,
    build_enrichment_prompt,
    parse_enrichment_output,
)

__all__ = [
    # Base utilities
    "create_agent",
    "run_agent_async",
    "get_model",
    "get_api_key",
    # Agents
    "PredictionEnrichmentAgent",
    # Utility functions
    "build_enrichment_prompt",
    "parse_enrichment_output",
]
