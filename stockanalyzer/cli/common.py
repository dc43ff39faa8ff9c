"""Shared helpers for StockAnalyzer CLI commands."""

import asyncio
import json
import logging
import random
import re
from typing import Any, Awaitable, Optional

import click
from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from stockanalyzer.config import AppConfig
from stockanalyzer.errors import StockAnalyzerError

console = Console()


def setup_logging(level: str) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def get_config(ctx: click.Context) -> AppConfig:
    """Config loaded by the root command, or defaults."""
    obj = ctx.find_root().obj or {}
    return obj.get("config") or AppConfig()


def get_provider():
    """Create the market data provider."""
    from stockanalyzer.providers.yahoo import YahooFinanceProvider

    return YahooFinanceProvider()


def get_service(
    config: AppConfig,
    seed: Optional[int] = None,
    use_ai: bool = False,
):
    """Build a StockAnalysisService for one command.

    Args:
        config: Application config.
        seed: Prediction seed; overrides ``analysis.prediction_seed``.
        use_ai: Attach the LLM enrichment agent.
    """
    from stockanalyzer.analysis.service import StockAnalysisService

    enrichment = None
    if use_ai:
        from stockanalyzer.agents.enrichment import PredictionEnrichmentAgent

        enrichment = PredictionEnrichmentAgent(model=config.openai.model)

    rng = random.Random(seed) if seed is not None else None

    return StockAnalysisService(
        provider=get_provider(),
        enrichment=enrichment,
        config=config,
        rng=rng,
    )


def print_error(message: str, title: str = "Error") -> None:
    """Render an error panel."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def run_async(coro: Awaitable[Any]) -> Any:
    """Run a service coroutine to completion.

    The service bounds each provider call by ``provider.timeout`` and the
    enrichment by ``openai.enrichment_timeout``, so no outer deadline is
    applied here. StockAnalyzer errors are rendered as an error panel and
    exit with status 1.
    """
    try:
        return asyncio.run(coro)
    except StockAnalyzerError as e:
        title = re.sub(r"(?<!^)(?=[A-Z])", " ", type(e).__name__)
        print_error(e.message, title=title)
        raise SystemExit(1)


def echo_json(result: Any) -> None:
    """Dump a model (or list of models) as JSON on stdout."""
    if isinstance(result, BaseModel):
        data = result.model_dump(mode="json")
    else:
        data = [item.model_dump(mode="json") for item in result]
    click.echo(json.dumps(data, indent=2))


def color_for(label: str) -> str:
    """Rich color for a trend label, verdict or action."""
    if label in ("bullish", "buy"):
        return "green"
    if label in ("bearish", "sell"):
        return "red"
    return "yellow"
