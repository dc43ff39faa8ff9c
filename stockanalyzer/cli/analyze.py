"""Analysis commands for StockAnalyzer CLI.

Runs trend, technical and price prediction analysis and renders the
results with rich.
"""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from stockanalyzer.cli.common import (
    color_for,
    console,
    echo_json,
    get_config,
    get_service,
    run_async,
)
from stockanalyzer.analysis.service import AVAILABLE_INDICATORS
from stockanalyzer.providers.base import INTERVALS, RANGES


def _parse_indicators(indicators_str: Optional[str]) -> Optional[list[str]]:
    """Split a comma-separated indicator list; None selects all."""
    if not indicators_str:
        return None
    return [ind.strip().lower() for ind in indicators_str.split(",") if ind.strip()]


def _indicator_lines(indicators) -> list[str]:
    """Format the populated fields of an IndicatorSet."""
    lines = []

    if indicators.sma:
        values = " | ".join(f"{p}: {v:.2f}" for p, v in sorted(indicators.sma.items()))
        lines.append(f"[bold]SMA:[/bold] {values}")

    if indicators.ema:
        values = " | ".join(f"{p}: {v:.2f}" for p, v in sorted(indicators.ema.items()))
        lines.append(f"[bold]EMA:[/bold] {values}")

    if indicators.rsi is not None:
        lines.append(f"[bold]RSI (14):[/bold] {indicators.rsi:.2f}")

    if indicators.macd:
        macd = indicators.macd
        lines.append(
            f"[bold]MACD:[/bold] {macd.line:.4f} | Signal: {macd.signal:.4f} | "
            f"Hist: {macd.histogram:.4f}"
        )

    if indicators.bollinger:
        bb = indicators.bollinger
        lines.append(
            f"[bold]Bollinger Bands:[/bold] Upper: {bb.upper:.2f} | "
            f"Middle: {bb.middle:.2f} | Lower: {bb.lower:.2f} | Width: {bb.width:.4f}"
        )

    if indicators.stochastic:
        lines.append(
            f"[bold]Stochastic:[/bold] %K {indicators.stochastic.k:.2f} | "
            f"%D {indicators.stochastic.d:.2f}"
        )

    if indicators.atr is not None:
        lines.append(f"[bold]ATR (14):[/bold] {indicators.atr:.2f}")

    return lines


def _levels_line(support: list[float], resistance: list[float]) -> str:
    support_str = ", ".join(f"{level:.2f}" for level in support) or "N/A"
    resistance_str = ", ".join(f"{level:.2f}" for level in resistance) or "N/A"
    return (
        f"[bold]Support:[/bold] [green]{support_str}[/green]\n"
        f"[bold]Resistance:[/bold] [red]{resistance_str}[/red]"
    )


@click.command()
@click.argument("symbol")
@click.option(
    "-p", "--period",
    default=60,
    type=click.IntRange(10, 365),
    help="Lookback in candles for volume analysis (default: 60)",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_context
def trend(ctx: click.Context, symbol: str, period: int, as_json: bool) -> None:
    """Classify the trend of a symbol from its daily history.

    SYMBOL is the ticker symbol (e.g., AAPL, MSFT).

    \b
    Examples:
      stockanalyzer trend AAPL
      stockanalyzer trend MSFT -p 90 --json
    """
    config = get_config(ctx)
    service = get_service(config)

    if not as_json:
        console.print(f"[dim]Analyzing trend for {symbol.upper()}...[/dim]")

    result = run_async(service.analyze_trend(symbol, period=period))

    if as_json:
        echo_json(result)
        return

    trend_color = color_for(result.trend)
    action_color = color_for(result.recommended_action)
    volume = result.volume_analysis

    output_lines = [
        f"[bold]{result.symbol}[/bold] - {result.current_price:.2f} "
        f"({result.price_change:+.2f})\n",
        f"[bold]Trend:[/bold] [{trend_color}]{result.trend.upper()}[/{trend_color}] "
        f"(strength {result.strength_score:.0f}/100, {result.confidence_level} confidence)",
        f"[bold]Action:[/bold] [{action_color}]{result.recommended_action.upper()}[/{action_color}]",
        f"[bold]Volatility:[/bold] {result.volatility:.2f}\n",
        *_indicator_lines(result.indicators),
        "",
        _levels_line(result.support_levels, result.resistance_levels),
        f"\n[bold]Volume:[/bold] avg {volume.average_volume:,.0f} over {result.period} candles, "
        f"recent {volume.recent_volume_change:+.1f}%",
    ]

    console.print(Panel(
        "\n".join(output_lines),
        title="[bold cyan]Trend Analysis[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.argument("symbol")
@click.option(
    "-i", "--interval",
    default="daily",
    type=click.Choice(INTERVALS),
    help="Candle interval (default: daily)",
)
@click.option(
    "--indicators",
    default=None,
    help=f"Comma-separated indicators. Available: {', '.join(AVAILABLE_INDICATORS)}",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_context
def technical(
    ctx: click.Context,
    symbol: str,
    interval: str,
    indicators: Optional[str],
    as_json: bool,
) -> None:
    """Calculate indicators and trading signals for a symbol.

    SYMBOL is the ticker symbol (e.g., AAPL, MSFT).

    \b
    Available indicators:
      sma        - Simple Moving Averages (20, 50, 200)
      ema        - Exponential Moving Averages (12, 26)
      rsi        - Relative Strength Index (14-period)
      macd       - Moving Average Convergence Divergence
      bollinger  - Bollinger Bands (20-period, 2 std dev)
      stochastic - Stochastic Oscillator (%K, %D)
      atr        - Average True Range (14-period)

    \b
    Examples:
      stockanalyzer technical AAPL
      stockanalyzer technical AAPL -i weekly
      stockanalyzer technical MSFT --indicators rsi,macd
    """
    config = get_config(ctx)
    service = get_service(config)

    if not as_json:
        console.print(f"[dim]Analyzing {symbol.upper()} ({interval})...[/dim]")

    result = run_async(
        service.analyze_technical(symbol, interval=interval, indicators=_parse_indicators(indicators)),
    )

    if as_json:
        echo_json(result)
        return

    trend_color = color_for(result.trend)
    change_color = "green" if result.change >= 0 else "red"

    output_lines = [
        f"[bold]{result.symbol}[/bold] - {result.name}",
        f"[bold]Price:[/bold] {result.price:.2f} "
        f"[{change_color}]{result.change:+.2f} ({result.percent_change:+.2f}%)[/{change_color}]\n",
        f"[bold]Trend:[/bold] [{trend_color}]{result.trend.upper()}[/{trend_color}] "
        f"(strength {result.strength_score:.0f}/100, {result.confidence_level} confidence)\n",
        *_indicator_lines(result.indicators),
        "",
        _levels_line(result.support_levels, result.resistance_levels),
    ]

    if result.pivot_points:
        pivots = " | ".join(f"{name}: {value:.2f}" for name, value in result.pivot_points.items())
        output_lines.append(f"[bold]Pivots:[/bold] {pivots}")

    console.print(Panel(
        "\n".join(output_lines),
        title="[bold cyan]Technical Analysis[/bold cyan]",
        border_style="cyan",
    ))

    table = Table(title="Signals", show_header=True, header_style="bold cyan")
    table.add_column("Source")
    table.add_column("Verdict")
    table.add_column("Strength", justify="right")
    table.add_column("Reason", style="dim")

    for signal in result.signals.signals:
        color = color_for(signal.verdict)
        table.add_row(
            signal.source,
            f"[{color}]{signal.verdict.upper()}[/{color}]",
            f"{signal.strength:.2f}",
            signal.description,
        )

    console.print(table)

    overall_color = color_for(result.signals.overall)
    console.print(
        f"[bold]Overall:[/bold] [{overall_color}]{result.signals.overall.upper()}[/{overall_color}]"
    )


@click.command()
@click.argument("symbol")
@click.option(
    "-d", "--days",
    default=7,
    type=click.IntRange(1, 30),
    help="Number of days to predict (default: 7)",
)
@click.option(
    "--history-period",
    default="1y",
    type=click.Choice(RANGES),
    help="Daily history used for return statistics (default: 1y)",
)
@click.option(
    "--seed",
    default=None,
    type=int,
    help="Random seed for a reproducible prediction path",
)
@click.option(
    "--ai",
    is_flag=True,
    default=False,
    help="Ask an LLM for a structured forecast alongside the numeric path",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_context
def predict(
    ctx: click.Context,
    symbol: str,
    days: int,
    history_period: str,
    seed: Optional[int],
    ai: bool,
    as_json: bool,
) -> None:
    """Forecast a day-by-day price path for a symbol.

    The path is a random walk around recent daily returns, biased by the
    classified trend. Unseeded runs sample a different path each time.

    \b
    Examples:
      stockanalyzer predict AAPL
      stockanalyzer predict AAPL -d 14 --seed 42
      stockanalyzer predict MSFT --ai
    """
    config = get_config(ctx)
    service = get_service(config, seed=seed, use_ai=ai)

    if not as_json:
        console.print(f"[dim]Predicting {symbol.upper()} for {days} days...[/dim]")

    result = run_async(
        service.predict_price(symbol, days=days, history_period=history_period),
    )

    if as_json:
        echo_json(result)
        return

    trend_color = color_for(result.trend)

    console.print(Panel(
        f"[bold]{result.symbol}[/bold] - {result.name}\n"
        f"[bold]Current:[/bold] {result.current_price:.2f} {result.currency}\n"
        f"[bold]Trend:[/bold] [{trend_color}]{result.trend.upper()}[/{trend_color}] "
        f"(confidence score {result.confidence_score:.0f})\n"
        f"[bold]Daily volatility:[/bold] {result.volatility * 100:.2f}%\n"
        f"[bold]Method:[/bold] {result.method}",
        title="[bold cyan]Price Prediction[/bold cyan]",
        border_style="cyan",
    ))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Date", style="dim")
    table.add_column("Price", justify="right", style="bold")
    table.add_column("Low", justify="right", style="red")
    table.add_column("High", justify="right", style="green")
    table.add_column("Confidence")

    for point in result.predictions:
        table.add_row(
            point.date.isoformat(),
            f"{point.price:.2f}",
            f"{point.range_low:.2f}",
            f"{point.range_high:.2f}",
            point.confidence,
        )

    console.print(table)

    if result.enrichment and result.enrichment.market_conditions:
        console.print(Panel(
            result.enrichment.market_conditions,
            title="[bold magenta]AI Market Conditions[/bold magenta]",
            border_style="magenta",
        ))
    elif ai and result.enrichment is None:
        console.print("[yellow]AI enrichment unavailable; showing the numeric forecast only[/yellow]")
