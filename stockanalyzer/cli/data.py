"""Data commands for StockAnalyzer CLI.

Handles fetching and displaying market data including single and batch
quotes, company details, historical OHLCV data and symbol search.
"""

import click
from rich.panel import Panel
from rich.table import Table

from stockanalyzer.cli.common import (
    console,
    echo_json,
    get_config,
    get_service,
    run_async,
)
from stockanalyzer.providers.base import INTERVALS, RANGES


@click.command(name="quote")
@click.argument("symbol")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_context
def quote_cmd(ctx: click.Context, symbol: str, as_json: bool) -> None:
    """Show the latest quote for a symbol.

    SYMBOL is the ticker symbol (e.g., AAPL, MSFT, 7203.T).

    \b
    Examples:
      stockanalyzer quote AAPL
      stockanalyzer quote MSFT --json
    """
    config = get_config(ctx)
    service = get_service(config)

    quote = run_async(service.get_quote(symbol))

    if as_json:
        echo_json(quote)
        return

    color = "green" if quote.change >= 0 else "red"
    console.print(Panel(
        f"[bold]{quote.symbol}[/bold] - {quote.name}\n\n"
        f"[bold]Price:[/bold] {quote.price:.2f} {quote.currency}\n"
        f"[bold]Change:[/bold] [{color}]{quote.change:+.2f} "
        f"({quote.percent_change:+.2f}%)[/{color}]\n"
        f"[dim]As of {quote.timestamp:%Y-%m-%d %H:%M %Z}[/dim]",
        title="[bold cyan]Quote[/bold cyan]",
        border_style="cyan",
    ))


@click.command(name="history")
@click.argument("symbol")
@click.option(
    "-i", "--interval",
    default="daily",
    type=click.Choice(INTERVALS),
    help="Candle interval (default: daily)",
)
@click.option(
    "-r", "--range", "history_range",
    default="1mo",
    type=click.Choice(RANGES),
    help="History range (default: 1mo)",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_context
def history_cmd(
    ctx: click.Context,
    symbol: str,
    interval: str,
    history_range: str,
    as_json: bool,
) -> None:
    """Fetch and display historical OHLCV data for a symbol.

    SYMBOL is the ticker symbol (e.g., AAPL, MSFT).

    \b
    Examples:
      stockanalyzer history AAPL                 # Last month, daily candles
      stockanalyzer history AAPL -r 1y -i weekly # Weekly candles for a year
    """
    config = get_config(ctx)
    service = get_service(config)

    candles = run_async(service.get_history(symbol, interval, history_range))

    if as_json:
        echo_json(candles)
        return

    table = Table(
        title=f"{symbol.upper()} - {interval} ({len(candles)} candles)",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Date", style="dim")
    table.add_column("Open", justify="right")
    table.add_column("High", justify="right", style="green")
    table.add_column("Low", justify="right", style="red")
    table.add_column("Close", justify="right", style="bold")
    table.add_column("Volume", justify="right")

    for candle in candles:
        table.add_row(
            candle.date.isoformat(),
            f"{candle.open:.2f}",
            f"{candle.high:.2f}",
            f"{candle.low:.2f}",
            f"{candle.close:.2f}",
            f"{candle.volume:,}",
        )

    console.print(table)


@click.command(name="search")
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_context
def search_cmd(ctx: click.Context, query: str, as_json: bool) -> None:
    """Search for symbols by company name or ticker.

    \b
    Examples:
      stockanalyzer search apple
      stockanalyzer search toyota --json
    """
    config = get_config(ctx)
    service = get_service(config)

    results = run_async(service.search(query))

    if as_json:
        echo_json(results)
        return

    if not results:
        console.print(f"[yellow]No symbols found for '{query}'[/yellow]")
        return

    table = Table(title=f"Search: {query}", show_header=True, header_style="bold cyan")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Exchange", style="dim")
    table.add_column("Type", style="dim")

    for result in results:
        table.add_row(result.symbol, result.name, result.exchange, result.type)

    console.print(table)


@click.command(name="quotes")
@click.argument("symbols", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_context
def quotes_cmd(ctx: click.Context, symbols: tuple[str, ...], as_json: bool) -> None:
    """Show the latest quotes for several symbols at once.

    \b
    Examples:
      stockanalyzer quotes AAPL MSFT GOOGL
      stockanalyzer quotes 7203.T 6758.T --json
    """
    config = get_config(ctx)
    service = get_service(config)

    quotes = run_async(service.get_quotes(list(symbols)))

    if as_json:
        echo_json(quotes)
        return

    table = Table(title="Quotes", show_header=True, header_style="bold cyan")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Price", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Change %", justify="right")

    for quote in quotes:
        color = "green" if quote.change >= 0 else "red"
        table.add_row(
            quote.symbol,
            quote.name,
            f"{quote.price:.2f} {quote.currency}",
            f"[{color}]{quote.change:+.2f}[/{color}]",
            f"[{color}]{quote.percent_change:+.2f}%[/{color}]",
        )

    console.print(table)


def _fmt(value, fmt: str = ",.2f") -> str:
    if value is None:
        return "[dim]-[/dim]"
    return f"{value:{fmt}}"


@click.command(name="details")
@click.argument("symbol")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_context
def details_cmd(ctx: click.Context, symbol: str, as_json: bool) -> None:
    """Show analyst targets, margins and valuation figures for a symbol.

    \b
    Examples:
      stockanalyzer details AAPL
      stockanalyzer details MSFT --json
    """
    config = get_config(ctx)
    service = get_service(config)

    details = run_async(service.get_details(symbol))

    if as_json:
        echo_json(details)
        return

    table = Table(
        title=f"{details.symbol} - {details.name}",
        show_header=False,
        box=None,
    )
    table.add_column("Field", style="bold")
    table.add_column("Value", justify="right")

    rows = [
        ("Recommendation", details.recommendation_key or "[dim]-[/dim]"),
        ("Analysts", _fmt(details.number_of_analyst_opinions, "d")),
        ("Target (low / mean / high)", " / ".join(
            _fmt(v) for v in (details.target_low_price, details.target_mean_price, details.target_high_price)
        )),
        ("Market cap", _fmt(details.market_cap, ",.0f")),
        ("Trailing / forward P/E", f"{_fmt(details.trailing_pe)} / {_fmt(details.forward_pe)}"),
        ("52-week range", f"{_fmt(details.fifty_two_week_low)} - {_fmt(details.fifty_two_week_high)}"),
        ("Gross margin", _fmt(details.gross_margins, ".2%")),
        ("Operating margin", _fmt(details.operating_margins, ".2%")),
        ("Profit margin", _fmt(details.profit_margins, ".2%")),
        ("Dividend yield", _fmt(details.dividend_yield)),
        ("Beta", _fmt(details.beta)),
    ]
    for field, value in rows:
        table.add_row(field, value)

    console.print(Panel(table, title="[bold cyan]Details[/bold cyan]", border_style="cyan"))
