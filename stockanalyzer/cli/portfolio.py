"""Portfolio command for StockAnalyzer CLI.

Values a set of holdings given on the command line and shows allocation
and risk.
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


def parse_holding(value: str) -> dict:
    """Parse ``SYMBOL:QTY[@PRICE]`` into a holding dict.

    Raises:
        click.BadParameter: If the value is malformed.
    """
    symbol, sep, rest = value.partition(":")
    if not sep or not symbol.strip() or not rest.strip():
        raise click.BadParameter(f"'{value}' is not SYMBOL:QTY[@PRICE]")

    quantity_str, _, price_str = rest.partition("@")
    try:
        holding = {"symbol": symbol.strip().upper(), "quantity": float(quantity_str)}
        if price_str:
            holding["purchase_price"] = float(price_str)
    except ValueError:
        raise click.BadParameter(f"'{value}' has a non-numeric quantity or price")

    return holding


@click.command()
@click.argument("holdings", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@click.pass_context
def portfolio(ctx: click.Context, holdings: tuple[str, ...], as_json: bool) -> None:
    """Value a portfolio of holdings.

    Each HOLDING is SYMBOL:QUANTITY, optionally with @PURCHASE_PRICE.
    Without a purchase price the current price is used as cost.

    \b
    Examples:
      stockanalyzer portfolio AAPL:10
      stockanalyzer portfolio AAPL:10@150 MSFT:5@300 --json
    """
    parsed = [parse_holding(h) for h in holdings]

    config = get_config(ctx)
    service = get_service(config)

    result = run_async(service.analyze_portfolio(parsed))

    if as_json:
        echo_json(result)
        return

    table = Table(
        title=f"Portfolio ({len(result.holdings)} holdings)",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Symbol", style="bold")
    table.add_column("Qty", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Weight", justify="right")

    for h in result.holdings:
        color = "green" if h.gain_loss >= 0 else "red"
        table.add_row(
            h.symbol,
            f"{h.quantity:g}",
            f"{h.purchase_price:.2f}",
            f"{h.current_price:.2f}",
            f"{h.total_value:,.2f}",
            f"[{color}]{h.gain_loss:+,.2f} ({h.gain_loss_percent:+.2f}%)[/{color}]",
            f"{h.weight:.1f}%",
        )

    console.print(table)

    total_color = "green" if result.total_change >= 0 else "red"
    output_lines = [
        f"[bold]Total Value:[/bold] {result.total_value:,.2f} {result.currency}",
        f"[bold]Total P&L:[/bold] [{total_color}]{result.total_change:+,.2f} "
        f"({result.total_change_percent:+.2f}%)[/{total_color}]",
    ]

    if result.weighted_beta is not None:
        output_lines.append(f"[bold]Weighted Beta:[/bold] {result.weighted_beta:.2f}")

    if result.sector_allocation:
        output_lines.append("\n[bold]Sectors:[/bold]")
        for sector, weight in sorted(result.sector_allocation.items(), key=lambda x: -x[1]):
            output_lines.append(f"  {sector:24} {weight:5.1f}%")

    console.print(Panel(
        "\n".join(output_lines),
        title="[bold cyan]Portfolio Summary[/bold cyan]",
        border_style="cyan",
    ))
