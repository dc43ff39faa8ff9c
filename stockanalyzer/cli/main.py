"""Main CLI entry point for StockAnalyzer.

Defines the root ``stockanalyzer`` group: it loads the TOML config,
configures logging and dispatches to the lazily imported command modules.
"""

import click
from rich.console import Console
from rich.panel import Panel

# Console for rich output
console = Console()


class LazyGroup(click.Group):
    """Root group whose subcommands are imported on first use.

    A command module is imported when one of its commands is first
    resolved, not when the group is built.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Register ``lazy_subcommands``: command name to defining module path."""
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(set(super().list_commands(ctx)) | set(self._lazy_subcommands))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = self.commands.get(cmd_name)
        if command is None and cmd_name in self._lazy_subcommands:
            command = self._lazy_load(cmd_name)
        return command

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Import the command module and register the matching command.

        Command functions are named ``<name>_cmd`` (``quote_cmd``,
        ``quotes_cmd``, ...), so the lookup goes by ``Command.name``.
        """
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        matches = [
            attr for attr in vars(module).values()
            if isinstance(attr, click.Command) and attr.name == cmd_name
        ]
        if not matches:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(matches[0])
        return matches[0]


# Command name -> module that defines it
LAZY_SUBCOMMANDS = {
    # Market data: single and batch quotes, details, candles, symbol lookup
    "quote": "stockanalyzer.cli.data",
    "quotes": "stockanalyzer.cli.data",
    "details": "stockanalyzer.cli.data",
    "history": "stockanalyzer.cli.data",
    "search": "stockanalyzer.cli.data",
    # Indicator-driven analysis and forecasting
    "trend": "stockanalyzer.cli.analyze",
    "technical": "stockanalyzer.cli.analyze",
    "predict": "stockanalyzer.cli.analyze",
    # Holdings valuation
    "portfolio": "stockanalyzer.cli.portfolio",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="stockanalyzer")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """StockAnalyzer - Market data lookups and technical analysis.

    Fetches quotes and price history, classifies trends, generates
    trading signals, forecasts prices and values portfolios.

    \b
    Quick Start:
      stockanalyzer quote AAPL            # Latest quote
      stockanalyzer quotes AAPL MSFT      # Several quotes at once
      stockanalyzer details AAPL          # Analyst targets and margins
      stockanalyzer trend AAPL            # Trend analysis
      stockanalyzer technical AAPL        # Indicators and signals
      stockanalyzer predict AAPL -d 5     # 5-day price forecast
    """
    from stockanalyzer.cli.common import setup_logging
    from stockanalyzer.config import load_config
    from stockanalyzer.errors import InvalidParameterError

    ctx.ensure_object(dict)

    try:
        config = load_config()
    except InvalidParameterError as e:
        console.print(Panel(
            f"[red]{e.message}[/red]",
            title="[bold red]Configuration Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    setup_logging(log_level or config.logging.level)
    ctx.obj["config"] = config


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
