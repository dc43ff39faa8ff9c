"""Tests for the StockAnalyzer CLI.

Commands run against the in-memory provider through click's CliRunner.
"""

import asyncio
import json

import click
import pytest
from click.testing import CliRunner

from stockanalyzer.cli import cli
from stockanalyzer.cli.portfolio import parse_holding
from stockanalyzer.models import PredictionEnrichment


@pytest.fixture
def runner(provider, tmp_path, monkeypatch):
    monkeypatch.setenv("STOCKANALYZER_CONFIG", str(tmp_path / "config.toml"))
    monkeypatch.delenv("STOCKANALYZER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("STOCKANALYZER_TIMEOUT", raising=False)
    monkeypatch.setattr("stockanalyzer.cli.common.get_provider", lambda: provider)
    return CliRunner()


def _json(result):
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class DelayedAgent:
    """Enrichment agent stand-in that answers after a delay."""

    delay = 0.5

    def __init__(self, model=None):
        self.model = model

    async def enrich(self, **kwargs):
        await asyncio.sleep(self.delay)
        return PredictionEnrichment(method="LLM blend")


class ResetAgent:
    def __init__(self, model=None):
        self.model = model

    async def enrich(self, **kwargs):
        raise RuntimeError("connection reset")


class TestDataCommands:

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in (
            "quote", "quotes", "details", "history", "search",
            "trend", "technical", "predict", "portfolio",
        ):
            assert name in result.output

    def test_quote_json(self, runner):
        data = _json(runner.invoke(cli, ["quote", "aapl", "--json"]))

        assert data["symbol"] == "AAPL"
        assert data["name"] == "Apple Inc."

    def test_quote_panel(self, runner):
        result = runner.invoke(cli, ["quote", "AAPL"])

        assert result.exit_code == 0
        assert "Apple Inc." in result.output

    def test_history_json(self, runner):
        data = _json(runner.invoke(cli, ["history", "AAPL", "-r", "1y", "--json"]))

        assert len(data) == 260
        assert data[0]["date"] == "2024-03-15"

    def test_history_rejects_unknown_range(self, runner):
        result = runner.invoke(cli, ["history", "AAPL", "-r", "3w"])

        assert result.exit_code == 2

    def test_search(self, runner):
        data = _json(runner.invoke(cli, ["search", "corp", "--json"]))

        assert [r["symbol"] for r in data] == ["XYZ"]

    def test_search_without_results(self, runner):
        result = runner.invoke(cli, ["search", "zzzz"])

        assert result.exit_code == 0
        assert "No symbols found" in result.output

    def test_unknown_symbol_exits_with_error(self, runner):
        result = runner.invoke(cli, ["quote", "NOPE"])

        assert result.exit_code == 1
        assert "no data found for NOPE" in result.output

    def test_quotes_json(self, runner):
        data = _json(runner.invoke(cli, ["quotes", "xyz", "AAPL", "--json"]))

        assert [q["symbol"] for q in data] == ["XYZ", "AAPL"]

    def test_quotes_table(self, runner):
        result = runner.invoke(cli, ["quotes", "AAPL", "XYZ"])

        assert result.exit_code == 0
        assert "AAPL" in result.output
        assert "XYZ" in result.output

    def test_quotes_requires_symbols(self, runner):
        result = runner.invoke(cli, ["quotes"])

        assert result.exit_code == 2

    def test_quotes_unknown_symbol(self, runner):
        result = runner.invoke(cli, ["quotes", "AAPL", "NOPE"])

        assert result.exit_code == 1
        assert "no data found for NOPE" in result.output

    def test_details_json(self, runner):
        data = _json(runner.invoke(cli, ["details", "aapl", "--json"]))

        assert data["symbol"] == "AAPL"
        assert data["name"] == "Apple Inc."
        assert data["target_mean_price"] is None

    def test_details_panel(self, runner):
        result = runner.invoke(cli, ["details", "AAPL"])

        assert result.exit_code == 0
        assert "Recommendation" in result.output
        assert "Profit margin" in result.output


class TestAnalyzeCommands:

    def test_trend_json(self, runner):
        data = _json(runner.invoke(cli, ["trend", "AAPL", "--json"]))

        assert data["symbol"] == "AAPL"
        assert data["period"] == 60
        assert data["trend"] in ("bullish", "bearish", "neutral")
        assert len(data["support_levels"]) == 2

    def test_trend_panel(self, runner):
        result = runner.invoke(cli, ["trend", "XYZ", "-p", "30"])

        assert result.exit_code == 0
        assert "Trend Analysis" in result.output

    def test_trend_period_out_of_range(self, runner):
        result = runner.invoke(cli, ["trend", "AAPL", "-p", "5"])

        assert result.exit_code == 2

    def test_technical_indicator_filter(self, runner):
        data = _json(runner.invoke(cli, ["technical", "AAPL", "--indicators", "rsi,macd", "--json"]))

        assert data["indicators"]["rsi"] is not None
        assert data["indicators"]["macd"] is not None
        assert data["indicators"]["sma"] is None
        assert len(data["signals"]["signals"]) == 5

    def test_technical_table(self, runner):
        result = runner.invoke(cli, ["technical", "AAPL"])

        assert result.exit_code == 0
        assert "Signals" in result.output
        assert "Overall" in result.output

    def test_technical_unknown_indicator(self, runner):
        result = runner.invoke(cli, ["technical", "AAPL", "--indicators", "vwap"])

        assert result.exit_code == 1
        assert "vwap" in result.output

    def test_predict_seed_is_reproducible(self, runner):
        args = ["predict", "AAPL", "-d", "3", "--seed", "11", "--json"]

        first = _json(runner.invoke(cli, args))
        second = _json(runner.invoke(cli, args))

        assert len(first["predictions"]) == 3
        assert first["predictions"] == second["predictions"]
        assert first["enrichment"] is None

    def test_predict_table(self, runner):
        result = runner.invoke(cli, ["predict", "XYZ", "-d", "2"])

        assert result.exit_code == 0
        assert "Price Prediction" in result.output

    def test_predict_days_out_of_range(self, runner):
        result = runner.invoke(cli, ["predict", "AAPL", "-d", "31"])

        assert result.exit_code == 2

    def test_slow_ai_forecast_is_not_cut_by_provider_timeout(self, runner, monkeypatch):
        monkeypatch.setenv("STOCKANALYZER_TIMEOUT", "0.2")
        monkeypatch.setattr("stockanalyzer.agents.enrichment.PredictionEnrichmentAgent", DelayedAgent)

        data = _json(runner.invoke(cli, ["predict", "AAPL", "-d", "3", "--ai", "--seed", "1", "--json"]))

        assert data["method"] == "LLM blend"
        assert data["enrichment"]["method"] == "LLM blend"
        assert len(data["predictions"]) == 3

    def test_failing_ai_forecast_keeps_numeric_path(self, runner, monkeypatch):
        monkeypatch.setattr("stockanalyzer.agents.enrichment.PredictionEnrichmentAgent", ResetAgent)

        data = _json(runner.invoke(cli, ["predict", "AAPL", "-d", "3", "--ai", "--seed", "1", "--json"]))

        assert data["enrichment"] is None
        assert len(data["predictions"]) == 3


class TestPortfolioCommand:

    def test_portfolio_json(self, runner):
        data = _json(runner.invoke(cli, ["portfolio", "AAPL:10@100", "XYZ:5", "--json"]))

        symbols = [h["symbol"] for h in data["holdings"]]
        assert symbols == ["AAPL", "XYZ"]
        assert sum(h["weight"] for h in data["holdings"]) == pytest.approx(100)
        assert data["holdings"][1]["gain_loss"] == pytest.approx(0)

    def test_portfolio_summary(self, runner):
        result = runner.invoke(cli, ["portfolio", "AAPL:1"])

        assert result.exit_code == 0
        assert "Portfolio Summary" in result.output

    def test_malformed_holding(self, runner):
        result = runner.invoke(cli, ["portfolio", "AAPL"])

        assert result.exit_code == 2


class TestParseHolding:

    def test_quantity_only(self):
        assert parse_holding("aapl:10") == {"symbol": "AAPL", "quantity": 10.0}

    def test_with_purchase_price(self):
        assert parse_holding("MSFT:2.5@310.20") == {
            "symbol": "MSFT",
            "quantity": 2.5,
            "purchase_price": 310.2,
        }

    @pytest.mark.parametrize("value", ["AAPL", ":10", "AAPL:", "AAPL:ten", "AAPL:1@cheap"])
    def test_malformed(self, value):
        with pytest.raises(click.BadParameter):
            parse_holding(value)


class TestConfiguration:

    def test_invalid_config_file(self, runner, tmp_path):
        (tmp_path / "config.toml").write_text('[logging]\nlevel = "LOUD"\n')

        result = runner.invoke(cli, ["quote", "AAPL"])

        assert result.exit_code == 1
        assert "Configuration Error" in result.output
