"""Tests for the journal CLI (CliRunner against a temporary database)."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from options_journal.cli.app import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def journal_env(tmp_path, monkeypatch):
    monkeypatch.setenv("OPTIONS_JOURNAL_DB_PATH", str(tmp_path / "journal.db"))
    monkeypatch.setenv("OPTIONS_JOURNAL_KV_DIR", str(tmp_path / "kv"))
    monkeypatch.setenv("OPTIONS_JOURNAL_OFFLINE_MODE", "true")
    monkeypatch.setenv("OPTIONS_JOURNAL_OWNER_ID", "alice")
    return tmp_path


def _add(*args: str) -> dict:
    result = runner.invoke(app, ["trade", "add", *args, "-o", "json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def _list(*args: str) -> list[dict]:
    result = runner.invoke(app, ["trade", "list", *args, "-o", "json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


class TestTradeCommands:
    def test_add_computes_break_even(self):
        trade = _add("aapl", "SAE", "Call option", "--strike", "150", "--cost", "250", "-e", "2025-06-20")
        assert trade["ticker"] == "AAPL"
        assert trade["status"] == "open"
        assert trade["pmcc_calc"] == pytest.approx(152.5)
        assert trade["expiration_date"] == "2025-06-20"

    def test_add_other_requires_custom_type(self):
        result = runner.invoke(app, ["trade", "add", "AAPL", "SAE", "Other"])
        assert result.exit_code == 1

    def test_add_other_with_custom_type(self):
        trade = _add("AAPL", "SAE", "Other", "--custom-type", "Iron condor")
        assert trade["option_type"] == "Iron condor"

    def test_add_human_output(self):
        result = runner.invoke(app, ["trade", "add", "AAPL", "SAE", "Put option", "-s", "140"])
        assert result.exit_code == 0
        assert "Added trade" in result.output

    def test_edit_recalculates(self):
        trade = _add("AAPL", "SAE", "Call option", "--strike", "150", "--cost", "250")
        result = runner.invoke(app, ["trade", "edit", trade["id"], "cost", "500", "-o", "json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["pmcc_calc"] == pytest.approx(155.0)

    def test_edit_status_rejected(self):
        trade = _add("AAPL", "SAE", "Call option")
        result = runner.invoke(app, ["trade", "edit", trade["id"], "status", "closed"])
        assert result.exit_code == 1

    def test_close_and_reopen(self):
        trade = _add("AAPL", "SAE", "Call option")
        closed = runner.invoke(app, ["trade", "close", trade["id"], "-o", "json"])
        assert json.loads(closed.output)["status"] == "closed"
        assert json.loads(closed.output)["closed_date"] is not None

        reopened = runner.invoke(app, ["trade", "reopen", trade["id"], "-o", "json"])
        assert json.loads(reopened.output)["closed_date"] is None

    def test_show_missing(self):
        result = runner.invoke(app, ["trade", "show", "nope"])
        assert result.exit_code == 1

    def test_delete_and_clear(self):
        first = _add("AAPL", "SAE", "Call option")
        _add("MSFT", "SAE", "Call option")

        assert runner.invoke(app, ["trade", "delete", first["id"]]).exit_code == 0
        assert len(_list()) == 1

        assert runner.invoke(app, ["trade", "clear", "--yes"]).exit_code == 0
        assert _list() == []

    def test_owner_scoping(self):
        _add("AAPL", "SAE", "Call option")
        assert _list("--owner", "bob") == []


class TestListCommand:
    def test_filters(self):
        _add("AAPL", "SAE", "Call option", "--strike", "150")
        _add("MSFT", "ST", "Put option", "--strike", "400")
        _add("AMD", "ST", "Call option", "--strike", "90")

        assert {t["ticker"] for t in _list("--account", "ST")} == {"MSFT", "AMD"}
        assert {t["ticker"] for t in _list("--ticker", "a")} == {"AAPL", "AMD"}
        assert {t["ticker"] for t in _list("--min-strike", "100")} == {"AAPL", "MSFT"}
        assert {t["ticker"] for t in _list("--type", "Put option")} == {"MSFT"}

    def test_sort(self):
        _add("AAPL", "SAE", "Call option", "--strike", "150")
        _add("MSFT", "ST", "Put option", "--strike", "400")
        _add("AMD", "ST", "Call option", "--strike", "90")

        assert [t["ticker"] for t in _list("--sort", "strike_price")] == ["AMD", "AAPL", "MSFT"]
        assert [t["ticker"] for t in _list("--sort", "ticker", "--desc")] == ["MSFT", "AMD", "AAPL"]

    def test_unknown_sort_field(self):
        result = runner.invoke(app, ["trade", "list", "--sort", "bogus"])
        assert result.exit_code == 1

    def test_group_orders_preferred_accounts_first(self):
        _add("AAPL", "Zeta", "Call option")
        _add("MSFT", "Robinhood", "Call option")
        _add("AMD", "SAE", "Call option")

        assert [t["account"] for t in _list("--group")] == ["SAE", "Robinhood", "Zeta"]

    def test_table_output(self):
        _add("AAPL", "SAE", "Call option")
        result = runner.invoke(app, ["trade", "list"])
        assert result.exit_code == 0
        assert "Trades (1)" in result.output


class TestReportCommands:
    def test_dashboard_json(self):
        _add("AAPL", "SAE", "Call option", "--cost", "2", "--contracts", "3")
        _add("MSFT", "SAE", "Covered call", "--strike", "100", "--cost", "1")

        result = runner.invoke(app, ["report", "dashboard", "-o", "json"])
        assert result.exit_code == 0, result.output
        summary = json.loads(result.output)["summary"]
        assert summary["total_trades"] == 2
        assert summary["open_trades"] == 2
        assert summary["total_cost"] == pytest.approx(7.0)
        assert summary["total_dollars_traded"] == pytest.approx(10006.0)

    def test_export_to_stdout(self):
        _add("AAPL", "SAE", "Call option")
        result = runner.invoke(app, ["report", "export"])
        assert result.exit_code == 0
        header, row = result.output.strip().splitlines()
        assert header.startswith("ticker,account,trading_date")
        assert row.startswith("AAPL,SAE,")

    def test_export_then_import(self, journal_env):
        _add("AAPL", "SAE", "Call option")
        path = journal_env / "trades.csv"
        assert runner.invoke(app, ["report", "export", str(path)]).exit_code == 0

        result = runner.invoke(app, ["report", "import", str(path), "--owner", "bob", "-o", "json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["imported"] == 1
        assert [t["ticker"] for t in _list("--owner", "bob")] == ["AAPL"]

    def test_import_rejects_bad_rows(self, journal_env):
        path = journal_env / "bad.csv"
        path.write_text(
            "ticker,account,trading_date,option_type,expiration_date,status,contracts,cost,strike_price,price_at_purchase\n"
            "AAPL,SAE,2025-01-02,Call option,2025-03-21,open,1,2,150,148\n"
            "MSFT,SAE,2025-01-02,Call option,2025-03-21,open,zero,2,150,148\n"
        )
        result = runner.invoke(app, ["report", "import", str(path)])
        assert result.exit_code == 1
        assert _list() == []


class TestSocialCommands:
    def test_accounts(self):
        assert runner.invoke(app, ["accounts", "add", "Fidelity"]).exit_code == 0
        _add("AAPL", "SAE", "Call option")
        result = runner.invoke(app, ["accounts", "list", "-o", "json"])
        assert json.loads(result.output) == ["Fidelity", "SAE"]

        assert runner.invoke(app, ["accounts", "remove", "Fidelity"]).exit_code == 0
        assert runner.invoke(app, ["accounts", "remove", "Fidelity"]).exit_code == 1

    def test_watchlist(self):
        _add("MSFT", "SAE", "Call option")
        assert runner.invoke(app, ["watchlist", "add", "tsla"]).exit_code == 0
        assert runner.invoke(app, ["watchlist", "add", "TSLA"]).exit_code == 1

        result = runner.invoke(app, ["watchlist", "list", "-o", "json"])
        assert json.loads(result.output)["tickers"] == ["MSFT", "TSLA"]

    def test_feed(self):
        trade = _add("AAPL", "SAE", "Call option")
        shared = runner.invoke(app, ["feed", "share", trade["id"], "-o", "json"])
        assert shared.exit_code == 0, shared.output
        assert json.loads(shared.output)["current_price"] is None

        entries = json.loads(runner.invoke(app, ["feed", "list", "-o", "json"]).output)
        assert [e["trade_id"] for e in entries] == [trade["id"]]

        assert runner.invoke(app, ["feed", "clear"]).exit_code == 0
        assert json.loads(runner.invoke(app, ["feed", "list", "-o", "json"]).output) == []


class TestLogging:
    @patch("options_journal.cli.app.logging.basicConfig")
    def test_level_from_config(self, mock_basic, monkeypatch):
        monkeypatch.setenv("OPTIONS_JOURNAL_LOG_LEVEL", "info")
        result = runner.invoke(app, ["trade", "list", "-o", "json"])
        assert result.exit_code == 0, result.output
        assert mock_basic.call_args.kwargs["level"] == "INFO"

    @patch("options_journal.cli.app.logging.basicConfig")
    def test_verbose_overrides_config(self, mock_basic, monkeypatch):
        monkeypatch.setenv("OPTIONS_JOURNAL_LOG_LEVEL", "ERROR")
        result = runner.invoke(app, ["-v", "trade", "list", "-o", "json"])
        assert result.exit_code == 0, result.output
        assert mock_basic.call_args.kwargs["level"] == "DEBUG"
