"""Dashboard and CSV import/export commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from options_journal.cli.context import journal_session, load_config
from options_journal.cli.formatters import console, output_error, output_json, print_dashboard
from options_journal.cli.trade_cmds import OutputOption, OwnerOption, build_filter
from options_journal.core.dates import parse_date
from options_journal.core.enums import SortDirection
from options_journal.core.errors import ImportValidationError, JournalError

app = typer.Typer(name="report", help="Dashboard totals and CSV import/export.", no_args_is_help=True)


@app.command("dashboard")
def dashboard(
    status: Optional[str] = typer.Option(None, "--status", help="open, closed or all"),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Exact account"),
    ticker: Optional[str] = typer.Option(None, "--ticker", "-t", help="Ticker substring"),
    since: Optional[str] = typer.Option(
        None, "--since", help="Date you started trading options (for $ per day)"
    ),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """Show totals, P&L and dollars traded."""
    as_json = output == "json"
    try:
        start = parse_date(since) if since else load_config().start_trading_date
        criteria = build_filter(status=status, account=account, ticker=ticker)
        with journal_session(owner) as journal:
            result = journal.dashboard(criteria, start_trading_date=start)
    except (JournalError, ValueError) as e:
        output_error(str(e), as_json=as_json)
        return

    if as_json:
        output_json(result)
        return
    print_dashboard(result)


@app.command("export")
def export(
    path: Optional[Path] = typer.Argument(None, help="Destination CSV (stdout when omitted)"),
    status: Optional[str] = typer.Option(None, "--status", help="open, closed or all"),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Exact account"),
    ticker: Optional[str] = typer.Option(None, "--ticker", "-t", help="Ticker substring"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Field to sort by"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    owner: Optional[str] = OwnerOption,
):
    """Export trades (optionally filtered) to CSV."""
    direction = SortDirection.DESC if desc else SortDirection.ASC
    try:
        criteria = build_filter(status=status, account=account, ticker=ticker)
        with journal_session(owner) as journal:
            text = journal.export_csv(path, criteria, sort, direction)
    except (JournalError, ValueError) as e:
        output_error(str(e))
        return

    if path is None:
        sys.stdout.write(text or "")
    else:
        console.print(f"[green]Exported trades to {path}[/green]")


@app.command("import")
def import_trades(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV file to import"),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """Import trades from CSV. Any invalid row rejects the whole file."""
    as_json = output == "json"
    try:
        with journal_session(owner) as journal:
            records = journal.import_csv(path)
    except ImportValidationError as e:
        if as_json:
            output_json(
                {
                    "error": str(e),
                    "rows": [{"row": r.row, "fields": r.fields, "message": r.message} for r in e.rows],
                },
                file=sys.stderr,
            )
            raise typer.Exit(1)
        output_error(str(e))
        return
    except JournalError as e:
        output_error(str(e), as_json=as_json)
        return

    if as_json:
        output_json({"imported": len(records), "ids": [r.id for r in records]})
        return
    console.print(f"[green]Imported {len(records)} trade(s) from {path}[/green]")
