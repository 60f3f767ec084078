"""Trade CLI commands - add, edit, close, list."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from pydantic import ValidationError

from options_journal.cli.context import journal_session
from options_journal.cli.formatters import (
    console,
    output_error,
    output_json,
    print_grouped_trades,
    print_trades_table,
)
from options_journal.core.enums import SortDirection
from options_journal.core.errors import JournalError, TradeValidationError
from options_journal.core.models import TradeDraft
from options_journal.ledger.filters import TradeFilter

logger = logging.getLogger(__name__)

app = typer.Typer(name="trade", help="Log, edit and list option trades.", no_args_is_help=True)

OwnerOption = typer.Option(None, "--owner", help="Owner id (defaults to configured owner)")
OutputOption = typer.Option(None, "--output", "-o", help="Output format: json")


def build_filter(
    status: Optional[str] = None,
    account: Optional[str] = None,
    ticker: Optional[str] = None,
    option_type: Optional[str] = None,
    audited: Optional[str] = None,
    exercised: Optional[str] = None,
    **ranges: Optional[str],
) -> TradeFilter:
    try:
        return TradeFilter.from_params(
            status=status,
            account=account,
            ticker=ticker,
            option_type=option_type,
            audited=audited,
            exercised=exercised,
            **ranges,
        )
    except ValueError as e:
        raise TradeValidationError(f"Invalid filter: {e}") from e


@app.command("add")
def add(
    ticker: str = typer.Argument(..., help="Underlying symbol"),
    account: str = typer.Argument(..., help="Account label"),
    option_type: str = typer.Argument(..., help="Option type, or 'Other' with --custom-type"),
    strike: float = typer.Option(0.0, "--strike", "-s", help="Strike price"),
    contracts: int = typer.Option(1, "--contracts", "-n", help="Number of contracts"),
    cost: Optional[float] = typer.Option(None, "--cost", "-c", help="Premium paid per contract"),
    expiration: Optional[str] = typer.Option(None, "--expiration", "-e", help="Expiration (YYYY-MM-DD or MM/DD/YYYY)"),
    price_at_purchase: float = typer.Option(0.0, "--price", help="Underlying price at entry"),
    unrealized_pl: Optional[float] = typer.Option(None, "--unrealized-pl", help="Unrealized P&L"),
    custom_type: Optional[str] = typer.Option(None, "--custom-type", help="Custom type when option type is 'Other'"),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """Log a new open trade dated today."""
    as_json = output == "json"
    try:
        try:
            draft = TradeDraft(
                ticker=ticker,
                account=account,
                option_type=option_type,
                custom_option_type=custom_type,
                contracts=contracts,
                cost=cost,
                strike_price=strike,
                price_at_purchase=price_at_purchase,
                expiration_date=expiration,
                unrealized_pl=unrealized_pl,
            )
        except ValidationError as e:
            raise TradeValidationError.from_pydantic(e) from e
        with journal_session(owner) as journal:
            record = journal.add_trade(draft)
    except (JournalError, ValueError) as e:
        output_error(str(e), as_json=as_json)
        return

    if as_json:
        output_json(record)
        return
    pmcc = f" (PMCC break-even ${record.pmcc_calc:,.4f})" if record.pmcc_calc is not None else ""
    console.print(
        f"[green]Added trade {record.id}:[/green] {record.option_type} {record.ticker}"
        f" x{record.contracts} @ ${record.strike_price:,.2f}{pmcc}"
    )


@app.command("edit")
def edit(
    trade_id: str = typer.Argument(..., help="Trade ID"),
    field: str = typer.Argument(..., help="Field name, e.g. cost, strike_price, realized_pl"),
    value: str = typer.Argument(..., help="New value"),
    custom_type: Optional[str] = typer.Option(None, "--custom-type", help="Custom type when value is 'Other'"),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """Change one field of a trade; derived fields are recalculated."""
    as_json = output == "json"
    try:
        with journal_session(owner) as journal:
            record = journal.edit(trade_id, field, value, custom_option_type=custom_type)
    except JournalError as e:
        output_error(str(e), as_json=as_json)
        return

    if as_json:
        output_json(record)
        return
    console.print(f"[green]Updated {field} on trade {record.id}[/green]")


@app.command("close")
def close(
    trade_id: str = typer.Argument(..., help="Trade ID to close"),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """Mark a trade closed as of today."""
    as_json = output == "json"
    try:
        with journal_session(owner) as journal:
            record = journal.close(trade_id)
    except JournalError as e:
        output_error(str(e), as_json=as_json)
        return
    if as_json:
        output_json(record)
        return
    console.print(f"[green]Closed trade {record.id} on {record.closed_date}[/green]")


@app.command("reopen")
def reopen(
    trade_id: str = typer.Argument(..., help="Trade ID to reopen"),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """Reopen a closed trade and clear its closed date."""
    as_json = output == "json"
    try:
        with journal_session(owner) as journal:
            record = journal.reopen(trade_id)
    except JournalError as e:
        output_error(str(e), as_json=as_json)
        return
    if as_json:
        output_json(record)
        return
    console.print(f"[green]Reopened trade {record.id}[/green]")


@app.command("delete")
def delete(
    trade_id: str = typer.Argument(..., help="Trade ID to delete"),
    owner: Optional[str] = OwnerOption,
):
    """Delete a single trade."""
    try:
        with journal_session(owner) as journal:
            journal.delete(trade_id)
    except JournalError as e:
        output_error(str(e))
        return
    console.print(f"[green]Deleted trade {trade_id}[/green]")


@app.command("clear")
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    owner: Optional[str] = OwnerOption,
):
    """Delete every trade for the owner."""
    if not yes:
        typer.confirm("Delete ALL trades? This cannot be undone.", abort=True)
    try:
        with journal_session(owner) as journal:
            count = journal.clear()
    except JournalError as e:
        output_error(str(e))
        return
    console.print(f"[green]Deleted {count} trade(s)[/green]")


@app.command("show")
def show(
    trade_id: str = typer.Argument(..., help="Trade ID"),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """Show a single trade."""
    as_json = output == "json"
    try:
        with journal_session(owner) as journal:
            record = journal.get(trade_id)
    except JournalError as e:
        output_error(str(e), as_json=as_json)
        return
    if as_json:
        output_json(record)
        return
    print_trades_table([record], title=f"Trade {record.id}")


@app.command("list")
def list_trades(
    status: Optional[str] = typer.Option(None, "--status", help="open, closed or all"),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Exact account"),
    ticker: Optional[str] = typer.Option(None, "--ticker", "-t", help="Ticker substring"),
    option_type: Optional[str] = typer.Option(None, "--type", help="Exact option type"),
    audited: Optional[str] = typer.Option(None, "--audited", help="true, false or all"),
    exercised: Optional[str] = typer.Option(None, "--exercised", help="true, false or all"),
    strike_min: Optional[str] = typer.Option(None, "--min-strike"),
    strike_max: Optional[str] = typer.Option(None, "--max-strike"),
    cost_min: Optional[str] = typer.Option(None, "--min-cost"),
    cost_max: Optional[str] = typer.Option(None, "--max-cost"),
    realized_min: Optional[str] = typer.Option(None, "--min-realized"),
    realized_max: Optional[str] = typer.Option(None, "--max-realized"),
    unrealized_min: Optional[str] = typer.Option(None, "--min-unrealized"),
    unrealized_max: Optional[str] = typer.Option(None, "--max-unrealized"),
    traded_from: Optional[str] = typer.Option(None, "--traded-from"),
    traded_to: Optional[str] = typer.Option(None, "--traded-to"),
    expires_from: Optional[str] = typer.Option(None, "--expires-from"),
    expires_to: Optional[str] = typer.Option(None, "--expires-to"),
    closed_from: Optional[str] = typer.Option(None, "--closed-from"),
    closed_to: Optional[str] = typer.Option(None, "--closed-to"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Field to sort by"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    group: bool = typer.Option(False, "--group", "-g", help="Group by account and status"),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """List trades with optional filters and sorting."""
    as_json = output == "json"
    direction = SortDirection.DESC if desc else SortDirection.ASC
    try:
        criteria = build_filter(
            status=status,
            account=account,
            ticker=ticker,
            option_type=option_type,
            audited=audited,
            exercised=exercised,
            strike_price_min=strike_min,
            strike_price_max=strike_max,
            cost_min=cost_min,
            cost_max=cost_max,
            realized_pl_min=realized_min,
            realized_pl_max=realized_max,
            unrealized_pl_min=unrealized_min,
            unrealized_pl_max=unrealized_max,
            trading_date_from=traded_from,
            trading_date_to=traded_to,
            expiration_date_from=expires_from,
            expiration_date_to=expires_to,
            closed_date_from=closed_from,
            closed_date_to=closed_to,
        )
        with journal_session(owner) as journal:
            if group:
                groups = journal.grouped(criteria, sort, direction)
                trades = [t for g in groups for t in g.open + g.closed]
            else:
                trades = journal.trades(criteria, sort, direction)
    except (JournalError, ValueError) as e:
        output_error(str(e), as_json=as_json)
        return

    if as_json:
        output_json(trades)
        return

    if criteria.active_count:
        console.print(f"[dim]{criteria.active_count} active filter(s)[/dim]")
    if group:
        print_grouped_trades(groups)
    else:
        print_trades_table(trades)
