"""Output formatters for the CLI - JSON and rich table output."""

from __future__ import annotations

import json
import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from options_journal.core.models import TradeRecord
from options_journal.ledger.grouping import AccountGroup

console = Console()
err_console = Console(stderr=True)


def output_json(data: Any, file=None) -> None:
    """Write JSON output to stdout."""
    file = file or sys.stdout
    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")
    elif isinstance(data, list) and data and hasattr(data[0], "model_dump"):
        data = [item.model_dump(mode="json") for item in data]
    print(json.dumps(data, indent=2, default=str), file=file)


def output_error(message: str, code: int = 1, as_json: bool = False) -> None:
    """Report an error and exit."""
    if as_json:
        output_json({"error": message, "code": code}, file=sys.stderr)
    else:
        err_console.print(f"[red]{message}[/red]")
    raise SystemExit(code)


def fmt_money(amount: float | None) -> str:
    if amount is None:
        return "N/A"
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def fmt_pl(amount: float | None) -> str:
    if amount is None:
        return "[dim]N/A[/dim]"
    if amount == 0:
        return fmt_money(amount)
    color = "green" if amount > 0 else "red"
    return f"[{color}]{fmt_money(amount)}[/{color}]"


def fmt_pct(value: float | None) -> str:
    return "N/A" if value is None else f"{value:.2f}%"


def _trades_table(title: str, trades: list[TradeRecord]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Account")
    table.add_column("Traded")
    table.add_column("Ticker", style="cyan")
    table.add_column("Type")
    table.add_column("Strike", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Expires")
    table.add_column("Status")
    table.add_column("Realized", justify="right")
    table.add_column("Unrealized", justify="right")
    table.add_column("PMCC", justify="right")
    table.add_column("Exp. Ret", justify="right")
    table.add_column("Aud", justify="center")
    table.add_column("Exer", justify="center")
    table.add_column("Closed")

    for t in trades:
        table.add_row(
            t.id,
            t.account,
            str(t.trading_date),
            t.ticker,
            t.option_type,
            fmt_money(t.strike_price),
            str(t.contracts),
            fmt_money(t.cost),
            str(t.expiration_date or ""),
            t.status.value,
            fmt_pl(t.realized_pl),
            fmt_pl(t.unrealized_pl),
            fmt_money(t.pmcc_calc),
            fmt_pct(t.expected_return),
            "✓" if t.audited else "",
            "✓" if t.exercised else "",
            str(t.closed_date or ""),
        )
    return table


def print_trades_table(trades: list[TradeRecord], title: str = "Trades") -> None:
    if not trades:
        console.print("[dim]No trades match the current filters.[/dim]")
        return
    console.print(_trades_table(f"{title} ({len(trades)})", trades))


def print_grouped_trades(groups: list[AccountGroup]) -> None:
    if not groups:
        console.print("[dim]No trades match the current filters.[/dim]")
        return
    for group in groups:
        if group.open:
            console.print(_trades_table(f"{group.account} - Open ({len(group.open)})", group.open))
        if group.closed:
            console.print(_trades_table(f"{group.account} - Closed ({len(group.closed)})", group.closed))


def print_dashboard(dashboard: Any) -> None:
    """Print a rich summary of dashboard totals."""
    s = dashboard.summary
    table = Table(title="Dashboard")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Total Trades", str(s.total_trades))
    table.add_row("Open Trades", str(s.open_trades))
    table.add_row("Closed Trades", str(s.closed_trades))
    table.add_row("Total $ Traded", fmt_money(s.total_dollars_traded))
    table.add_row("Total Cost", fmt_money(s.total_cost))
    table.add_row("Realized P&L", fmt_pl(s.total_realized_pl))
    table.add_row("Unrealized P&L", fmt_pl(s.total_unrealized_pl))
    table.add_row("Overall P&L", fmt_pl(s.overall_pl))

    pace = dashboard.pace
    if pace.start_trading_date is not None:
        table.add_row("", "")
        table.add_row("Trading Since", str(pace.start_trading_date))
        table.add_row("Days Trading", str(pace.days_trading))
        table.add_row("$ Per Day", fmt_pl(pace.dollars_per_day))

    console.print(table)


def print_quotes(quotes: dict[str, Any]) -> None:
    table = Table(title="Quotes")
    table.add_column("Ticker", style="cyan")
    table.add_column("Price", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Change %", justify="right")
    for symbol, q in quotes.items():
        color = "green" if q.change >= 0 else "red"
        table.add_row(
            symbol,
            fmt_money(q.price),
            f"[{color}]{q.change:+.2f}[/{color}]",
            f"[{color}]{q.change_percent:+.2f}%[/{color}]",
        )
    console.print(table)


def print_feed(entries: list[Any]) -> None:
    if not entries:
        console.print("[dim]No shared trades yet.[/dim]")
        return
    table = Table(title="Shared Trades")
    table.add_column("Shared", style="dim")
    table.add_column("By")
    table.add_column("Ticker", style="cyan")
    table.add_column("Type")
    table.add_column("Strike", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column("Status")
    table.add_column("P&L", justify="right")
    for e in entries:
        pl = (e.realized_pl or 0) + (e.unrealized_pl or 0)
        table.add_row(
            f"{e.shared_at:%Y-%m-%d %H:%M}",
            e.shared_by,
            e.ticker,
            e.option_type,
            fmt_money(e.strike_price),
            str(e.contracts),
            e.status,
            fmt_pl(pl),
        )
    console.print(table)
