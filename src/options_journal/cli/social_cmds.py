"""Saved accounts, watchlist and shared-trade feed commands."""

from __future__ import annotations

from typing import Optional

import typer

from options_journal.cli.context import journal_session
from options_journal.cli.formatters import console, output_error, output_json, print_feed, print_quotes
from options_journal.cli.trade_cmds import OutputOption, OwnerOption
from options_journal.core.errors import JournalError
from options_journal.service.preferences import SavedAccounts, Watchlist
from options_journal.service.social import ShareFeed

accounts_app = typer.Typer(name="accounts", help="Saved account names.", no_args_is_help=True)
watchlist_app = typer.Typer(name="watchlist", help="Tickers to keep an eye on.", no_args_is_help=True)
feed_app = typer.Typer(name="feed", help="Share trades with friends.", no_args_is_help=True)


# ── Accounts ───────────────────────────────────────────────────────────────


@accounts_app.command("list")
def accounts_list(owner: Optional[str] = OwnerOption, output: Optional[str] = OutputOption):
    """List saved account names."""
    with journal_session(owner) as journal:
        accounts = SavedAccounts(journal.kv, journal.owner_id).list()
    if output == "json":
        output_json(accounts)
        return
    if not accounts:
        console.print("[dim]No saved accounts.[/dim]")
    for name in accounts:
        console.print(f"  {name}")


@accounts_app.command("add")
def accounts_add(name: str = typer.Argument(...), owner: Optional[str] = OwnerOption):
    """Save an account name."""
    with journal_session(owner) as journal:
        added = SavedAccounts(journal.kv, journal.owner_id).add(name)
    if added:
        console.print(f"[green]Saved account {name.strip()}[/green]")
    else:
        console.print(f"[yellow]Account {name.strip()!r} already saved or blank[/yellow]")


@accounts_app.command("remove")
def accounts_remove(name: str = typer.Argument(...), owner: Optional[str] = OwnerOption):
    """Forget an account name."""
    with journal_session(owner) as journal:
        removed = SavedAccounts(journal.kv, journal.owner_id).remove(name)
    if not removed:
        output_error(f"Account not found: {name}")
        return
    console.print(f"[green]Removed account {name}[/green]")


# ── Watchlist ──────────────────────────────────────────────────────────────


@watchlist_app.command("list")
def watchlist_list(
    quotes: bool = typer.Option(False, "--quotes", "-q", help="Fetch current prices"),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """List watched tickers, including every traded ticker."""
    with journal_session(owner) as journal:
        tickers = Watchlist(journal.kv, journal.owner_id).tickers(journal.trades())
        prices = journal.current_prices(tickers) if quotes else {}

    if output == "json":
        output_json({"tickers": tickers, "quotes": {k: v.model_dump(mode="json") for k, v in prices.items()}})
        return
    if quotes:
        print_quotes(prices)
        missing = [t for t in tickers if t not in prices]
        if missing:
            console.print(f"[dim]No quote for: {', '.join(missing)}[/dim]")
        return
    if not tickers:
        console.print("[dim]Watch list is empty.[/dim]")
    for t in tickers:
        console.print(f"  {t}")


@watchlist_app.command("add")
def watchlist_add(ticker: str = typer.Argument(...), owner: Optional[str] = OwnerOption):
    """Add a ticker to the watch list."""
    try:
        with journal_session(owner) as journal:
            symbol = Watchlist(journal.kv, journal.owner_id).add(ticker)
    except JournalError as e:
        output_error(str(e))
        return
    console.print(f"[green]Watching {symbol}[/green]")


@watchlist_app.command("remove")
def watchlist_remove(ticker: str = typer.Argument(...), owner: Optional[str] = OwnerOption):
    """Remove a ticker from the watch list."""
    with journal_session(owner) as journal:
        removed = Watchlist(journal.kv, journal.owner_id).remove(ticker)
    if not removed:
        output_error(f"{ticker.upper()} is not on the watch list")
        return
    console.print(f"[green]Stopped watching {ticker.upper()}[/green]")


# ── Feed ───────────────────────────────────────────────────────────────────


@feed_app.command("share")
def feed_share(
    trade_id: str = typer.Argument(..., help="Trade ID to share"),
    owner: Optional[str] = OwnerOption,
    output: Optional[str] = OutputOption,
):
    """Share a trade to the feed."""
    try:
        with journal_session(owner) as journal:
            entry = journal.share(trade_id)
    except JournalError as e:
        output_error(str(e), as_json=output == "json")
        return
    if output == "json":
        output_json(entry)
        return
    console.print(f"[green]Shared {entry.ticker} trade as {entry.id}[/green]")


@feed_app.command("list")
def feed_list(owner: Optional[str] = OwnerOption, output: Optional[str] = OutputOption):
    """Show the shared-trade feed, newest first."""
    with journal_session(owner) as journal:
        entries = ShareFeed(journal.kv, journal.owner_id, limit=journal.feed_limit).entries()
    if output == "json":
        output_json(entries)
        return
    print_feed(entries)


@feed_app.command("clear")
def feed_clear(owner: Optional[str] = OwnerOption):
    """Remove every shared trade from the feed."""
    with journal_session(owner) as journal:
        ShareFeed(journal.kv, journal.owner_id).clear()
    console.print("[green]Feed cleared[/green]")
